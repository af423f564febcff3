"""
Shared pytest fixtures for the chat proxy tests.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from chat_proxy.completion.client import CompletionClient, Ok
from chat_proxy.completion.prompt import PromptTemplate
from chat_proxy.core.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings built without reading .env or requiring real credentials."""
    return Settings(_env_file=None, provider="openai", openai_api_key="sk-test")


@pytest.fixture
def template():
    return PromptTemplate(system_prompt="You are a test assistant.", max_tokens=200, temperature=0.8)


@pytest.fixture
def completion_client(template):
    """Stand-in for CompletionClient; returns a fixed reply by default."""
    client = MagicMock(spec=CompletionClient)
    client.template = template
    client.complete = AsyncMock(return_value=Ok("Hello from the model"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def app(settings, completion_client):
    from chat_proxy.main import create_app

    return create_app(settings, completion_client=completion_client)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
