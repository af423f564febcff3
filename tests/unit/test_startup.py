"""
Unit tests for process startup (run) and logging setup.
"""
import logging
from unittest.mock import patch

import pytest
import structlog

from chat_proxy.core.logging import configure_logging
from chat_proxy.main import run


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("PROVIDER", "OPENAI_API_KEY", "PORT", "HOST", "PROMPT_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestRun:

    def test_exits_without_api_key(self, clean_env):
        with patch("chat_proxy.main.uvicorn.run") as mock_run, \
             patch("chat_proxy.main.configure_logging"):
            with pytest.raises(SystemExit) as exc_info:
                run()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_exits_with_unknown_prompt_profile(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("PROMPT_PROFILE", "nope")

        with patch("chat_proxy.main.uvicorn.run") as mock_run, \
             patch("chat_proxy.main.configure_logging"):
            with pytest.raises(SystemExit) as exc_info:
                run()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_starts_server(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-env")
        clean_env.setenv("PORT", "8123")

        with patch("chat_proxy.main.uvicorn.run") as mock_run, \
             patch("chat_proxy.main.configure_logging") as mock_logging:
            run()

        mock_logging.assert_called_once_with("INFO")
        mock_run.assert_called_once()
        _, kwargs = mock_run.call_args
        assert kwargs == {"host": "0.0.0.0", "port": 8123}


class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()
        logging.getLogger().setLevel(logging.WARNING)

    def test_sets_levels(self):
        configure_logging("DEBUG")

        assert structlog.is_configured()
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.INFO

    def test_unknown_level_falls_back_to_info(self):
        configure_logging("LOUD")

        assert logging.getLogger().level == logging.INFO
