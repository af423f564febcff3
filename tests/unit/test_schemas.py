"""
Unit tests for request validation in chat_proxy/schemas.py
"""
import pytest

from chat_proxy.errors import InvalidRequest
from chat_proxy.schemas import ChatRequest, validate_chat_request


def test_valid_message():
    assert validate_chat_request({"message": "hello"}) == ChatRequest(message="hello")


def test_whitespace_message_is_not_empty():
    assert validate_chat_request({"message": "   "}).message == "   "


@pytest.mark.parametrize(
    "body",
    [None, [], "hello", {}, {"message": ""}, {"message": None}, {"message": 1}, {"message": ["hi"]}],
)
def test_invalid_bodies(body):
    with pytest.raises(InvalidRequest) as exc_info:
        validate_chat_request(body)

    assert exc_info.value.message == "Message is required"
