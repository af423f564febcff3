from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from chat_proxy.errors import InvalidRequest


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: StrictStr = Field(..., min_length=1, description="Mensaje del usuario")


class ChatReply(BaseModel):
    reply: str


class ChatError(BaseModel):
    error: str


def validate_chat_request(body: Any) -> ChatRequest:
    if not isinstance(body, dict):
        raise InvalidRequest()
    try:
        return ChatRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidRequest() from e
