from dataclasses import dataclass
from typing import Union

import openai
import structlog

from chat_proxy.completion.prompt import PromptTemplate, build_messages
from chat_proxy.core.settings import Settings
from chat_proxy.errors import UpstreamError

log = structlog.get_logger()


@dataclass(frozen=True)
class Ok:
    text: str


@dataclass(frozen=True)
class Err:
    error: UpstreamError


CompletionResult = Union[Ok, Err]


def build_openai_client(settings: Settings) -> openai.AsyncOpenAI:
    # Sin reintentos del SDK: cada request hace exactamente una llamada
    if settings.provider == "azure":
        return openai.AsyncAzureOpenAI(
            api_key=settings.azure_openai_api_key,
            api_version=settings.azure_openai_api_version,
            azure_endpoint=settings.azure_openai_endpoint,
            max_retries=0,
        )
    return openai.AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        max_retries=0,
    )


class CompletionClient:
    """Sends one system+user exchange to the chat completions API."""

    def __init__(self, client: openai.AsyncOpenAI, model: str, template: PromptTemplate):
        self.client = client
        self.model = model
        self.template = template

    async def complete(self, message: str) -> CompletionResult:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(self.template, message),
                max_tokens=self.template.max_tokens,
                temperature=self.template.temperature,
            )
        except openai.APIStatusError as e:
            log.error(
                "completion_upstream_error",
                error_type=type(e).__name__,
                status_code=e.status_code,
                payload=e.body,
            )
            return Err(UpstreamError("completion request rejected", status_code=e.status_code, detail=e.body))
        except Exception as e:
            log.error("completion_upstream_error", error_type=type(e).__name__, error=str(e))
            return Err(UpstreamError("completion request failed", detail=str(e)))

        try:
            text = completion.choices[0].message.content.strip()
        except (AttributeError, IndexError, TypeError) as e:
            log.error("completion_upstream_error", error_type="MalformedCompletion", error=str(e))
            return Err(UpstreamError("malformed completion payload", detail=str(e)))

        log.info("completion_ok", model=self.model, chars=len(text))
        return Ok(text)

    async def close(self) -> None:
        await self.client.close()
