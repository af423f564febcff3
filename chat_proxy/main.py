import sys
from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# --- imports internos ---
from chat_proxy.completion.client import CompletionClient, Err, build_openai_client
from chat_proxy.completion.prompt import load_prompt_template
from chat_proxy.core.logging import configure_logging
from chat_proxy.core.ratelimit import build_limiter, rate_limit_exceeded
from chat_proxy.core.settings import Settings, get_settings
from chat_proxy.errors import UPSTREAM_ERROR_MESSAGE, InvalidRequest, StartupConfigurationError
from chat_proxy.schemas import ChatError, ChatReply, validate_chat_request

LIVENESS_TEXT = "Backend is live!"

log = structlog.get_logger()


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


async def invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
    log.info("chat_request_invalid", path=request.url.path)
    return JSONResponse(status_code=400, content={"error": exc.message})


async def _read_json(request: Request):
    # Cuerpo vacío, JSON inválido o demasiado anidado: igual que un mensaje ausente
    try:
        return await request.json()
    except (ValueError, RecursionError):
        return None


def create_app(
    settings: Optional[Settings] = None,
    completion_client: Optional[CompletionClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    if completion_client is None:
        completion_client = CompletionClient(
            client=build_openai_client(settings),
            model=settings.completion_model,
            template=load_prompt_template(settings),
        )

    # --------------------------------------------------------------------------
    # Hooks de ciclo de vida
    # --------------------------------------------------------------------------
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(
            "startup",
            app=settings.app_name,
            debug=settings.debug,
            provider=settings.provider,
            model=settings.completion_model,
            prompt_profile=settings.prompt_profile,
            max_tokens=completion_client.template.max_tokens,
            temperature=completion_client.template.temperature,
        )
        yield
        await completion_client.close()
        log.info("shutdown", app=settings.app_name)

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    app.state.completion_client = completion_client

    # --------------------------------------------------------------------------
    # Middlewares: rate limit por IP + CORS
    # --------------------------------------------------------------------------
    app.state.limiter = build_limiter(settings)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded)
    app.add_exception_handler(InvalidRequest, invalid_request_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=False,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )

    # --------------------------------------------------------------------------
    # Rutas base
    # --------------------------------------------------------------------------
    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root():
        return LIVENESS_TEXT

    @app.get("/health")
    async def health():
        return {
            "app": settings.app_name,
            "debug": settings.debug,
            "provider": settings.provider,
            "model": settings.completion_model,
            "prompt_profile": settings.prompt_profile,
        }

    @app.get("/health/live")
    async def health_live():
        return {"status": "ok"}

    # --------------------------------------------------------------------------
    # Endpoint principal
    # --------------------------------------------------------------------------
    @app.post(
        "/api/chat",
        response_model=ChatReply,
        responses={400: {"model": ChatError}, 429: {"description": "Too many requests"}, 500: {"model": ChatError}},
    )
    async def chat(request: Request, client: CompletionClient = Depends(get_completion_client)):
        payload = validate_chat_request(await _read_json(request))

        result = await client.complete(payload.message)
        if isinstance(result, Err):
            return JSONResponse(status_code=500, content={"error": UPSTREAM_ERROR_MESSAGE})

        log.info("chat_request_ok", chars=len(result.text))
        return ChatReply(reply=result.text)

    return app


def run() -> None:
    try:
        settings = get_settings()
        app = create_app(settings)
    except StartupConfigurationError as e:
        configure_logging()
        log.error("startup_configuration_error", error=str(e))
        sys.exit(1)

    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
