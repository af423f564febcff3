import structlog
from fastapi import Request
from fastapi.responses import PlainTextResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from chat_proxy.core.settings import Settings

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again after a minute."

log = structlog.get_logger()


def build_limiter(settings: Settings) -> Limiter:
    # Ventana fija de 1 minuto, un contador por IP para toda la app
    # (default_limits contaría cada ruta por separado)
    return Limiter(
        key_func=get_remote_address,
        application_limits=[f"{settings.rate_limit_per_minute}/minute"],
        storage_uri="memory://",
        strategy="fixed-window",
    )


# SlowAPIMiddleware invoca este handler de forma síncrona: no puede ser async.
def rate_limit_exceeded(request: Request, exc: RateLimitExceeded) -> PlainTextResponse:
    log.warning(
        "rate_limit_exceeded",
        client=get_remote_address(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    return PlainTextResponse(RATE_LIMIT_MESSAGE, status_code=429)
