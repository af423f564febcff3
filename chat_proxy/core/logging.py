import logging
import sys

import structlog


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    log_level = _level(level)
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # uvicorn / httpx / openai siguen usando logging stdlib
    logging.basicConfig(level=log_level, stream=sys.stdout)
    logging.getLogger().setLevel(log_level)
    for noisy in ("uvicorn.access", "uvicorn.error", "httpx", "openai"):
        logging.getLogger(noisy).setLevel(max(log_level, logging.INFO))
