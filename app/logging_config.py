"""
logging_config.py — Centralized Logging Configuration

Loguru is the only logging backend. Stdlib logging (our
logging.getLogger("inquiry.*") loggers, uvicorn, httpx, alembic) is
intercepted and re-emitted through Loguru, so one set of sinks sees it all.

Business Rules:
- No print() in application code; scripts/board_cli.py output is the exception
- APP_ENV=production: JSON lines on stdout; anything else: coloured text
- Every record carries extra.request_id ("-" outside a request); main.py
  binds the real one per request with logger.contextualize()
- LOG_LEVEL env var controls verbosity (default INFO)
- LOG_FILE adds a file sink: 50MB rotation, 7-day retention, gzip

Called by: app/main.py (lifespan), scripts/*
Depends on: nothing (reads env directly so it can run before settings load)
"""

import logging
import os
import sys

from loguru import logger

_DEV_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)

_QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")


def setup_logging() -> None:
    """Configure Loguru sinks and intercept stdlib logging. Safe to call twice."""
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    production = os.getenv("APP_ENV", "").lower() == "production"

    if production:
        logger.add(sys.stdout, level=level, format="{message}", serialize=True)
    else:
        logger.add(sys.stdout, level=level, format=_DEV_FORMAT, colorize=True)

    log_file = os.getenv("LOG_FILE")
    if log_file:
        logger.add(
            log_file,
            level=level,
            rotation="50 MB",
            retention="7 days",
            compression="gz",
            serialize=production,
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging configured", level=level, production=production)


class _InterceptHandler(logging.Handler):
    """Bridge from stdlib logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk past logging's own frames so Loguru reports the real caller
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
