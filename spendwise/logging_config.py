import logging
import logging.handlers
import os
import sys
import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request

APP_LOGGER_NAME = "spendwise"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log inside this process: SQL echo, migrations, the ASGI server
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "alembic", "uvicorn.access", "uvicorn.error")


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the "spendwise" logger tree once at startup.

    Levels fall back to APP_LOG_LEVEL / THIRD_PARTY_LOG_LEVEL and the file to
    LOG_FILE. Records always go to stdout; with a log file they are also
    written to a size-rotated file. Calling it again replaces the handlers.

    Args:
        app_log_level: Level for spendwise.* loggers (default: INFO)
        third_party_log_level: Level for QUIET_LOGGERS (default: WARNING)
        log_file: Optional path of the rotating log file
        max_file_size: Rotation size in bytes
        backup_count: Rotated files kept

    Returns:
        The "spendwise" logger
    """
    app_level = getattr(logging, (app_log_level or os.getenv("APP_LOG_LEVEL", "INFO")).upper(), logging.INFO)
    third_party_level = getattr(
        logging, (third_party_log_level or os.getenv("THIRD_PARTY_LOG_LEVEL", "WARNING")).upper(), logging.WARNING
    )
    log_file = log_file or os.getenv("LOG_FILE")

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)
    app_logger.handlers.clear()
    app_logger.propagate = False

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count
        ))

    for handler in handlers:
        handler.setLevel(app_level)
        handler.setFormatter(formatter)
        app_logger.addHandler(handler)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(third_party_level)

    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """Logger under the spendwise tree; bare names get the prefix added."""
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def setup_request_logging(app: FastAPI) -> None:
    """
    Log one line per request: method, path, status code and duration.
    """
    request_logger = get_logger("spendwise.requests")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        request_logger.info(
            f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms"
        )
        return response
