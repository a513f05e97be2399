# erp_backend/app/core/logging_config.py
import logging
import sys
from pathlib import Path
from typing import Iterable

from loguru import logger
from pydantic import BaseModel

# stdlib loggers that the API server writes to; routed into loguru sinks
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    console_enabled: bool = True
    console_level: str = "DEBUG"
    file_enabled: bool = True
    file_path: str = "logs/app.log"
    file_level: str = "INFO"
    rotation: str = "10 MB"
    retention: str = "7 days"
    intercept_server_logs: bool = True
    format: str = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"
    )


class InterceptHandler(logging.Handler):
    """Forwards stdlib log records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # walk out of the logging module so {name}:{function} point at the caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def intercept_stdlib_loggers(names: Iterable[str], level: str) -> None:
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.setLevel(level)
        std_logger.propagate = False


def setup_logging(config: LoggingConfig, project_root: Path) -> None:
    """
    Replaces loguru's default sink with the configured console and file
    sinks. Relative file paths resolve against the project root.
    """
    logger.remove()

    if config.console_enabled:
        logger.add(
            sys.stderr,
            level=config.console_level.upper(),
            format=config.format,
            colorize=True,
        )

    if config.file_enabled:
        log_file_path = Path(project_root) / config.file_path
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_file_path,
            level=config.file_level.upper(),
            rotation=config.rotation,
            retention=config.retention,
            format=config.format,
            encoding="utf-8",
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )

    if config.intercept_server_logs:
        intercept_stdlib_loggers(SERVER_LOGGERS, config.level.upper())

    logger.debug(
        f"Logging configured (console={config.console_enabled}, file={config.file_enabled}, "
        f"server logs intercepted={config.intercept_server_logs})."
    )
