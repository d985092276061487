"""
Aby Logging Configuration
Centralized logging setup for the Aby application
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, Optional
from .config import settings

ROOT_LOGGER = "aby_api"

MB = 1024 * 1024

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(funcName)s() - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Workflow services and sockets get their own files next to app.log
MODULE_LOG_FILES: Dict[str, str] = {
    "services.stock": "stock.log",
    "services.assets": "assets.log",
    "services.aquaculture": "aquaculture.log",
    "realtime": "realtime.log",
}


def _rotating_handler(
    path: Path,
    formatter: logging.Formatter,
    max_mb: int = 5,
    backups: int = 3,
    level: Optional[int] = None
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_mb * MB, backupCount=backups, encoding="utf-8"
    )
    handler.setFormatter(formatter)
    if level is not None:
        handler.setLevel(level)
    return handler


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    log_level: Optional[str] = None,
    log_to_file: Optional[bool] = None,
    log_to_console: bool = True
) -> logging.Logger:
    """
    Configure logging for the Aby application

    Modules log through ``logging.getLogger(__name__)``; everything under the
    ``aby_api`` namespace reaches the handlers installed here.

    Args:
        log_level: Logging level name, defaults to settings.LOG_LEVEL
        log_to_file: Write rotating log files under settings.LOG_DIR
            (defaults to settings.LOG_TO_FILE)
        log_to_console: Echo records to stdout

    Returns:
        The ``aby_api`` root logger
    """
    level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)
    if log_to_file is None:
        log_to_file = settings.LOG_TO_FILE

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    _reset_handlers(logger)

    file_formatter = logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT)

    if log_to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(console)

    log_dir = None
    if log_to_file:
        log_dir = settings.LOG_DIR
        log_dir.mkdir(exist_ok=True, parents=True)
        logger.addHandler(_rotating_handler(
            log_dir / settings.LOG_FILE, file_formatter, max_mb=10, backups=5, level=level
        ))
        logger.addHandler(_rotating_handler(
            log_dir / settings.ERROR_LOG_FILE, file_formatter, level=logging.ERROR
        ))

    setup_module_loggers(level, file_formatter, log_dir)
    return logger


def setup_module_loggers(
    level: int,
    file_formatter: logging.Formatter,
    log_dir: Optional[Path] = None
):
    """Attach the per-module files from MODULE_LOG_FILES plus security.log"""
    for name, filename in MODULE_LOG_FILES.items():
        module_logger = get_logger(name)
        module_logger.setLevel(level)
        _reset_handlers(module_logger)
        if log_dir:
            module_logger.addHandler(_rotating_handler(log_dir / filename, file_formatter))

    # Sign-ins and password changes stay at INFO whatever the app level is
    security_logger = get_logger("security")
    security_logger.setLevel(logging.INFO)
    _reset_handlers(security_logger)
    if log_dir:
        security_logger.addHandler(_rotating_handler(
            log_dir / "security.log", file_formatter, max_mb=10, backups=10
        ))


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the application namespace"""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_uvicorn_logging():
    """Copy uvicorn's access log into LOG_DIR when file logging is on"""
    if not settings.LOG_TO_FILE:
        return

    settings.LOG_DIR.mkdir(exist_ok=True, parents=True)
    logging.getLogger("uvicorn.access").addHandler(_rotating_handler(
        settings.LOG_DIR / settings.ACCESS_LOG_FILE,
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"),
        max_mb=10,
        backups=5,
    ))


__all__ = [
    'setup_logging',
    'setup_module_loggers',
    'get_logger',
    'setup_uvicorn_logging',
]
