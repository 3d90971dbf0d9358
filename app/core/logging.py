import logging
import sys

from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.config import get_settings

LOG_DIR = Path("logs")
LOG_FILE = "song-suggestions.log"

# Loggers from libraries that are too chatty at INFO
NOISY_LOGGERS = ("pymongo", "httpx", "httpcore", "multipart")


class LogColors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


class ColoredFormatter(logging.Formatter):
    """Formatter that paints the level name for terminal output"""

    COLORS = {
        logging.DEBUG: LogColors.GRAY,
        logging.INFO: LogColors.GREEN,
        logging.WARNING: LogColors.YELLOW,
        logging.ERROR: LogColors.RED,
        logging.CRITICAL: LogColors.MAGENTA,
    }

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.COLORS.get(record.levelno)
        if color:
            record.levelname = f"{color}{original}{LogColors.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def _build_formatter(colored: bool) -> logging.Formatter:
    if colored:
        return ColoredFormatter(
            fmt="%(levelname)s:\t%(asctime)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    return logging.Formatter(
        fmt="%(levelname)s:%(asctime)s:%(name)s:%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


def setup_logging() -> None:
    """
    Configure the root logger for the service.

    Call once, before the FastAPI app is created. Development gets coloured
    console output; production gets a plain format on stdout plus a
    rotating log file under ``logs/``.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)
    root_logger.handlers.clear()

    formatter = _build_formatter(colored=settings.is_development)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.is_production:
        LOG_DIR.mkdir(exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=LOG_DIR / LOG_FILE,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Let uvicorn records propagate to the root handler
    for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Usage:
        from app.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
