from loguru import logger
from pathlib import Path
from typing import Optional
import sys

from ..config import settings


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = "logs/app.log"):
    """Setup logging configuration."""
    # Remove default logger
    logger.remove()

    # Console logger
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True,
    )

    # File logger
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} - {message}",
            level=log_level,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
        )

    return logger.bind(component="app")


# Initialize logger
logger.configure(extra={"component": "app"})
app_logger = setup_logging(settings.log_level, settings.log_file)
