import re
import sys
from loguru import logger as loguru_logger

from parkpass.config.settings_env import settings


def initialize_logger():
    """Initialize the logger based on DEV_MODE setting."""
    loguru_logger.remove()

    if settings.DEV_MODE:
        loguru_logger.add(sys.stderr, level="TRACE")
    else:
        loguru_logger.add(sys.stderr, level="INFO")

    return loguru_logger


def slugify(value: str) -> str:
    """Lowercase, ASCII-only, dash separated. ``"Main St. Garage"`` -> ``"main-st-garage"``."""
    value = value.strip().lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    return value.strip("-") or "lot"


# Initialize logger
logger = initialize_logger()
