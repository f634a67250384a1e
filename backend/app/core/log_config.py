"""
Process-wide logging setup.
"""
import logging

from app.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once for the whole process."""
    if level is None:
        level = get_settings().log_level

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # uvicorn access lines are noisy next to our own request logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
