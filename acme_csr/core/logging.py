"""Logging setup shared by the API, the Celery worker and the CLI"""

import logging

from .config import settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = None) -> None:
    """Install the root handler once; later calls only adjust the level."""
    resolved = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)

    # Third-party clients are chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
