"""
Logging setup shared by the API process and the Celery worker
"""

import logging

from listing_shield.core.config import settings


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once per process"""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
