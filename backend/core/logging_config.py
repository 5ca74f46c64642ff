# backend/core/logging_config.py

"""
Logging setup for the API process.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the service."""
    if level is None:
        from .config import settings

        level = settings.log_level

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

    # SQLAlchemy is chatty at INFO; engine echo is controlled separately
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
