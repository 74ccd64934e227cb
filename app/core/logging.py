# app/core/logging.py

"""
Logging setup shared by the API process and the management scripts.
"""

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    global _configured
    log_level = (level or settings.LOG_LEVEL).upper()
    if not _configured:
        logging.basicConfig(level=log_level, format=LOG_FORMAT)
        # SQL echo is controlled by DEBUG_MODE on the engine, not by the root level
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        _configured = True
    else:
        logging.getLogger().setLevel(log_level)
