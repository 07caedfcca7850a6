from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once for the process.

    Called before uvicorn starts so workers inherit the same handlers.
    """
    if level is None:
        from realty_demo.config import settings

        level = settings.log_level

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        force=True,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("realty_demo").debug("Logging configured (level=%s)", level)
