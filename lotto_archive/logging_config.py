"""Logging configuration."""

from __future__ import annotations

import logging

from flask import Flask

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(app: Flask) -> None:
    """Configure root logging from ``LOG_LEVEL``.

    Note: Using stdlib logging only (no extra deps).
    """

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("lotto_archive").setLevel(level)

    # Engine echo and per-connection urllib3 chatter drown out the ingestion log.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)
