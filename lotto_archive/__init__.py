"""Thai Government Lottery result archive (Flask application package)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from dotenv import load_dotenv
from flask import Flask


def create_app(config_overrides: Mapping[str, Any] | None = None, fetcher: Any | None = None) -> Flask:
    """Application factory.

    Args:
        config_overrides: values applied on top of the environment config.
        fetcher: replacement for the GLO client (tests inject a fake).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from lotto_archive.config import get_config
    from lotto_archive.db import init_db
    from lotto_archive.error_handlers import register_error_handlers
    from lotto_archive.logging_config import configure_logging
    from lotto_archive.routes.draws import draws_bp
    from lotto_archive.routes.health import health_bp
    from lotto_archive.routes.ingest import ingest_bp
    from lotto_archive.routes.reports import reports_bp
    from lotto_archive.services.fetcher import GloFetcher
    from lotto_archive.services.ingestion_service import IngestionService
    from lotto_archive.services.rate_limiter import shared_rate_limiter

    app = Flask(__name__)
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app)
    init_db(app)
    register_error_handlers(app)

    if fetcher is None:
        url = str(app.config["GLO_API_URL"])
        fetcher = GloFetcher(
            url=url,
            rate_limiter=shared_rate_limiter(url, float(app.config["FETCH_MIN_INTERVAL_SECONDS"])),
            timeout_seconds=float(app.config["FETCH_TIMEOUT_SECONDS"]),
        )
    app.extensions["ingestion_service"] = IngestionService(app.extensions["session_factory"], fetcher)

    app.register_blueprint(health_bp)
    app.register_blueprint(ingest_bp, url_prefix="/ingest")
    app.register_blueprint(draws_bp)
    app.register_blueprint(reports_bp, url_prefix="/reports")

    return app
