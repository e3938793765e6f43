"""Centralized error handlers.

Nothing leaves the API as an unstructured failure: every exception is
mapped onto the error envelope.
"""

from __future__ import annotations

import logging

from flask import Flask
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from lotto_archive.errors import AppError, StorageUnavailableError, ValidationError, WriteError
from lotto_archive.utils.responses import fail, fail_with

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """Register error handlers for the Flask app."""

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status_code >= 500:
            logger.warning("%s: %s", exc.code, exc.message)
        return fail_with(exc)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError):
        # exc.messages is a dict of field -> list[str]
        return fail_with(ValidationError(details=exc.messages))

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(exc: IntegrityError):
        logger.info("Integrity error", exc_info=exc)
        return fail_with(WriteError(message="Conflicting write", details=str(exc.orig or exc)))

    @app.errorhandler(OperationalError)
    def _handle_operational_error(exc: OperationalError):
        logger.error("Database unavailable", exc_info=exc)
        return fail_with(StorageUnavailableError(details=str(exc.orig or exc)))

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException):
        status = int(getattr(exc, "code", 500) or 500)
        if status == 404:
            return fail("not_found", "Not found", 404)

        return fail(
            "http_error",
            getattr(exc, "description", "HTTP error"),
            status,
            details={"name": getattr(exc, "name", "HTTPException")},
        )

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception")
        return fail("internal_error", "Internal server error", 500)
