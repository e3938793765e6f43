"""Helpers for the ``{success, data, error}`` JSON envelope."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify

from lotto_archive.errors import AppError


def ok(data: Any, status_code: int = 200) -> tuple[Response, int]:
    """Success response."""

    return jsonify({"success": True, "data": data, "error": None}), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    """Error response."""

    body = {
        "success": False,
        "data": None,
        "error": {"code": code, "message": message, "details": details},
    }
    return jsonify(body), status_code


def fail_with(exc: AppError) -> tuple[Response, int]:
    return fail(exc.code, exc.message, exc.status_code, exc.details)


def html(document: str, status_code: int = 200) -> Response:
    return Response(document, status=status_code, mimetype="text/html")
