"""Report routes."""

from __future__ import annotations

from flask import Blueprint, current_app

from lotto_archive.db import get_session
from lotto_archive.services.report_service import ReportService
from lotto_archive.utils.responses import html, ok

reports_bp = Blueprint("reports", __name__)

_service = ReportService()


@reports_bp.get("/<date_text>")
def show_report(date_text: str):
    return html(_service.render(get_session(), date_text))


@reports_bp.post("/<date_text>")
def save_report(date_text: str):
    path = _service.save(get_session(), date_text, str(current_app.config["REPORT_PATH"]))
    return ok({"path": str(path)}, status_code=201)
