"""Health check routes."""

from __future__ import annotations

from flask import Blueprint
from sqlalchemy import func, select, text

from lotto_archive.db import get_session
from lotto_archive.models.lottery_result import LotteryResult
from lotto_archive.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Liveness plus a storage round trip."""

    session = get_session()
    session.execute(text("SELECT 1"))
    stored = session.scalar(select(func.count()).select_from(LotteryResult)) or 0
    return ok({"status": "ok", "stored_draws": int(stored)})
