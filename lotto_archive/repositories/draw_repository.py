"""Read-side persistence for stored draws.

``exists`` and ``existing_set`` are the dedup gateway used by ingestion; the
rest are the query projections behind the read API. Nothing here writes.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from lotto_archive.models.lottery_result import LotteryResult
from lotto_archive.models.prize_number import PrizeNumber


class DrawRepository:
    """Queries over ``lottery_results`` / ``prize_numbers``."""

    def exists(self, session: Session, draw_date: dt.date) -> bool:
        stmt = select(LotteryResult.id).where(LotteryResult.draw_date == draw_date).limit(1)
        return session.scalar(stmt) is not None

    def existing_set(self, session: Session, dates: Iterable[dt.date]) -> set[dt.date]:
        wanted = set(dates)
        if not wanted:
            return set()
        stmt = select(LotteryResult.draw_date).where(LotteryResult.draw_date.in_(wanted))
        return set(session.scalars(stmt).all())

    def get_by_date(self, session: Session, draw_date: dt.date) -> LotteryResult | None:
        stmt = (
            select(LotteryResult)
            .options(selectinload(LotteryResult.prizes))
            .where(LotteryResult.draw_date == draw_date)
        )
        return session.scalars(stmt).first()

    def list_latest(self, session: Session, limit: int) -> Sequence[LotteryResult]:
        stmt = select(LotteryResult).order_by(LotteryResult.draw_date.desc()).limit(limit)
        return list(session.scalars(stmt).all())

    def list_between(self, session: Session, start: dt.date, end: dt.date) -> Sequence[LotteryResult]:
        stmt = (
            select(LotteryResult)
            .where(LotteryResult.draw_date >= start, LotteryResult.draw_date <= end)
            .order_by(LotteryResult.draw_date.desc())
        )
        return list(session.scalars(stmt).all())

    def list_after(self, session: Session, start: dt.date, limit: int | None = None) -> Sequence[LotteryResult]:
        # Closest draws first, so a limit keeps the ones nearest to ``start``.
        stmt = (
            select(LotteryResult)
            .where(LotteryResult.draw_date >= start)
            .order_by(LotteryResult.draw_date.asc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.scalars(stmt).all())

    def list_before(self, session: Session, end: dt.date, limit: int | None = None) -> Sequence[LotteryResult]:
        stmt = (
            select(LotteryResult)
            .where(LotteryResult.draw_date <= end)
            .order_by(LotteryResult.draw_date.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(session.scalars(stmt).all())

    def prizes_by_category(self, session: Session, category: str) -> Sequence[PrizeNumber]:
        stmt = (
            select(PrizeNumber)
            .join(LotteryResult, PrizeNumber.lottery_id == LotteryResult.id)
            .where(PrizeNumber.category == category)
            .order_by(LotteryResult.draw_date.desc(), PrizeNumber.round_number.asc())
        )
        return list(session.scalars(stmt).all())

    def search_number(self, session: Session, number: str) -> list[tuple[LotteryResult, PrizeNumber]]:
        stmt = (
            select(LotteryResult, PrizeNumber)
            .join(PrizeNumber, PrizeNumber.lottery_id == LotteryResult.id)
            .where(PrizeNumber.number_value.contains(number, autoescape=True))
            .order_by(LotteryResult.draw_date.desc(), PrizeNumber.id.asc())
        )
        return [(row[0], row[1]) for row in session.execute(stmt).all()]
