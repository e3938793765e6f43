"""Read-only lookups over stored draws."""

from __future__ import annotations

import calendar
import datetime as dt
from collections.abc import Sequence

from sqlalchemy.orm import Session

from lotto_archive.domain.dates import normalize_date, parse_date_text
from lotto_archive.domain.draw import PrizeCategory
from lotto_archive.errors import NotFoundError, ValidationError
from lotto_archive.models.lottery_result import LotteryResult
from lotto_archive.models.prize_number import PrizeNumber
from lotto_archive.repositories.draw_repository import DrawRepository


class QueryService:
    """Lottery result lookups."""

    def __init__(self, repository: DrawRepository | None = None) -> None:
        self._repo = repository or DrawRepository()

    def get_draw(self, session: Session, date_text: str) -> LotteryResult:
        draw_date = parse_date_text(date_text)
        draw = self._repo.get_by_date(session, draw_date)
        if draw is None:
            raise NotFoundError(message=f"No draw stored for {draw_date.isoformat()}")
        return draw

    def latest(self, session: Session, limit: int = 10) -> Sequence[LotteryResult]:
        return self._repo.list_latest(session, limit)

    def between(self, session: Session, start_text: str, end_text: str) -> Sequence[LotteryResult]:
        return self._repo.list_between(session, parse_date_text(start_text), parse_date_text(end_text))

    def by_year(self, session: Session, year: int) -> Sequence[LotteryResult]:
        start = normalize_date(1, 1, year)
        return self._repo.list_between(session, start, dt.date(start.year, 12, 31))

    def by_month(self, session: Session, year: int, month: int) -> Sequence[LotteryResult]:
        start = normalize_date(1, month, year)
        last_day = calendar.monthrange(start.year, start.month)[1]
        return self._repo.list_between(session, start, start.replace(day=last_day))

    def after(self, session: Session, date_text: str, limit: int | None = None) -> Sequence[LotteryResult]:
        return self._repo.list_after(session, parse_date_text(date_text), limit)

    def before(self, session: Session, date_text: str, limit: int | None = None) -> Sequence[LotteryResult]:
        return self._repo.list_before(session, parse_date_text(date_text), limit)

    def by_category(self, session: Session, category: str) -> Sequence[PrizeNumber]:
        try:
            PrizeCategory(category)
        except ValueError as exc:
            raise ValidationError(
                message="Invalid category",
                details={"category": [f"Must be one of {'|'.join(PrizeCategory.values())}"]},
            ) from exc
        return self._repo.prizes_by_category(session, category)

    def search_number(self, session: Session, number: str) -> list[tuple[LotteryResult, PrizeNumber]]:
        return self._repo.search_number(session, number)
