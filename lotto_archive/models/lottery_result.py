"""Draw header: one row per published draw date.

``draw_date`` carries the unique constraint that is the authoritative
dedup guard; the application-level existence check only saves a fetch.
"""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lotto_archive.models.base import Base

if TYPE_CHECKING:
    from lotto_archive.models.prize_number import PrizeNumber


class LotteryResult(Base):
    """A single draw (header row)."""

    __tablename__ = "lottery_results"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    draw_date: Mapped[dt.date] = mapped_column(Date, nullable=False, unique=True)
    period: Mapped[str] = mapped_column(String(64), nullable=False)  # e.g. "1,2"
    created_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)

    prizes: Mapped[list["PrizeNumber"]] = relationship(
        back_populates="lottery",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PrizeNumber.id",
    )
