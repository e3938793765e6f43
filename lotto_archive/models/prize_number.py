"""Winning numbers of a draw, one row per number."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lotto_archive.models.base import Base

if TYPE_CHECKING:
    from lotto_archive.models.lottery_result import LotteryResult


class PrizeNumber(Base):
    """One winning number of one prize category."""

    __tablename__ = "prize_numbers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lottery_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("lottery_results.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(String(16), nullable=False)  # first..near1
    prize_amount: Mapped[str] = mapped_column(String(32), nullable=False)
    number_value: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)

    lottery: Mapped["LotteryResult"] = relationship(back_populates="prizes")
