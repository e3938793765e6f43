"""ORM models."""

from lotto_archive.models.lottery_result import LotteryResult
from lotto_archive.models.prize_number import PrizeNumber

__all__ = ["LotteryResult", "PrizeNumber"]
