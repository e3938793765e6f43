"""In-memory draw entities and ingestion ledger types."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum


class PrizeCategory(str, Enum):
    FIRST = "first"
    SECOND = "second"
    THIRD = "third"
    FOURTH = "fourth"
    FIFTH = "fifth"
    LAST2 = "last2"
    LAST3F = "last3f"
    LAST3B = "last3b"
    NEAR1 = "near1"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]


class CommitMode(str, Enum):
    INSERT_IF_ABSENT = "insert-if-absent"
    REPLACE = "replace"


class CommitStatus(str, Enum):
    INSERTED = "inserted"
    SKIPPED = "skipped"
    REPLACED = "replaced"


class Outcome(str, Enum):
    ALREADY_PRESENT = "already_present"
    FETCHED_AND_STORED = "fetched_and_stored"
    NO_DRAW_PUBLISHED = "no_draw_published"
    FETCH_FAILED = "fetch_failed"
    PARSE_FAILED = "parse_failed"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class WinningNumber:
    round: int
    value: str


@dataclass(frozen=True)
class PrizeEntry:
    category: PrizeCategory
    amount: str
    numbers: tuple[WinningNumber, ...]


@dataclass(frozen=True)
class DrawResult:
    """Normalized draw, independent of where the payload came from."""

    draw_date: dt.date
    period: tuple[int, ...]
    prizes: tuple[PrizeEntry, ...]
    ingested_at: dt.datetime

    @property
    def period_label(self) -> str:
        return ",".join(str(p) for p in self.period)

    @property
    def number_count(self) -> int:
        return sum(len(p.numbers) for p in self.prizes)

    def warnings(self) -> list[str]:
        if self.number_count == 0:
            return ["no prize numbers in payload"]
        return []


@dataclass(frozen=True)
class IngestionOutcome:
    date: str
    outcome: Outcome
    detail: str | None = None
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RawInsertResult:
    lottery_id: int
    draw_date: dt.date
    status: CommitStatus
    warnings: list[str] = field(default_factory=list)
