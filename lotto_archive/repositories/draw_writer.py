"""Transactional writer for normalized draws.

A header row and all of its prize rows are written inside one
``sessionmaker.begin()`` block; any exception rolls the whole draw back.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lotto_archive.domain.dates import format_date
from lotto_archive.domain.draw import CommitMode, CommitStatus, DrawResult
from lotto_archive.errors import StorageUnavailableError, WriteError
from lotto_archive.models.lottery_result import LotteryResult
from lotto_archive.models.prize_number import PrizeNumber

logger = logging.getLogger(__name__)


class DrawWriter:
    """Commit one draw atomically, either insert-if-absent or replace."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def commit(self, result: DrawResult, mode: CommitMode = CommitMode.INSERT_IF_ABSENT) -> tuple[CommitStatus, int]:
        """Write ``result`` and return ``(status, lottery_id)``."""

        label = format_date(result.draw_date)
        try:
            with self._session_factory.begin() as session:
                return self._write(session, result, mode)
        except IntegrityError as exc:
            if mode is CommitMode.INSERT_IF_ABSENT:
                # Lost a race with another writer on the unique draw_date.
                existing_id = self._lookup_id(result)
                if existing_id is not None:
                    logger.info("Draw %s committed concurrently; skipping", label)
                    return CommitStatus.SKIPPED, existing_id
            logger.warning("Integrity error writing draw %s: %s", label, exc.orig or exc)
            raise WriteError(f"Could not store draw {label}", details=str(exc.orig or exc)) from exc
        except (OperationalError, InterfaceError) as exc:
            logger.error("Storage unavailable while writing draw %s: %s", label, exc.orig or exc)
            raise StorageUnavailableError(details=str(exc.orig or exc)) from exc
        except SQLAlchemyError as exc:
            logger.warning("Write failed for draw %s: %s", label, exc)
            raise WriteError(f"Could not store draw {label}", details=str(exc)) from exc

    def _write(self, session: Session, result: DrawResult, mode: CommitMode) -> tuple[CommitStatus, int]:
        existing = session.scalars(
            select(LotteryResult).where(LotteryResult.draw_date == result.draw_date)
        ).first()

        status = CommitStatus.INSERTED
        if existing is not None:
            if mode is CommitMode.INSERT_IF_ABSENT:
                return CommitStatus.SKIPPED, existing.id
            session.delete(existing)
            session.flush()
            status = CommitStatus.REPLACED

        header = self._add_header(session, result)
        self._add_prize_rows(session, header, result)
        session.flush()
        return status, header.id

    @staticmethod
    def _add_header(session: Session, result: DrawResult) -> LotteryResult:
        header = LotteryResult(
            draw_date=result.draw_date,
            period=result.period_label,
            created_at=result.ingested_at,
        )
        session.add(header)
        session.flush()  # assign PK
        return header

    @staticmethod
    def _add_prize_rows(session: Session, header: LotteryResult, result: DrawResult) -> None:
        for prize in result.prizes:
            for number in prize.numbers:
                session.add(
                    PrizeNumber(
                        lottery_id=header.id,
                        category=prize.category.value,
                        prize_amount=prize.amount,
                        number_value=number.value,
                        round_number=number.round,
                    )
                )

    def _lookup_id(self, result: DrawResult) -> int | None:
        try:
            with self._session_factory() as session:
                return session.scalar(
                    select(LotteryResult.id).where(LotteryResult.draw_date == result.draw_date)
                )
        except SQLAlchemyError:
            logger.exception("Lookup after integrity error failed")
            return None
