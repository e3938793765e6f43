"""Batch ingestion of draw results.

Dates are processed strictly one after another: outbound calls share one
rate limit. Every input yields exactly one outcome, in input order. Per-date
failures are recorded and the batch moves on; only unreachable storage
stops it, and then every remaining input is marked ``write_failed``.
"""

from __future__ import annotations

import datetime as dt
import logging
from collections import Counter
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from lotto_archive.db import session_scope
from lotto_archive.domain.dates import describe_input, draw_dates_for_year, format_date, normalize_date_input
from lotto_archive.domain.draw import CommitMode, CommitStatus, IngestionOutcome, Outcome, RawInsertResult
from lotto_archive.errors import (
    EmptyResult,
    InvalidDateError,
    NetworkError,
    ParseError,
    StorageUnavailableError,
    UpstreamError,
    WriteError,
)
from lotto_archive.repositories.draw_repository import DrawRepository
from lotto_archive.repositories.draw_writer import DrawWriter
from lotto_archive.services.normalizer import PayloadNormalizer

logger = logging.getLogger(__name__)


class DrawFetcher(Protocol):
    def fetch_one(self, draw_date: dt.date) -> Mapping[str, Any]:
        ...


class IngestionService:
    """Fetch, normalize and store draws for a batch of requested dates."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        fetcher: DrawFetcher,
        normalizer: PayloadNormalizer | None = None,
        repository: DrawRepository | None = None,
        writer: DrawWriter | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._fetcher = fetcher
        self._normalizer = normalizer or PayloadNormalizer()
        self._repo = repository or DrawRepository()
        self._writer = writer or DrawWriter(session_factory)

    def ingest_batch(
        self,
        dates: Sequence[Any],
        on_outcome: Callable[[IngestionOutcome], None] | None = None,
    ) -> list[IngestionOutcome]:
        requested: list[tuple[str, dt.date | InvalidDateError]] = []
        for raw in dates:
            try:
                draw_date = normalize_date_input(raw)
                requested.append((format_date(draw_date), draw_date))
            except InvalidDateError as exc:
                requested.append((describe_input(raw), exc))

        fatal: StorageUnavailableError | None = None
        known: set[dt.date] = set()
        try:
            known = self._existing_set(d for _, d in requested if isinstance(d, dt.date))
            if known:
                logger.info("%s of %s requested dates already stored", len(known), len(requested))
        except StorageUnavailableError as exc:
            fatal = exc

        outcomes: list[IngestionOutcome] = []
        for label, key in requested:
            if fatal is not None:
                outcome = IngestionOutcome(label, Outcome.WRITE_FAILED, f"Batch aborted: {fatal.message}")
            elif isinstance(key, InvalidDateError):
                outcome = IngestionOutcome(label, Outcome.PARSE_FAILED, key.message)
            else:
                try:
                    outcome = self._ingest_one(key, known)
                except StorageUnavailableError as exc:
                    logger.error("Storage unavailable at %s; aborting batch", label)
                    fatal = exc
                    outcome = IngestionOutcome(label, Outcome.WRITE_FAILED, exc.message)

            outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

        summary = Counter(o.outcome.value for o in outcomes)
        logger.info("Batch of %s finished: %s", len(outcomes), dict(summary))
        return outcomes

    def ingest_year(
        self,
        year: int,
        on_outcome: Callable[[IngestionOutcome], None] | None = None,
    ) -> list[IngestionOutcome]:
        return self.ingest_batch(draw_dates_for_year(year), on_outcome=on_outcome)

    def insert_raw_json(self, raw: str | Mapping[str, Any]) -> RawInsertResult:
        """Store a hand-supplied payload, replacing any draw already on that date."""

        result = self._normalizer.normalize_raw_json(raw)
        status, lottery_id = self._writer.commit(result, CommitMode.REPLACE)
        logger.info("Raw insert of %s: %s (id=%s)", format_date(result.draw_date), status.value, lottery_id)
        return RawInsertResult(
            lottery_id=lottery_id,
            draw_date=result.draw_date,
            status=status,
            warnings=result.warnings(),
        )

    def _ingest_one(self, draw_date: dt.date, known: set[dt.date]) -> IngestionOutcome:
        label = format_date(draw_date)

        # ``known`` covers this batch; the fresh check covers concurrent batches.
        if draw_date in known or self._exists(draw_date):
            known.add(draw_date)
            return IngestionOutcome(label, Outcome.ALREADY_PRESENT)

        try:
            raw = self._fetcher.fetch_one(draw_date)
        except EmptyResult:
            return IngestionOutcome(label, Outcome.NO_DRAW_PUBLISHED)
        except (NetworkError, UpstreamError) as exc:
            logger.warning("Fetch failed for %s: %s", label, exc.message)
            return IngestionOutcome(label, Outcome.FETCH_FAILED, exc.message)

        try:
            result = self._normalizer.normalize_result(raw)
        except ParseError as exc:
            logger.warning("Unparseable payload for %s: %s", label, exc.message)
            return IngestionOutcome(label, Outcome.PARSE_FAILED, exc.message)

        if result.draw_date != draw_date:
            return IngestionOutcome(
                label,
                Outcome.NO_DRAW_PUBLISHED,
                f"Source returned the draw of {format_date(result.draw_date)}",
            )

        try:
            status, _ = self._writer.commit(result, CommitMode.INSERT_IF_ABSENT)
        except WriteError as exc:
            detail = f"{exc.message} ({exc.details})" if exc.details else exc.message
            return IngestionOutcome(label, Outcome.WRITE_FAILED, detail)

        known.add(draw_date)
        if status is CommitStatus.SKIPPED:
            return IngestionOutcome(label, Outcome.ALREADY_PRESENT, "Stored by a concurrent ingestion")

        warnings = result.warnings()
        for warning in warnings:
            logger.warning("Draw %s stored with warning: %s", label, warning)
        return IngestionOutcome(label, Outcome.FETCHED_AND_STORED, warnings=warnings)

    def _exists(self, draw_date: dt.date) -> bool:
        try:
            with session_scope(self._session_factory) as session:
                return self._repo.exists(session, draw_date)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(details=str(exc)) from exc

    def _existing_set(self, dates: Iterable[dt.date]) -> set[dt.date]:
        try:
            with session_scope(self._session_factory) as session:
                return self._repo.existing_set(session, dates)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(details=str(exc)) from exc
