"""Fetch GLO draw results and store the ones not yet archived.

Usage:
  python scripts/import_draws.py --year 2024
  python scripts/import_draws.py --date 01/03/2024 --date 16/03/2567
  python scripts/import_draws.py --raw-file result.json

Dates already in the database are skipped without a request; the remote
source is called at most once per second.
"""

from __future__ import annotations

import argparse
import logging
import os
import pathlib
import sys
from collections import Counter
from collections.abc import Sequence

from dotenv import load_dotenv
from tqdm import tqdm

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lotto_archive.config import GLO_RESULT_URL, resolve_database_url  # noqa: E402
from lotto_archive.db import create_app_engine, create_schema, create_session_factory  # noqa: E402
from lotto_archive.domain.dates import draw_dates_for_year  # noqa: E402
from lotto_archive.domain.draw import IngestionOutcome, Outcome  # noqa: E402
from lotto_archive.errors import AppError  # noqa: E402
from lotto_archive.services.fetcher import GloFetcher  # noqa: E402
from lotto_archive.services.ingestion_service import IngestionService  # noqa: E402
from lotto_archive.services.rate_limiter import shared_rate_limiter  # noqa: E402

logger = logging.getLogger(__name__)


def parse_date_arg(value: str) -> tuple[str, str, str]:
    """``DD/MM/YYYY`` (either era) into a raw triple; validation happens during ingestion."""

    parts = value.strip().split("/")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"Expected DD/MM/YYYY, got {value!r}")
    return parts[0], parts[1], parts[2]


def build_service(
    database_url: str, api_url: str, timeout_seconds: float, min_interval: float = 1.0
) -> IngestionService:
    engine = create_app_engine(database_url)
    create_schema(engine)
    fetcher = GloFetcher(
        url=api_url,
        rate_limiter=shared_rate_limiter(api_url, min_interval),
        timeout_seconds=timeout_seconds,
    )
    return IngestionService(create_session_factory(engine), fetcher)


def main(argv: Sequence[str] | None = None) -> int:
    """Import lottery draws into the database."""

    parser = argparse.ArgumentParser(description="Fetch GLO draw results and insert into DB tables")
    parser.add_argument("--year", dest="years", type=int, action="append", default=[], help="CE or BE year")
    parser.add_argument("--date", dest="dates", type=parse_date_arg, action="append", default=[])
    parser.add_argument("--raw-file", dest="raw_file", type=pathlib.Path, default=None)
    parser.add_argument("--timeout", dest="timeout_seconds", type=float, default=10.0)
    parser.add_argument(
        "--database-url",
        dest="database_url",
        type=str,
        default=None,
        help="Override DB connection string (e.g. sqlite:///./data/lottery.db)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    database_url = str(args.database_url) if args.database_url else resolve_database_url()
    api_url = os.getenv("GLO_API_URL", GLO_RESULT_URL)
    min_interval = float(os.getenv("FETCH_MIN_INTERVAL_SECONDS") or 1.0)
    service = build_service(database_url, api_url, float(args.timeout_seconds), min_interval)

    if args.raw_file is not None:
        try:
            result = service.insert_raw_json(args.raw_file.read_text(encoding="utf-8"))
        except AppError as exc:
            logger.error("Raw insert failed: %s", exc.message)
            return 1
        logger.info("Stored draw %s (%s)", result.draw_date.isoformat(), result.status.value)
        return 0

    requested: list[tuple[str, str, str]] = list(args.dates)
    for year in args.years:
        try:
            requested.extend(draw_dates_for_year(year))
        except AppError as exc:
            parser.error(f"--year {year}: {exc.message}")
    if not requested:
        parser.error("nothing to import: pass --year, --date or --raw-file")

    with tqdm(total=len(requested), desc="Importing") as progress:

        def _advance(outcome: IngestionOutcome) -> None:
            progress.set_postfix_str(f"{outcome.date} {outcome.outcome.value}")
            progress.update(1)

        outcomes = service.ingest_batch(requested, on_outcome=_advance)

    for outcome in outcomes:
        if outcome.outcome in (Outcome.FETCH_FAILED, Outcome.PARSE_FAILED, Outcome.WRITE_FAILED):
            logger.warning("%s: %s (%s)", outcome.date, outcome.outcome.value, outcome.detail)

    counts = Counter(o.outcome.value for o in outcomes)
    logger.info("Import finished: %s", dict(counts))
    failed = counts[Outcome.FETCH_FAILED.value] + counts[Outcome.PARSE_FAILED.value] + counts[Outcome.WRITE_FAILED.value]
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
