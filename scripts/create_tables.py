"""Create the archive tables in the configured database.

Reads DATABASE_URL from .env / environment and creates all registered ORM tables.

Usage:
  python scripts/create_tables.py
  python scripts/create_tables.py --database-url sqlite:///./data/lottery.db
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from collections.abc import Sequence

from dotenv import load_dotenv
from sqlalchemy import inspect

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lotto_archive.config import resolve_database_url  # noqa: E402
from lotto_archive.db import create_app_engine, create_schema  # noqa: E402

logger = logging.getLogger(__name__)


def load_environment() -> None:
    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)


def main(argv: Sequence[str] | None = None) -> int:
    """Create all ORM tables in the target database."""

    parser = argparse.ArgumentParser(description="Create lottery archive tables")
    parser.add_argument("--database-url", dest="database_url", type=str, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    load_environment()

    database_url = str(args.database_url) if args.database_url else resolve_database_url()
    engine = create_app_engine(database_url)
    create_schema(engine)

    tables = sorted(inspect(engine).get_table_names())
    logger.info("Tables present: %s", ", ".join(tables))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
