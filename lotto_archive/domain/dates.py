"""Canonical draw dates.

Every draw is keyed by a Gregorian ``datetime.date``. Inputs arrive as
day/month/year components (``"01"`` and ``1`` are the same day) in either
the Gregorian (CE) or the Thai Buddhist (BE) era, so two spellings of the
same calendar day must land on the same key.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Any

from lotto_archive.errors import InvalidDateError

BUDDHIST_ERA_OFFSET = 543
# Anything at or above this is read as a Buddhist-era year.
BUDDHIST_ERA_THRESHOLD = 2400
MIN_YEAR = 1900
MAX_YEAR = 2200

# GLO draws on the 1st and the 16th of each month.
DRAW_DAYS = (1, 16)

_ISO_RE = re.compile(r"^([0-9]{4})-([0-9]{1,2})-([0-9]{1,2})$")
_DMY_RE = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})$")
# ASCII only: str.isdigit() also accepts superscripts that int() rejects.
_DIGITS_RE = re.compile(r"^[0-9]+$")


def _component(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidDateError(f"{name} must be numeric", details={name: value})
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _DIGITS_RE.match(value.strip()):
        number = int(value.strip())
    else:
        raise InvalidDateError(f"{name} must be numeric", details={name: value})
    if number < 0:
        raise InvalidDateError(f"{name} must be positive", details={name: value})
    return number


def to_gregorian_year(year: int) -> int:
    if year >= BUDDHIST_ERA_THRESHOLD:
        return year - BUDDHIST_ERA_OFFSET
    return year


def normalize_date(day: Any, month: Any, year: Any) -> dt.date:
    """Validate a day/month/year triple and return its canonical date."""

    d = _component("day", day)
    m = _component("month", month)
    y = to_gregorian_year(_component("year", year))

    if not 1 <= m <= 12:
        raise InvalidDateError("month must be within 1..12", details={"month": month})
    if not 1 <= d <= 31:
        raise InvalidDateError("day must be within 1..31", details={"day": day})
    if not MIN_YEAR <= y <= MAX_YEAR:
        raise InvalidDateError(
            f"year must be within {MIN_YEAR}..{MAX_YEAR} (CE) or the Buddhist-era equivalent",
            details={"year": year},
        )

    try:
        return dt.date(y, m, d)
    except ValueError as exc:
        raise InvalidDateError(str(exc), details={"day": day, "month": month, "year": year}) from exc


def normalize_date_input(raw: Any) -> dt.date:
    """Accept ``[d, m, y]``/``(d, m, y)`` or ``{"day", "month", "year"}``."""

    if isinstance(raw, dict):
        missing = [k for k in ("day", "month", "year") if k not in raw]
        if missing:
            raise InvalidDateError("Missing date component", details={"missing": missing})
        return normalize_date(raw["day"], raw["month"], raw["year"])

    if isinstance(raw, (list, tuple)):
        if len(raw) != 3:
            raise InvalidDateError("Expected [day, month, year]", details={"input": list(raw)})
        return normalize_date(raw[0], raw[1], raw[2])

    raise InvalidDateError("Expected [day, month, year]", details={"input": raw})


def parse_date_text(text: str) -> dt.date:
    """Parse ``YYYY-MM-DD`` or ``DD/MM/YYYY`` in either era."""

    value = (text or "").strip()
    match = _ISO_RE.match(value)
    if match:
        year, month, day = match.groups()
        return normalize_date(day, month, year)

    match = _DMY_RE.match(value)
    if match:
        day, month, year = match.groups()
        return normalize_date(day, month, year)

    raise InvalidDateError("Expected YYYY-MM-DD or DD/MM/YYYY", details={"date": text})


def format_date(value: dt.date) -> str:
    return value.isoformat()


def describe_input(raw: Any) -> str:
    """Readable label for an input that may not be a valid date at all."""

    if isinstance(raw, dict):
        parts = [raw.get("day"), raw.get("month"), raw.get("year")]
        return "/".join("" if p is None else str(p) for p in parts)
    if isinstance(raw, (list, tuple)):
        return "/".join(str(p) for p in raw)
    return str(raw)


def draw_dates_for_year(year: int) -> list[tuple[str, str, str]]:
    """All scheduled draw dates of a year as ``(dd, mm, yyyy)`` triples."""

    gregorian = normalize_date(1, 1, year).year
    return [
        (f"{day:02d}", f"{month:02d}", str(gregorian))
        for month in range(1, 13)
        for day in DRAW_DAYS
    ]
