"""Canned GLO payloads and a scripted fetcher for the test suites."""

from __future__ import annotations

import copy
import datetime as dt
from typing import Any

from lotto_archive.errors import EmptyResult

DEFAULT_DATA: dict[str, Any] = {
    "first": {"price": "6000000.00", "number": [{"round": 1, "value": "123456"}]},
    "near1": {
        "price": "100000.00",
        "number": [{"round": 2, "value": "123457"}, {"round": 1, "value": "123455"}],
    },
    "last3f": {"price": "4000.00", "number": [{"round": 1, "value": "512"}, {"round": 2, "value": "987"}]},
    "last2": {"price": "2000.00", "number": [{"round": 1, "value": "12"}]},
}


def glo_result(date: str = "2024-03-01", period: list[int] | None = None, data: dict | None = None) -> dict:
    """A ``response.result`` object as the GLO endpoint returns it."""

    return {
        "date": date,
        "period": [1] if period is None else period,
        "data": copy.deepcopy(DEFAULT_DATA) if data is None else data,
    }


def glo_envelope(result: dict | None, status: bool = True, status_code: int = 200) -> dict:
    return {
        "statusMessage": "Success" if status else "Fail",
        "statusCode": status_code,
        "status": status,
        "response": {"result": result},
    }


class ScriptedFetcher:
    """Answers per date from a script; unscripted dates have no draw."""

    def __init__(self, script: dict[dt.date, Any] | None = None) -> None:
        self.script = dict(script or {})
        self.calls: list[dt.date] = []

    def fetch_one(self, draw_date: dt.date) -> dict:
        self.calls.append(draw_date)
        answer = self.script.get(draw_date)
        if answer is None:
            raise EmptyResult()
        if isinstance(answer, BaseException):
            raise answer
        return copy.deepcopy(answer)
