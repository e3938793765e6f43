"""Payload normalization.

Fetched results and hand-supplied raw JSON both end up in
``normalize_result`` so storage never sees two validation rules.
"""

from __future__ import annotations

import datetime as dt
import json
from collections.abc import Callable, Mapping
from typing import Any

from marshmallow import ValidationError as MarshmallowValidationError

from lotto_archive.domain.dates import parse_date_text
from lotto_archive.domain.draw import DrawResult, PrizeCategory, PrizeEntry, WinningNumber
from lotto_archive.errors import EmptyResult, ParseError, UpstreamError
from lotto_archive.schemas.payload import DrawPayloadSchema, first_error
from lotto_archive.services.fetcher import unwrap_envelope

_payload_schema = DrawPayloadSchema()


class PayloadNormalizer:
    def __init__(self, clock: Callable[[], dt.datetime] | None = None) -> None:
        self._clock = clock or (lambda: dt.datetime.now(dt.timezone.utc).replace(tzinfo=None))

    def normalize_result(self, raw: Any) -> DrawResult:
        """Normalize a ``response.result`` object."""

        if not isinstance(raw, Mapping):
            raise ParseError("result", "Must be an object")
        try:
            data = _payload_schema.load(raw)
        except MarshmallowValidationError as exc:
            field, reason = first_error(exc.messages)
            raise ParseError(field, reason) from exc

        prizes: list[PrizeEntry] = []
        for category in PrizeCategory:
            entry = data["data"].get(category.value)
            if entry is None:
                continue
            numbers = tuple(
                WinningNumber(round=n["round"], value=n["value"])
                for n in sorted(entry["number"], key=lambda n: n["round"])
            )
            prizes.append(PrizeEntry(category=category, amount=entry["price"], numbers=numbers))

        return DrawResult(
            draw_date=parse_date_text(data["date"]),
            period=tuple(data["period"]),
            prizes=tuple(prizes),
            ingested_at=self._clock(),
        )

    def normalize_raw_json(self, raw: str | Mapping[str, Any]) -> DrawResult:
        """Normalize caller-supplied JSON: a full GLO envelope or a bare result."""

        if isinstance(raw, (str, bytes)):
            try:
                document = json.loads(raw)
            except ValueError as exc:
                raise ParseError("raw_json", f"Invalid JSON: {exc}") from exc
        else:
            document = raw

        if not isinstance(document, Mapping):
            raise ParseError("raw_json", "Must be a JSON object")

        if "response" in document or "status" in document:
            try:
                result = unwrap_envelope(document)
            except EmptyResult as exc:
                raise ParseError("response.result", "Missing draw result") from exc
            except UpstreamError as exc:
                raise ParseError("status", exc.message) from exc
            return self.normalize_result(result)

        return self.normalize_result(document)
