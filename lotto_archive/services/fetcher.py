"""Client for the GLO result endpoint.

One POST per requested date, no retries: retrying is the caller's decision
(re-submitting a date is safe because ingestion is idempotent).
"""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Mapping
from typing import Any

import requests
from marshmallow import ValidationError as MarshmallowValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from lotto_archive.config import GLO_RESULT_URL
from lotto_archive.errors import EmptyResult, NetworkError, UpstreamError
from lotto_archive.schemas.payload import EnvelopeSchema, first_error
from lotto_archive.services.rate_limiter import RateLimiter, shared_rate_limiter

logger = logging.getLogger(__name__)

_envelope_schema = EnvelopeSchema()


def build_http_session() -> requests.Session:
    """Create a requests session that never retries on its own."""

    retry = Retry(total=0, connect=0, read=0, status=0, redirect=3, raise_on_status=False)
    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)

    session = requests.Session()
    session.headers.update({"User-Agent": "Mozilla/5.0", "Content-Type": "application/json"})
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def request_body(draw_date: dt.date) -> dict[str, str]:
    return {
        "date": f"{draw_date.day:02d}",
        "month": f"{draw_date.month:02d}",
        "year": str(draw_date.year),
    }


def unwrap_envelope(payload: Any) -> Mapping[str, Any]:
    """Return ``response.result`` of a GLO envelope.

    Raises ``UpstreamError`` for a failed or malformed envelope and
    ``EmptyResult`` when the envelope is fine but carries no draw.
    """

    if not isinstance(payload, Mapping):
        raise UpstreamError("Remote source returned a non-object payload")
    try:
        envelope = _envelope_schema.load(payload)
    except MarshmallowValidationError as exc:
        field, reason = first_error(exc.messages)
        raise UpstreamError(f"Malformed envelope: {field}: {reason}", details=exc.messages) from exc

    if not envelope["status"] or envelope["statusCode"] != 200:
        raise UpstreamError(
            f"Remote source reported failure: {envelope.get('statusMessage') or 'unknown'} "
            f"({envelope['statusCode']})",
            details={"statusCode": envelope["statusCode"], "statusMessage": envelope.get("statusMessage")},
        )

    response = envelope.get("response") or {}
    result = response.get("result")
    if result is None:
        raise EmptyResult()
    if not isinstance(result, Mapping):
        raise UpstreamError("response.result is not an object")
    return result


class GloFetcher:
    """Fetch one draw per call through a shared rate limiter."""

    def __init__(
        self,
        url: str = GLO_RESULT_URL,
        rate_limiter: RateLimiter | None = None,
        timeout_seconds: float = 10.0,
        http: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._rate_limiter = rate_limiter or shared_rate_limiter(url)
        self._timeout_seconds = timeout_seconds
        self._http = http or build_http_session()

    def fetch_one(self, draw_date: dt.date) -> Mapping[str, Any]:
        body = request_body(draw_date)
        with self._rate_limiter.slot():
            logger.info("Fetching draw %s", draw_date.isoformat())
            try:
                resp = self._http.post(self._url, json=body, timeout=self._timeout_seconds)
            except requests.RequestException as exc:
                raise NetworkError(f"Request for {draw_date.isoformat()} failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise UpstreamError(
                f"Remote source answered HTTP {resp.status_code}",
                details={"status_code": resp.status_code},
            )
        try:
            payload = resp.json()
        except ValueError as exc:
            raise UpstreamError("Remote source returned invalid JSON") from exc

        return unwrap_envelope(payload)

    def close(self) -> None:
        self._http.close()
