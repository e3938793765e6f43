"""Ingestion routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from lotto_archive.errors import ValidationError
from lotto_archive.schemas.ingest import (
    IngestBatchRequestSchema,
    IngestionOutcomeSchema,
    IngestYearRequestSchema,
    RawInsertRequestSchema,
    RawInsertResponseSchema,
)
from lotto_archive.services.ingestion_service import IngestionService
from lotto_archive.utils.responses import ok

ingest_bp = Blueprint("ingest", __name__)

_batch_schema = IngestBatchRequestSchema()
_year_schema = IngestYearRequestSchema()
_raw_schema = RawInsertRequestSchema()
_outcomes_schema = IngestionOutcomeSchema(many=True)
_raw_response_schema = RawInsertResponseSchema()


def _service() -> IngestionService:
    return current_app.extensions["ingestion_service"]


@ingest_bp.post("/batch")
def ingest_batch():
    payload = request.get_json(silent=True) or {}
    data = _batch_schema.load(payload)

    max_size = int(current_app.config["MAX_BATCH_SIZE"])
    if len(data["dates"]) > max_size:
        raise ValidationError(
            message="Batch too large",
            details={"dates": [f"At most {max_size} dates per batch"]},
        )

    outcomes = _service().ingest_batch(data["dates"])
    return ok(_outcomes_schema.dump(outcomes))


@ingest_bp.post("/year")
def ingest_year():
    payload = request.get_json(silent=True) or {}
    data = _year_schema.load(payload)

    outcomes = _service().ingest_year(int(data["year"]))
    return ok(_outcomes_schema.dump(outcomes))


@ingest_bp.post("/raw")
def insert_raw():
    """Store one hand-supplied payload, replacing any draw on the same date."""

    payload = request.get_json(silent=True)
    if isinstance(payload, dict) and "raw_json" not in payload:
        # The body itself is the draw document.
        raw = payload
    else:
        raw = _raw_schema.load(payload or {})["raw_json"]

    result = _service().insert_raw_json(raw)
    return ok(_raw_response_schema.dump(result), status_code=201)
