"""Schemas for the ingestion API."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from lotto_archive.domain.draw import CommitStatus, Outcome


class IngestBatchRequestSchema(Schema):
    # Entries are validated one by one so a bad date costs one outcome, not the batch.
    dates = fields.List(fields.Raw(allow_none=True), required=True, validate=validate.Length(min=1))


class IngestYearRequestSchema(Schema):
    year = fields.Integer(required=True, validate=validate.Range(min=1900, max=2743))


class RawInsertRequestSchema(Schema):
    """``raw_json`` may be the JSON text itself or an already-decoded object."""

    raw_json = fields.Raw(required=True)


class IngestionOutcomeSchema(Schema):
    date = fields.String(required=True)
    outcome = fields.Enum(Outcome, by_value=True, required=True)
    detail = fields.String(allow_none=True)
    warnings = fields.List(fields.String())


class RawInsertResponseSchema(Schema):
    lottery_id = fields.Integer(required=True)
    draw_date = fields.Date(required=True)
    status = fields.Enum(CommitStatus, by_value=True, required=True)
    warnings = fields.List(fields.String())
