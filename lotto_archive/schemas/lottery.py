"""Marshmallow schemas for the read-only lottery queries."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from lotto_archive.domain.dates import parse_date_text
from lotto_archive.errors import InvalidDateError


def _validate_date_text(value: str) -> None:
    try:
        parse_date_text(value)
    except InvalidDateError as exc:
        raise ValidationError(exc.message) from exc


class DrawHeaderSchema(Schema):
    id = fields.Int(required=True)
    draw_date = fields.Date(required=True)
    period = fields.Str(required=True)
    created_at = fields.DateTime(required=True)


class PrizeNumberRowSchema(Schema):
    id = fields.Int(required=True)
    lottery_id = fields.Int(required=True)
    category = fields.Str(required=True)
    prize_amount = fields.Str(required=True)
    number_value = fields.Str(required=True)
    round_number = fields.Int(required=True)


class CompleteDrawSchema(DrawHeaderSchema):
    prizes = fields.List(fields.Nested(PrizeNumberRowSchema))


class SearchHitSchema(Schema):
    draw = fields.Nested(DrawHeaderSchema, required=True)
    prize = fields.Nested(PrizeNumberRowSchema, required=True)


class LimitQuerySchema(Schema):
    limit = fields.Integer(required=False, load_default=None, validate=validate.Range(min=1, max=1000))


class LatestQuerySchema(Schema):
    limit = fields.Integer(required=False, load_default=10, validate=validate.Range(min=1, max=1000))


class DateRangeQuerySchema(Schema):
    start = fields.String(required=True, validate=_validate_date_text)
    end = fields.String(required=True, validate=_validate_date_text)

    @validates_schema
    def _validate_order(self, data: dict, **kwargs: Any) -> None:
        if parse_date_text(data["start"]) > parse_date_text(data["end"]):
            raise ValidationError({"start": ["start must be on or before end"]})


class SearchQuerySchema(Schema):
    number = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, max=16),
            validate.Regexp(r"^[0-9]+\Z", error="Must be a string of digits."),
        ],
    )
