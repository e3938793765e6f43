"""Schemas for the GLO ``getLotteryResult`` payload.

The prize ``data`` object is decoded strictly: a key outside the fixed
category set is an error, never silently dropped. Leaf objects tolerate
extra keys the source may add.
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, RAISE, Schema, ValidationError, fields, validate, validates

from lotto_archive.domain.dates import parse_date_text
from lotto_archive.errors import InvalidDateError


class AmountField(fields.Field):
    """Prize amount; the source sends strings but hand-written JSON may use numbers."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            raise ValidationError("Not a valid amount.")
        return str(value).strip()


class WinningNumberSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    round = fields.Integer(required=True, strict=True)
    value = fields.String(
        required=True,
        validate=validate.Regexp(r"^[0-9]{1,16}\Z", error="Must be a string of digits."),
    )


class PrizeCategorySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    price = AmountField(required=False, load_default="0.00")
    number = fields.List(fields.Nested(WinningNumberSchema), required=False, load_default=list)


class PrizeDataSchema(Schema):
    class Meta:
        unknown = RAISE

    first = fields.Nested(PrizeCategorySchema, required=False)
    second = fields.Nested(PrizeCategorySchema, required=False)
    third = fields.Nested(PrizeCategorySchema, required=False)
    fourth = fields.Nested(PrizeCategorySchema, required=False)
    fifth = fields.Nested(PrizeCategorySchema, required=False)
    last2 = fields.Nested(PrizeCategorySchema, required=False)
    last3f = fields.Nested(PrizeCategorySchema, required=False)
    last3b = fields.Nested(PrizeCategorySchema, required=False)
    near1 = fields.Nested(PrizeCategorySchema, required=False)


class DrawPayloadSchema(Schema):
    """``response.result`` of a GLO answer."""

    class Meta:
        unknown = EXCLUDE

    date = fields.String(required=True)
    period = fields.List(fields.Integer(strict=True), required=True)
    data = fields.Nested(PrizeDataSchema, required=True)

    @validates("date")
    def _validate_date(self, value: str, **kwargs: Any) -> None:
        try:
            parse_date_text(value)
        except InvalidDateError as exc:
            raise ValidationError(exc.message) from exc


class EnvelopeSchema(Schema):
    """Outer ``{statusMessage, statusCode, status, response}`` wrapper."""

    class Meta:
        unknown = EXCLUDE

    statusMessage = fields.String(required=False, allow_none=True, load_default=None)
    statusCode = fields.Integer(required=True)
    status = fields.Boolean(required=True)
    response = fields.Dict(required=False, allow_none=True, load_default=None)


def first_error(messages: Any, prefix: str = "") -> tuple[str, str]:
    """Dotted path and message of the first leaf in a marshmallow error tree."""

    if isinstance(messages, dict):
        for key, value in messages.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if key == "_schema":
                path = prefix or "payload"
            return first_error(value, path)
    if isinstance(messages, list) and messages:
        head = messages[0]
        if isinstance(head, (dict, list)):
            return first_error(head, prefix)
        return prefix or "payload", str(head)
    return prefix or "payload", str(messages)
