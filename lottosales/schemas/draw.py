"""Marshmallow schemas for Draw."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from lottosales.constants import MAX_DIGITS, MAX_SCHEDULES_PER_DRAW, MIN_DIGITS


class DrawSchema(Schema):
    """Serialize Draw."""

    id = fields.Str(required=True)
    name = fields.Str(required=True)
    number_of_digits = fields.Int(required=True)
    cost_per_fraction = fields.Float(required=True)
    schedules = fields.List(fields.Str())
    logo_url = fields.Str(allow_none=True)
    created_at = fields.DateTime(allow_none=True)


class DrawCreateSchema(Schema):
    """Validate create/update Draw payload (updates load with partial=True)."""

    name = fields.Str(required=True, validate=validate.Length(min=1, max=120))
    number_of_digits = fields.Int(required=True, validate=validate.Range(min=MIN_DIGITS, max=MAX_DIGITS))
    cost_per_fraction = fields.Float(required=True, validate=validate.Range(min=0))
    schedules = fields.List(
        fields.Str(validate=validate.Length(min=1, max=40)),
        required=True,
        validate=validate.Length(min=1, max=MAX_SCHEDULES_PER_DRAW),
    )
    logo_url = fields.Url(required=False, allow_none=True)

    @validates_schema
    def _validate_schedules(self, data, **kwargs):  # type: ignore[no-untyped-def]
        schedules = data.get("schedules")
        if schedules is None:
            return
        cleaned = [s.strip() for s in schedules]
        if len(cleaned) != len(set(cleaned)):
            raise ValidationError({"schedules": ["Schedules must be unique"]})
