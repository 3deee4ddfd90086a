"""Schemas for the draw closing sheet."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class ClosingQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    draw_id = fields.Str(required=True)
    date = fields.Date(required=True)
    schedule = fields.Str(required=True)


class ClosingRowSchema(Schema):
    number = fields.Str()
    quantity = fields.Int(allow_none=True)


class ClosingSheetSchema(Schema):
    draw_id = fields.Function(lambda obj: obj.draw.id)
    draw_name = fields.Function(lambda obj: obj.draw.name)
    number_of_digits = fields.Function(lambda obj: obj.draw.number_of_digits)
    date = fields.Str()
    schedule = fields.Str()
    rows = fields.List(fields.Nested(ClosingRowSchema))
    total_times = fields.Int()
    total_amount = fields.Float()
    generated_at = fields.DateTime()
    grid = fields.List(fields.Nested(ClosingRowSchema), allow_none=True)
