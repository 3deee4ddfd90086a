"""Marshmallow schemas for sales and receipts."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from lottosales.schemas.common import DigitString


class SaleLineSchema(Schema):
    number = DigitString(required=True)
    quantity = fields.Int(required=True, validate=validate.Range(min=1))


class SaleSchema(Schema):
    """Serialize Sale."""

    id = fields.Str(required=True)
    ticket_id = fields.Str(required=True)
    draw_id = fields.Str()
    draw_name = fields.Str()
    schedules = fields.List(fields.Str())
    lines = fields.List(fields.Nested(SaleLineSchema))
    cost_per_fraction = fields.Float()
    total_cost = fields.Float()
    client_name = fields.Str(allow_none=True)
    client_phone = fields.Str(allow_none=True)
    seller_id = fields.Str(allow_none=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class SaleCreateSchema(Schema):
    """Validate create Sale payload."""

    draw_id = fields.Str(required=True)
    schedules = fields.List(fields.Str(), required=True, validate=validate.Length(min=1))
    lines = fields.List(fields.Nested(SaleLineSchema), required=True, validate=validate.Length(min=1))
    client_name = fields.Str(required=False, allow_none=True, load_default=None)
    client_phone = fields.Str(required=False, allow_none=True, load_default=None)
    seller_id = fields.Str(required=False, allow_none=True, load_default=None)


class SaleUpdateSchema(Schema):
    """Validate update Sale payload; only keys present are changed."""

    schedules = fields.List(fields.Str(), validate=validate.Length(min=1))
    lines = fields.List(fields.Nested(SaleLineSchema), validate=validate.Length(min=1))
    client_name = fields.Str(allow_none=True)
    client_phone = fields.Str(allow_none=True)


class SaleQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    draw_id = fields.Str(required=False, load_default=None)


class ReceiptSchema(Schema):
    business_name = fields.Str()
    business_phone = fields.Str(allow_none=True)
    sale = fields.Nested(SaleSchema)
    watermark = fields.Str()
