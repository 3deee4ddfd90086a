"""Public ticket view."""

from __future__ import annotations

from marshmallow import Schema, fields

from lottosales.schemas.sale import SaleLineSchema


class PublicTicketSchema(Schema):
    ticket_id = fields.Str()
    draw_name = fields.Str()
    schedules = fields.List(fields.Str())
    lines = fields.List(fields.Nested(SaleLineSchema))
    total_cost = fields.Float()
    created_at = fields.DateTime(allow_none=True)
    client_name = fields.Str(allow_none=True)
    logo_url = fields.Str(allow_none=True)
