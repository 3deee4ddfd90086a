"""Marshmallow schemas for the shop profile."""

from __future__ import annotations

from marshmallow import Schema, fields, validate


class BusinessSchema(Schema):
    name = fields.Str()
    phone = fields.Str(allow_none=True)
    logo_url = fields.Str(allow_none=True)


class BusinessUpdateSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=120))
    phone = fields.Str(allow_none=True)
    logo_url = fields.Url(allow_none=True)
