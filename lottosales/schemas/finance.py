"""Schemas for commission settings, daily breakdown and closures."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from lottosales.schemas.common import enum_value


class CommissionSettingsSchema(Schema):
    commission_rate = fields.Float(required=True, validate=validate.Range(min=0, max=100))


class DrawDaySummarySchema(Schema):
    name = fields.Str()
    total_sales = fields.Float()
    commission = fields.Float()


class DaySummarySchema(Schema):
    date = fields.Str()
    total_sales = fields.Float()
    total_commission = fields.Float()
    draws = fields.Method("dump_draws")

    def dump_draws(self, summary):  # type: ignore[no-untyped-def]
        return [
            {"draw_id": key, **DrawDaySummarySchema().dump(value)} for key, value in summary.draws.items()
        ]


class DailyBreakdownSchema(Schema):
    commission_rate = fields.Float()
    today = fields.Nested(DaySummarySchema)
    days = fields.List(fields.Nested(DaySummarySchema))


class ManualPrizeSchema(Schema):
    id = fields.Str(required=False, allow_none=True)
    name = fields.Str(required=True)
    amount = fields.Float(required=True, validate=validate.Range(min=0))


class ClosureUpdateSchema(Schema):
    """Only keys present are changed."""

    commission_rate = fields.Float(validate=validate.Range(min=0, max=100))
    manual_prizes = fields.List(fields.Nested(ManualPrizeSchema))
    initial_funds = fields.Float(validate=validate.Range(min=0))
    house_injections = fields.Float(validate=validate.Range(min=0))
    operator_name = fields.Str(allow_none=True)
    phone_number = fields.Str(allow_none=True)


class ClosureSchema(Schema):
    date = fields.Str()
    commission_rate = fields.Float()
    manual_prizes = fields.List(fields.Nested(ManualPrizeSchema))
    initial_funds = fields.Float()
    house_injections = fields.Float()
    status = fields.Function(lambda obj: enum_value(obj.status))
    operator_name = fields.Str(allow_none=True)
    phone_number = fields.Str(allow_none=True)


class ClosureSummarySchema(Schema):
    closure = fields.Nested(ClosureSchema)
    total_sales = fields.Float()
    automatic_prizes = fields.Float()
    manual_prizes = fields.Float()
    total_prizes = fields.Float()
    commission = fields.Float()
    house_net = fields.Float()
    amount_to_settle = fields.Float()
