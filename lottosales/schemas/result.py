"""Marshmallow schemas for results, winners and payouts."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields

from lottosales.schemas.common import DigitString, enum_value
from lottosales.schemas.draw import DrawSchema


class WinningNumbersSchema(Schema):
    first = DigitString(required=True)
    second = DigitString(required=True)
    third = DigitString(required=True)


class ResultSchema(Schema):
    """Serialize Result."""

    id = fields.Str(required=True)
    draw_id = fields.Str()
    date = fields.Str()
    schedule = fields.Str()
    winning_numbers = fields.Nested(WinningNumbersSchema)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class ResultCreateSchema(Schema):
    draw_id = fields.Str(required=True)
    date = fields.Date(required=True)
    schedule = fields.Str(required=True)
    winning_numbers = fields.Nested(WinningNumbersSchema, required=True)


class ResultUpdateSchema(Schema):
    date = fields.Date()
    schedule = fields.Str()
    winning_numbers = fields.Nested(WinningNumbersSchema)


class ResultQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    draw_id = fields.Str(required=False, load_default=None)
    date = fields.Date(required=False, load_default=None)


class WinnerHitSchema(Schema):
    position = fields.Str()
    number = fields.Str()
    rate = fields.Int()
    quantity = fields.Int()
    amount = fields.Int()


class WinnerSchema(Schema):
    ticket_id = fields.Str()
    client_name = fields.Str(allow_none=True)
    client_phone = fields.Str(allow_none=True)
    hits = fields.List(fields.Nested(WinnerHitSchema))
    total_win = fields.Int()


_winner_schema = WinnerSchema()


class WinnerReportSchema(Schema):
    """Result view: winners with their paid flag, recomputed totals."""

    result = fields.Nested(ResultSchema)
    draw = fields.Nested(DrawSchema)
    winners = fields.Method("dump_winners")
    total_payout = fields.Int()
    paid_total = fields.Int()

    def dump_winners(self, report):  # type: ignore[no-untyped-def]
        out = []
        for winner in report.winners:
            row = _winner_schema.dump(winner)
            row["paid"] = bool(report.paid_map.get(winner.ticket_id))
            out.append(row)
        return out


class PayoutStatusSchema(Schema):
    key = fields.Str()
    ticket_id = fields.Str()
    draw_id = fields.Str()
    date = fields.Str()
    schedule = fields.Str()
    state = fields.Function(lambda obj: enum_value(obj.state))
    paid = fields.Bool()
    total_win = fields.Float()
    paid_at = fields.DateTime(allow_none=True)
    reversed_at = fields.DateTime(allow_none=True)
    result_id = fields.Str(allow_none=True)
