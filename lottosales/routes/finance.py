"""Finance routes: commission settings, daily breakdown, daily closures."""

from __future__ import annotations

from flask import Blueprint, request

from lottosales.auth import current_owner_id
from lottosales.schemas.finance import (
    ClosureSummarySchema,
    ClosureUpdateSchema,
    CommissionSettingsSchema,
    DailyBreakdownSchema,
)
from lottosales.services.finance import FinanceService
from lottosales.utils.responses import ok

finance_bp = Blueprint("finance", __name__)

_settings_schema = CommissionSettingsSchema()
_breakdown_schema = DailyBreakdownSchema()
_closure_schema = ClosureSummarySchema()
_closure_update_schema = ClosureUpdateSchema()
_service = FinanceService()


@finance_bp.get("/finance/settings")
def get_settings():
    owner_id = current_owner_id()
    return ok({"commission_rate": _service.get_commission_rate(owner_id)})


@finance_bp.put("/finance/settings")
def put_settings():
    owner_id = current_owner_id()
    data = _settings_schema.load(request.get_json(silent=True) or {})
    rate = _service.set_commission_rate(owner_id, data["commission_rate"])
    return ok({"commission_rate": rate})


@finance_bp.get("/finance/daily")
def daily_breakdown():
    owner_id = current_owner_id()
    return ok(_breakdown_schema.dump(_service.daily_breakdown(owner_id)))


@finance_bp.get("/finance/closures/<date>")
def get_closure(date: str):
    owner_id = current_owner_id()
    return ok(_closure_schema.dump(_service.get_closure(owner_id, date)))


@finance_bp.patch("/finance/closures/<date>")
def update_closure(date: str):
    owner_id = current_owner_id()
    data = _closure_update_schema.load(request.get_json(silent=True) or {})
    return ok(_closure_schema.dump(_service.update_closure(owner_id, date, data)))


@finance_bp.post("/finance/closures/<date>/close")
def close_day(date: str):
    owner_id = current_owner_id()
    return ok(_closure_schema.dump(_service.close_day(owner_id, date)))


@finance_bp.delete("/finance/closures/<date>")
def reset_day(date: str):
    owner_id = current_owner_id()
    _service.reset_day(owner_id, date)
    return ok({"reset": date})
