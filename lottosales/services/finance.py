"""Commission settings, daily sales breakdown and daily cash closures."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from lottosales.config import config_value
from lottosales.constants import DEFAULT_COMMISSION_RATE
from lottosales.errors import ConflictError, ValidationError
from lottosales.models.finance import ClosureStatus, ManualPrize
from lottosales.repositories.base import new_id
from lottosales.repositories.finance_repository import ClosureRepository, SettingsRepository
from lottosales.repositories.payout_repository import PayoutRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.utils.dates import day_range, local_date, parse_iso_date, shop_timezone, utcnow

logger = logging.getLogger(__name__)


def _check_rate(rate: float) -> float:
    rate = float(rate)
    if not 0 <= rate <= 100:
        raise ValidationError("commission_rate must be between 0 and 100", details={"commission_rate": [str(rate)]})
    return rate


@dataclass
class DrawDaySummary:
    name: str
    total_sales: float = 0.0
    commission: float = 0.0


@dataclass
class DaySummary:
    date: str
    total_sales: float = 0.0
    total_commission: float = 0.0
    draws: dict[str, DrawDaySummary] = field(default_factory=dict)


@dataclass(frozen=True)
class DailyBreakdown:
    commission_rate: float
    today: DaySummary
    days: list[DaySummary]


@dataclass(frozen=True)
class Closure:
    date: str
    commission_rate: float
    manual_prizes: tuple[ManualPrize, ...]
    initial_funds: float
    house_injections: float
    status: ClosureStatus
    operator_name: str | None = None
    phone_number: str | None = None

    @property
    def closed(self) -> bool:
        return self.status is ClosureStatus.CLOSED


@dataclass(frozen=True)
class ClosureSummary:
    closure: Closure
    total_sales: float
    automatic_prizes: float
    manual_prizes: float
    total_prizes: float
    commission: float
    house_net: float
    amount_to_settle: float


def summarize_closure(closure: Closure, total_sales: float, automatic_prizes: float) -> ClosureSummary:
    manual = sum(p.amount for p in closure.manual_prizes)
    total_prizes = automatic_prizes + manual
    commission = total_sales * closure.commission_rate / 100
    return ClosureSummary(
        closure=closure,
        total_sales=total_sales,
        automatic_prizes=automatic_prizes,
        manual_prizes=manual,
        total_prizes=total_prizes,
        commission=commission,
        house_net=total_sales - total_prizes - commission,
        amount_to_settle=closure.initial_funds + total_sales + closure.house_injections - total_prizes - commission,
    )


def _to_closure(date: str, doc: dict[str, Any] | None, default_rate: float) -> Closure:
    doc = doc or {}
    rate = doc.get("commission_rate")
    return Closure(
        date=date,
        commission_rate=float(default_rate if rate is None else rate),
        manual_prizes=tuple(
            ManualPrize(id=str(p.get("id") or ""), name=str(p.get("name") or ""), amount=float(p.get("amount") or 0))
            for p in (doc.get("manual_prizes") or [])
        ),
        initial_funds=float(doc.get("initial_funds") or 0),
        house_injections=float(doc.get("house_injections") or 0),
        status=ClosureStatus(doc.get("status") or ClosureStatus.OPEN.value),
        operator_name=doc.get("operator_name"),
        phone_number=doc.get("phone_number"),
    )


class FinanceService:
    def __init__(
        self,
        settings: SettingsRepository | None = None,
        closures: ClosureRepository | None = None,
        sales: SaleRepository | None = None,
        payouts: PayoutRepository | None = None,
        timezone_name: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._settings = settings or SettingsRepository()
        self._closures = closures or ClosureRepository()
        self._sales = sales or SaleRepository()
        self._payouts = payouts or PayoutRepository()
        self._timezone_name = timezone_name
        self._clock = clock

    # Settings

    def get_commission_rate(self, owner_id: str) -> float:
        rate = self._settings.get_commission_rate(owner_id)
        if rate is None:
            return float(config_value("DEFAULT_COMMISSION_RATE", DEFAULT_COMMISSION_RATE))
        return rate

    def set_commission_rate(self, owner_id: str, rate: float) -> float:
        rate = _check_rate(rate)
        self._settings.set_commission_rate(owner_id, rate)
        return rate

    # Daily breakdown

    def daily_breakdown(self, owner_id: str) -> DailyBreakdown:
        tz = shop_timezone(self._timezone_name)
        rate = self.get_commission_rate(owner_id)
        share = rate / 100

        days: dict[str, DaySummary] = {}
        for sale in self._sales.list_sales(owner_id):
            if sale.created_at is None:
                continue
            day = local_date(sale.created_at, tz).isoformat()
            summary = days.setdefault(day, DaySummary(date=day))
            commission = sale.total_cost * share
            summary.total_sales += sale.total_cost
            summary.total_commission += commission

            key = sale.draw_id or sale.draw_name
            per_draw = summary.draws.setdefault(key, DrawDaySummary(name=sale.draw_name))
            per_draw.total_sales += sale.total_cost
            per_draw.commission += commission

        today = local_date(self._clock(), tz).isoformat()
        ordered = sorted(days.values(), key=lambda d: d.date, reverse=True)
        return DailyBreakdown(commission_rate=rate, today=days.get(today) or DaySummary(date=today), days=ordered)

    # Daily closure

    def _load(self, owner_id: str, date: str) -> Closure:
        return _to_closure(date, self._closures.get(owner_id, date), self.get_commission_rate(owner_id))

    def _summary(self, owner_id: str, closure: Closure) -> ClosureSummary:
        start, end = day_range(closure.date, shop_timezone(self._timezone_name))
        total_sales = sum(s.total_cost for s in self._sales.list_between(owner_id, start, end))
        automatic = self._payouts.paid_total_for_date(owner_id, closure.date)
        return summarize_closure(closure, total_sales, automatic)

    def get_closure(self, owner_id: str, date: str) -> ClosureSummary:
        day = parse_iso_date(date).isoformat()
        return self._summary(owner_id, self._load(owner_id, day))

    def update_closure(self, owner_id: str, date: str, data: dict[str, Any]) -> ClosureSummary:
        day = parse_iso_date(date).isoformat()
        current = self._load(owner_id, day)
        if current.closed:
            raise ConflictError(message=f"Day {day} is closed")

        fields: dict[str, Any] = {}
        if "commission_rate" in data:
            fields["commission_rate"] = _check_rate(data["commission_rate"])
        if "manual_prizes" in data:
            fields["manual_prizes"] = [
                {
                    "id": str(p.get("id") or f"prize-{new_id()[:12]}"),
                    "name": str(p.get("name") or ""),
                    "amount": float(p.get("amount") or 0),
                }
                for p in (data["manual_prizes"] or [])
            ]
        for key in ("initial_funds", "house_injections"):
            if key in data:
                fields[key] = float(data[key] or 0)
        for key in ("operator_name", "phone_number"):
            if key in data:
                fields[key] = data[key]

        if not fields:
            return self._summary(owner_id, current)

        fields.setdefault("commission_rate", current.commission_rate)
        fields.setdefault("status", current.status.value)
        doc = self._closures.upsert(owner_id, day, fields)
        return self._summary(owner_id, _to_closure(day, doc, current.commission_rate))

    def close_day(self, owner_id: str, date: str) -> ClosureSummary:
        day = parse_iso_date(date).isoformat()
        current = self._load(owner_id, day)
        if current.closed:
            raise ConflictError(message=f"Day {day} is already closed")

        doc = self._closures.upsert(
            owner_id,
            day,
            {
                "commission_rate": current.commission_rate,
                "status": ClosureStatus.CLOSED.value,
                "closed_at": self._clock(),
            },
        )
        logger.info("Day closed owner=%s date=%s", owner_id, day)
        return self._summary(owner_id, _to_closure(day, doc, current.commission_rate))

    def reset_day(self, owner_id: str, date: str) -> None:
        day = parse_iso_date(date).isoformat()
        if self._load(owner_id, day).closed:
            raise ConflictError(message=f"Day {day} is closed and cannot be reset")
        self._closures.delete(owner_id, day)
