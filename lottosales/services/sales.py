"""Sales use-cases and the global ticket-id index."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pymongo.errors import DuplicateKeyError, PyMongoError

from lottosales.constants import TICKET_ID_ATTEMPTS
from lottosales.errors import ConflictError, NotFoundError, ValidationError
from lottosales.models.draw import Draw
from lottosales.models.sale import Sale, SaleLine
from lottosales.repositories.base import new_id
from lottosales.repositories.business_repository import BusinessRepository
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.payout_repository import PayoutRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.repositories.ticket_index_repository import TicketIndexRepository
from lottosales.utils.dates import utcnow
from lottosales.utils.digits import is_digit_string
from lottosales.utils.tickets import build_watermark_text, generate_ticket_id, normalize_ticket_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Receipt:
    business_name: str
    business_phone: str | None
    sale: Sale
    watermark: str


def compute_total_cost(lines: Sequence[SaleLine], cost_per_fraction: float, schedule_count: int) -> float:
    fractions = sum(int(ln.quantity) for ln in lines)
    return round(fractions * float(cost_per_fraction) * int(schedule_count), 2)


def _validate_schedules(draw: Draw, schedules: Sequence[str]) -> list[str]:
    chosen: list[str] = []
    for label in schedules:
        label = str(label).strip()
        if label and label not in chosen:
            chosen.append(label)
    if not chosen:
        raise ValidationError("Select at least one schedule", details={"schedules": ["empty"]})
    unknown = [s for s in chosen if s not in draw.schedules]
    if unknown:
        raise ValidationError(
            "Schedules do not belong to the draw",
            details={"schedules": unknown},
        )
    return chosen


def _validate_lines(draw: Draw, raw_lines: Sequence[dict[str, Any]]) -> list[SaleLine]:
    if not raw_lines:
        raise ValidationError("A sale needs at least one number", details={"lines": ["empty"]})

    digits = int(draw.number_of_digits)
    lines: list[SaleLine] = []
    for idx, raw in enumerate(raw_lines):
        number = str(raw.get("number") or "").strip()
        quantity = int(raw.get("quantity") or 0)
        if not is_digit_string(number) or len(number) > digits:
            raise ValidationError(
                f"Numbers must have up to {digits} digits",
                details={"lines": {str(idx): [f"invalid number {number!r}"]}},
            )
        if quantity < 1:
            raise ValidationError(
                "Quantity must be at least 1",
                details={"lines": {str(idx): ["quantity must be >= 1"]}},
            )
        lines.append(SaleLine(number=number.zfill(digits), quantity=quantity))
    return lines


class SaleService:
    """Ticket sales: creation with a globally unique ticket id, edits, receipts."""

    def __init__(
        self,
        sales: SaleRepository | None = None,
        draws: DrawRepository | None = None,
        ticket_index: TicketIndexRepository | None = None,
        payouts: PayoutRepository | None = None,
        businesses: BusinessRepository | None = None,
        ticket_id_factory: Callable[[], str] = generate_ticket_id,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sales = sales or SaleRepository()
        self._draws = draws or DrawRepository()
        self._index = ticket_index or TicketIndexRepository()
        self._payouts = payouts or PayoutRepository()
        self._businesses = businesses or BusinessRepository()
        self._new_ticket_id = ticket_id_factory
        self._clock = clock

    def _get_draw(self, owner_id: str, draw_id: str) -> Draw:
        draw = self._draws.get(owner_id, draw_id)
        if draw is None:
            raise NotFoundError(message=f"Draw {draw_id} not found")
        return draw

    def _reserve_ticket_id(self, owner_id: str, sale_id: str, now: datetime) -> str:
        for attempt in range(1, TICKET_ID_ATTEMPTS + 1):
            ticket_id = normalize_ticket_id(self._new_ticket_id())
            try:
                self._index.reserve(ticket_id, owner_id, sale_id, now)
            except DuplicateKeyError:
                logger.info("Ticket id collision on attempt %s: %s", attempt, ticket_id)
                continue
            return ticket_id
        raise ConflictError(message="Could not allocate a unique ticket id, please retry")

    def _release_ticket_id(self, owner_id: str, ticket_id: str) -> None:
        try:
            self._index.delete(owner_id, ticket_id)
        except PyMongoError:
            logger.warning("Could not remove ticket index entry %s", ticket_id, exc_info=True)

    def create_sale(self, owner_id: str, data: dict[str, Any]) -> Sale:
        draw = self._get_draw(owner_id, str(data["draw_id"]))
        schedules = _validate_schedules(draw, data.get("schedules") or [])
        lines = _validate_lines(draw, data.get("lines") or [])

        now = self._clock()
        sale_id = new_id()
        ticket_id = self._reserve_ticket_id(owner_id, sale_id, now)

        doc = {
            "_id": sale_id,
            "owner_id": owner_id,
            "ticket_id": ticket_id,
            "draw_id": draw.id,
            "draw_name": draw.name,
            "schedules": schedules,
            "lines": [ln.to_document() for ln in lines],
            "cost_per_fraction": float(draw.cost_per_fraction),
            "total_cost": compute_total_cost(lines, draw.cost_per_fraction, len(schedules)),
            "client_name": data.get("client_name"),
            "client_phone": data.get("client_phone"),
            "seller_id": data.get("seller_id"),
            "created_at": now,
        }
        try:
            sale = self._sales.insert(doc)
        except PyMongoError:
            self._release_ticket_id(owner_id, ticket_id)
            raise

        logger.info("Sale created owner=%s ticket=%s total=%.2f", owner_id, ticket_id, sale.total_cost)
        return sale

    def list_sales(self, owner_id: str, draw_id: str | None = None) -> Sequence[Sale]:
        return self._sales.list_sales(owner_id, draw_id=draw_id)

    def get_sale(self, owner_id: str, sale_id: str) -> Sale:
        sale = self._sales.get(owner_id, sale_id)
        if sale is None:
            raise NotFoundError(message=f"Sale {sale_id} not found")
        return sale

    def _ensure_unpaid(self, owner_id: str, sale: Sale) -> None:
        if self._payouts.has_paid_ticket(owner_id, sale.ticket_id):
            raise ConflictError(message=f"Ticket {sale.ticket_id} has a paid prize and cannot be changed")

    def update_sale(self, owner_id: str, sale_id: str, data: dict[str, Any]) -> Sale:
        sale = self.get_sale(owner_id, sale_id)
        self._ensure_unpaid(owner_id, sale)
        draw = self._get_draw(owner_id, sale.draw_id)

        schedules = list(sale.schedules)
        lines = list(sale.lines)
        fields: dict[str, Any] = {}

        if "schedules" in data:
            schedules = _validate_schedules(draw, data["schedules"] or [])
            fields["schedules"] = schedules
        if "lines" in data:
            lines = _validate_lines(draw, data["lines"] or [])
            fields["lines"] = [ln.to_document() for ln in lines]
        for key in ("client_name", "client_phone"):
            if key in data:
                fields[key] = data[key]

        if not fields:
            return sale

        fields["total_cost"] = compute_total_cost(lines, sale.cost_per_fraction, len(schedules))
        fields["updated_at"] = self._clock()
        updated = self._sales.update(owner_id, sale_id, fields)
        if updated is None:
            raise NotFoundError(message=f"Sale {sale_id} not found")
        return updated

    def delete_sale(self, owner_id: str, sale_id: str) -> None:
        sale = self.get_sale(owner_id, sale_id)
        self._ensure_unpaid(owner_id, sale)
        self._sales.delete(owner_id, sale_id)
        if sale.ticket_id:
            self._release_ticket_id(owner_id, normalize_ticket_id(sale.ticket_id))

    def receipt(self, owner_id: str, sale_id: str) -> Receipt:
        sale = self.get_sale(owner_id, sale_id)
        business = self._businesses.get(owner_id)
        return Receipt(
            business_name=business.name if business else "",
            business_phone=business.phone if business else None,
            sale=sale,
            watermark=build_watermark_text(sale.ticket_id, sale.total_cost, list(sale.lines)),
        )
