"""Sales (tickets) and the global ticket-id index."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class SaleLine:
    """One played number and how many fractions of it were bought."""

    number: str
    quantity: int

    @classmethod
    def from_document(cls, raw: Mapping[str, Any]) -> SaleLine:
        # Older receipts stored lines as {numero, fraccion}.
        number = raw.get("number")
        if number is None:
            number = raw.get("numero")
        quantity = raw.get("quantity")
        if quantity is None:
            quantity = raw.get("fraccion")

        try:
            qty = int(quantity or 0)
        except (TypeError, ValueError):
            qty = 0
        return cls(number=str(number if number is not None else ""), quantity=qty)

    def to_document(self) -> dict[str, Any]:
        return {"number": self.number, "quantity": int(self.quantity)}


@dataclass(frozen=True)
class Sale:
    id: str
    owner_id: str
    ticket_id: str
    draw_id: str
    schedules: tuple[str, ...]
    lines: tuple[SaleLine, ...]
    total_cost: float
    created_at: datetime | None
    draw_name: str = ""
    cost_per_fraction: float = 0.0
    client_name: str | None = None
    client_phone: str | None = None
    seller_id: str | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TicketIndexEntry:
    """Global pointer from a normalized ticket id to the owning sale."""

    ticket_id: str
    owner_id: str
    sale_id: str
    created_at: datetime | None = None
