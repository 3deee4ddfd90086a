"""Payout tracking for winners."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PayoutState(str, Enum):
    """Lifecycle of a payout record.

    A ticket with no record is unpaid. Allowed moves: PAID -> REVERSED -> PAID.
    """

    PAID = "paid"
    REVERSED = "reversed"


@dataclass(frozen=True)
class PayoutStatus:
    key: str
    owner_id: str
    draw_id: str
    date: str
    schedule: str
    schedule_slug: str
    ticket_id: str
    state: PayoutState
    total_win: float
    paid_at: datetime | None = None
    reversed_at: datetime | None = None
    result_id: str | None = None

    @property
    def paid(self) -> bool:
        return self.state is PayoutState.PAID
