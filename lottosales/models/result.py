"""Officially recorded winning numbers for one draw slot."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WinningNumbers:
    first: str
    second: str
    third: str


@dataclass(frozen=True)
class Result:
    id: str
    owner_id: str
    draw_id: str
    date: str  # YYYY-MM-DD, shop-local calendar day
    schedule: str
    winning_numbers: WinningNumbers
    created_at: datetime | None = None
    updated_at: datetime | None = None
