"""Derived winner records (computed on demand, never stored)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WinnerHit:
    position: str  # "1st" | "2nd" | "3rd"
    number: str
    rate: int
    quantity: int
    amount: int


@dataclass(frozen=True)
class Winner:
    """All prize hits of one ticket for one result."""

    ticket_id: str
    hits: tuple[WinnerHit, ...]
    total_win: int
    client_name: str | None = None
    client_phone: str | None = None
