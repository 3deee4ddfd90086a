"""A recurring lottery product sold by a shop."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Draw:
    """Draw definition.

    `number_of_digits` fixes the zero-padding of every number sold or drawn for it;
    `schedules` is the ordered list of daily time-slot labels (e.g. "01:00 PM").
    """

    id: str
    owner_id: str
    name: str
    number_of_digits: int
    cost_per_fraction: float
    schedules: tuple[str, ...]
    logo_url: str | None = None
    created_at: datetime | None = None
