"""Daily cash closure records."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ClosureStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class ManualPrize:
    """Prize or expense entered by hand on the daily closure."""

    id: str
    name: str
    amount: float
