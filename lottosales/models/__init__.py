"""Typed records shared by repositories and services."""

from lottosales.models.draw import Draw
from lottosales.models.finance import ClosureStatus, ManualPrize
from lottosales.models.payout import PayoutState, PayoutStatus
from lottosales.models.result import Result, WinningNumbers
from lottosales.models.sale import Sale, SaleLine, TicketIndexEntry
from lottosales.models.winner import Winner, WinnerHit

__all__ = [
    "ClosureStatus",
    "Draw",
    "ManualPrize",
    "PayoutState",
    "PayoutStatus",
    "Result",
    "Sale",
    "SaleLine",
    "TicketIndexEntry",
    "Winner",
    "WinnerHit",
    "WinningNumbers",
]
