"""Business constants."""

from __future__ import annotations

FIRST = "1st"
SECOND = "2nd"
THIRD = "3rd"

# Payout multiple per prize position, in units of the fraction cost.
PRIZE_RATES: dict[str, int] = {FIRST: 11, SECOND: 3, THIRD: 2}

MIN_DIGITS = 1
MAX_DIGITS = 5
MAX_SCHEDULES_PER_DRAW = 5

TICKET_ID_ATTEMPTS = 5
WATERMARK_MAX_LINES = 14

DEFAULT_BULK_DELETE_BATCH_SIZE = 100
DEFAULT_COMMISSION_RATE = 10.0

VERIFY_NOT_FOUND_MESSAGE = "Ticket not found or invalid"
