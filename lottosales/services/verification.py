"""Public ticket verification and ticket index maintenance."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from lottosales.constants import VERIFY_NOT_FOUND_MESSAGE
from lottosales.errors import NotFoundError
from lottosales.models.sale import SaleLine
from lottosales.rate_limit import RateLimiter
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.repositories.ticket_index_repository import TicketIndexRepository
from lottosales.utils.dates import utcnow
from lottosales.utils.tickets import normalize_ticket_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublicTicket:
    """What anyone holding a ticket id may see. No owner id, no phone."""

    ticket_id: str
    draw_name: str
    schedules: tuple[str, ...]
    lines: tuple[SaleLine, ...]
    total_cost: float
    created_at: datetime | None
    client_name: str | None = None
    logo_url: str | None = None


@dataclass(frozen=True)
class BackfillReport:
    scanned: int
    created: int
    skipped: int


class VerificationService:
    def __init__(
        self,
        rate_limiter: RateLimiter,
        ticket_index: TicketIndexRepository | None = None,
        sales: SaleRepository | None = None,
        draws: DrawRepository | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._limiter = rate_limiter
        self._index = ticket_index or TicketIndexRepository()
        self._sales = sales or SaleRepository()
        self._draws = draws or DrawRepository()
        self._clock = clock

    def verify(self, raw_ticket_id: str, client_key: str) -> PublicTicket:
        # Throttled and unknown lookups get the same answer.
        if not self._limiter.hit(client_key):
            logger.warning("Verification rate limit exceeded for client=%s", client_key)
            raise NotFoundError(message=VERIFY_NOT_FOUND_MESSAGE)

        ticket_id = normalize_ticket_id(raw_ticket_id)
        if not ticket_id:
            raise NotFoundError(message=VERIFY_NOT_FOUND_MESSAGE)

        entry = self._index.get(ticket_id)
        if entry is None:
            raise NotFoundError(message=VERIFY_NOT_FOUND_MESSAGE)

        sale = self._sales.get(entry.owner_id, entry.sale_id)
        if sale is None:
            logger.warning("Ticket index entry %s points to a missing sale", ticket_id)
            raise NotFoundError(message=VERIFY_NOT_FOUND_MESSAGE)

        draw = self._draws.get(entry.owner_id, sale.draw_id)
        return PublicTicket(
            ticket_id=sale.ticket_id.upper(),
            draw_name=draw.name if draw else sale.draw_name,
            schedules=sale.schedules,
            lines=sale.lines,
            total_cost=sale.total_cost,
            created_at=sale.created_at,
            client_name=sale.client_name,
            logo_url=draw.logo_url if draw else None,
        )

    def backfill_ticket_index(self) -> BackfillReport:
        return backfill_ticket_index(self._sales, self._index, now=self._clock())


def backfill_ticket_index(
    sales: SaleRepository, ticket_index: TicketIndexRepository, now: datetime | None = None
) -> BackfillReport:
    """Create index entries for sales that predate the index. Existing entries are kept."""

    scanned = created = skipped = 0
    now = now or utcnow()
    for ref in sales.iter_ticket_refs():
        scanned += 1
        ticket_id = normalize_ticket_id(ref.get("ticket_id"))
        if not ticket_id or not ref.get("owner_id"):
            skipped += 1
            continue
        if ticket_index.insert_if_missing(ticket_id, str(ref["owner_id"]), str(ref["_id"]), now):
            created += 1
        else:
            skipped += 1

    logger.info("Ticket index backfill: scanned=%s created=%s skipped=%s", scanned, created, skipped)
    return BackfillReport(scanned=scanned, created=created, skipped=skipped)
