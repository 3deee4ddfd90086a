"""Winner resolution and payout tracking.

`resolve` matches the lines of the sales made for one draw/schedule/day
against the three winning numbers of a result and aggregates prize hits per
ticket. Payout state is stored separately, keyed by `build_payout_key`, and
never feeds back into the computed totals.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from lottosales.constants import FIRST, PRIZE_RATES, SECOND, THIRD
from lottosales.errors import ConflictError, NotFoundError
from lottosales.models.draw import Draw
from lottosales.models.payout import PayoutState, PayoutStatus
from lottosales.models.result import Result
from lottosales.models.sale import Sale
from lottosales.models.winner import Winner, WinnerHit
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.payout_repository import PayoutRepository
from lottosales.repositories.result_repository import ResultRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.utils.dates import day_range, shop_timezone, utcnow
from lottosales.utils.digits import NON_DIGIT

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NON_WORD = re.compile(r"[^\w]")


def pad_number(value: object, digits: int) -> str:
    """ASCII digits of `value`, left-padded with zeros to at least `digits` characters."""

    cleaned = NON_DIGIT.sub("", "" if value is None else str(value))
    if not cleaned:
        return ""
    return cleaned.zfill(digits)


def slugify_schedule(label: str) -> str:
    slug = _WHITESPACE.sub("_", str(label or "").strip().lower())
    return _NON_WORD.sub("", slug)


def build_payout_key(draw_id: str, date: str, schedule: str, ticket_id: str) -> str:
    return f"{draw_id}_{date}_{slugify_schedule(schedule)}_{ticket_id}"


def _prize_table(result: Result, digits: int) -> list[tuple[str, str]]:
    wn = result.winning_numbers
    table = [
        (FIRST, pad_number(wn.first, digits)),
        (SECOND, pad_number(wn.second, digits)),
        (THIRD, pad_number(wn.third, digits)),
    ]
    return [(position, number) for position, number in table if number and len(number) <= digits]


def resolve(result: Result, draw: Draw, candidate_sales: Iterable[Sale]) -> list[Winner]:
    """Winners among `candidate_sales` (already filtered to the result's draw/schedule/day).

    Each line is checked against first, second and third in that order and
    pays for the first position it matches. Hits are merged per ticket id.
    """

    digits = int(draw.number_of_digits)
    prizes = _prize_table(result, digits)

    hits_by_ticket: dict[str, list[WinnerHit]] = {}
    clients: dict[str, tuple[str | None, str | None]] = {}

    for sale in candidate_sales:
        sale_hits: list[WinnerHit] = []
        for line in sale.lines:
            if line.quantity <= 0:
                continue
            number = pad_number(line.number, digits)
            # Legacy lines longer than the draw never match.
            if not number or len(number) > digits:
                continue
            for position, winning in prizes:
                if number == winning:
                    rate = PRIZE_RATES[position]
                    sale_hits.append(
                        WinnerHit(
                            position=position,
                            number=number,
                            rate=rate,
                            quantity=line.quantity,
                            amount=line.quantity * rate,
                        )
                    )
                    break

        if not sale_hits:
            continue
        if sale.ticket_id not in hits_by_ticket:
            hits_by_ticket[sale.ticket_id] = []
            clients[sale.ticket_id] = (sale.client_name, sale.client_phone)
        hits_by_ticket[sale.ticket_id].extend(sale_hits)

    winners: list[Winner] = []
    for ticket_id, hits in hits_by_ticket.items():
        client_name, client_phone = clients[ticket_id]
        winners.append(
            Winner(
                ticket_id=ticket_id,
                hits=tuple(hits),
                total_win=sum(h.amount for h in hits),
                client_name=client_name,
                client_phone=client_phone,
            )
        )
    return winners


def compute_total_payout(winners: Iterable[Winner]) -> int:
    return sum(w.total_win for w in winners)


@dataclass(frozen=True)
class WinnerReport:
    result: Result
    draw: Draw
    winners: list[Winner]
    paid_map: dict[str, bool] = field(default_factory=dict)

    @property
    def total_payout(self) -> int:
        return compute_total_payout(self.winners)

    @property
    def paid_total(self) -> int:
        return sum(w.total_win for w in self.winners if self.paid_map.get(w.ticket_id))


class WinnerService:
    """Computes winners for saved results and records payouts."""

    def __init__(
        self,
        results: ResultRepository | None = None,
        draws: DrawRepository | None = None,
        sales: SaleRepository | None = None,
        payouts: PayoutRepository | None = None,
        timezone_name: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._results = results or ResultRepository()
        self._draws = draws or DrawRepository()
        self._sales = sales or SaleRepository()
        self._payouts = payouts or PayoutRepository()
        self._timezone_name = timezone_name
        self._clock = clock

    def candidate_sales(self, owner_id: str, draw_id: str, date: str, schedule: str) -> Sequence[Sale]:
        start, end = day_range(date, shop_timezone(self._timezone_name))
        return self._sales.find_for_slot(owner_id, draw_id, schedule, start, end)

    def compute(self, owner_id: str, result: Result) -> WinnerReport:
        draw = self._draws.get(owner_id, result.draw_id)
        if draw is None:
            raise NotFoundError(message=f"Draw {result.draw_id} not found")

        sales = self.candidate_sales(owner_id, result.draw_id, result.date, result.schedule)
        winners = resolve(result, draw, sales)
        paid_map = self.load_paid_map(owner_id, result.draw_id, result.date, result.schedule)
        return WinnerReport(result=result, draw=draw, winners=winners, paid_map=paid_map)

    def winners_for_result(self, owner_id: str, result_id: str) -> WinnerReport:
        return self.compute(owner_id, self._get_result(owner_id, result_id))

    def load_paid_map(self, owner_id: str, draw_id: str, date: str, schedule: str) -> dict[str, bool]:
        return self._payouts.paid_map(owner_id, draw_id, date, slugify_schedule(schedule))

    def mark_paid(self, owner_id: str, result_id: str, ticket_id: str) -> PayoutStatus:
        """Record the payout of one winning ticket. Repeated calls are no-ops."""

        result = self._get_result(owner_id, result_id)
        winner = self._find_winner(owner_id, result, ticket_id)
        key = build_payout_key(result.draw_id, result.date, result.schedule, winner.ticket_id)

        existing = self._payouts.get(owner_id, key)
        if existing is not None and existing.state is PayoutState.PAID:
            return existing

        status = self._payouts.upsert_paid(
            owner_id,
            key,
            {
                "draw_id": result.draw_id,
                "date": result.date,
                "schedule": result.schedule,
                "schedule_slug": slugify_schedule(result.schedule),
                "ticket_id": winner.ticket_id,
                "total_win": winner.total_win,
                "result_id": result.id,
            },
            now=self._clock(),
        )
        logger.info(
            "Payout recorded owner=%s key=%s total_win=%s", owner_id, key, winner.total_win
        )
        return status

    def reverse_payout(self, owner_id: str, result_id: str, ticket_id: str) -> PayoutStatus:
        result = self._get_result(owner_id, result_id)
        key = build_payout_key(result.draw_id, result.date, result.schedule, ticket_id)

        existing = self._payouts.get(owner_id, key)
        if existing is None or existing.state is not PayoutState.PAID:
            raise ConflictError(message=f"Ticket {ticket_id} is not marked as paid")

        status = self._payouts.set_reversed(owner_id, key, now=self._clock())
        if status is None:
            raise NotFoundError(message=f"Payout {key} not found")
        logger.info("Payout reversed owner=%s key=%s", owner_id, key)
        return status

    def _get_result(self, owner_id: str, result_id: str) -> Result:
        result = self._results.get(owner_id, result_id)
        if result is None:
            raise NotFoundError(message=f"Result {result_id} not found")
        return result

    def _find_winner(self, owner_id: str, result: Result, ticket_id: str) -> Winner:
        report = self.compute(owner_id, result)
        for winner in report.winners:
            if winner.ticket_id == ticket_id:
                return winner
        raise NotFoundError(message=f"Ticket {ticket_id} is not a winner of result {result.id}")
