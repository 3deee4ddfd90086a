"""Closing sheet: fractions sold per number for one draw slot."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from lottosales.errors import NotFoundError, ValidationError
from lottosales.models.draw import Draw
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.services.winners import pad_number
from lottosales.utils.dates import day_range, parse_iso_date, shop_timezone, utcnow


@dataclass(frozen=True)
class ClosingRow:
    number: str
    quantity: int


@dataclass(frozen=True)
class GridCell:
    number: str
    quantity: int | None


@dataclass(frozen=True)
class ClosingSheet:
    draw: Draw
    date: str
    schedule: str
    rows: list[ClosingRow]
    total_times: int
    total_amount: float
    generated_at: datetime
    grid: list[GridCell] | None = None


class ClosingService:
    def __init__(
        self,
        sales: SaleRepository | None = None,
        draws: DrawRepository | None = None,
        timezone_name: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._sales = sales or SaleRepository()
        self._draws = draws or DrawRepository()
        self._timezone_name = timezone_name
        self._clock = clock

    def consolidate(self, owner_id: str, draw_id: str, date: str, schedule: str) -> ClosingSheet:
        draw = self._draws.get(owner_id, draw_id)
        if draw is None:
            raise NotFoundError(message=f"Draw {draw_id} not found")
        if schedule not in draw.schedules:
            raise ValidationError(f"Schedule {schedule!r} does not belong to draw {draw.name}")

        day = parse_iso_date(date).isoformat()
        start, end = day_range(day, shop_timezone(self._timezone_name))
        sales = self._sales.find_for_slot(owner_id, draw.id, schedule, start, end)

        digits = int(draw.number_of_digits)
        totals: dict[str, int] = {}
        for sale in sales:
            for line in sale.lines:
                number = pad_number(line.number, digits)
                if not number or line.quantity <= 0:
                    continue
                totals[number] = totals.get(number, 0) + int(line.quantity)

        rows = [ClosingRow(number=n, quantity=q) for n, q in sorted(totals.items())]
        total_times = sum(totals.values())

        grid = None
        if digits == 2:
            grid = [GridCell(number=f"{i:02d}", quantity=totals.get(f"{i:02d}")) for i in range(100)]

        return ClosingSheet(
            draw=draw,
            date=day,
            schedule=schedule,
            rows=rows,
            total_times=total_times,
            total_amount=round(total_times * float(draw.cost_per_fraction), 2),
            generated_at=self._clock(),
            grid=grid,
        )
