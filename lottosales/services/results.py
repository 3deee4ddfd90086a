"""Service layer for draw results."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any

from pymongo.errors import DuplicateKeyError

from lottosales.errors import ConflictError, NotFoundError, ValidationError
from lottosales.models.draw import Draw
from lottosales.models.result import Result
from lottosales.repositories.base import new_id
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.payout_repository import PayoutRepository
from lottosales.repositories.result_repository import ResultRepository
from lottosales.services.winners import WinnerReport, WinnerService, slugify_schedule
from lottosales.utils.digits import is_digit_string
from lottosales.utils.dates import parse_iso_date, utcnow

logger = logging.getLogger(__name__)

_POSITIONS = ("first", "second", "third")


def normalize_winning_number(value: Any, digits: int, field_name: str) -> str:
    raw = str(value if value is not None else "").strip()
    if not is_digit_string(raw):
        raise ValidationError(
            f"{field_name} must contain only digits",
            details={"winning_numbers": {field_name: [raw]}},
        )
    if int(raw) >= 10**digits:
        raise ValidationError(
            f"{field_name} must have at most {digits} digits",
            details={"winning_numbers": {field_name: [raw]}},
        )
    return str(int(raw)).zfill(digits)


def _winning_numbers(raw: dict[str, Any], digits: int) -> dict[str, str]:
    return {pos: normalize_winning_number(raw.get(pos), digits, pos) for pos in _POSITIONS}


class ResultService:
    """Result use-cases. Saving a result also resolves its winners."""

    def __init__(
        self,
        results: ResultRepository | None = None,
        draws: DrawRepository | None = None,
        winners: WinnerService | None = None,
        payouts: PayoutRepository | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._results = results or ResultRepository()
        self._draws = draws or DrawRepository()
        self._winners = winners or WinnerService(results=self._results, draws=self._draws)
        self._payouts = payouts or PayoutRepository()
        self._clock = clock

    def _get_draw(self, owner_id: str, draw_id: str) -> Draw:
        draw = self._draws.get(owner_id, draw_id)
        if draw is None:
            raise NotFoundError(message=f"Draw {draw_id} not found")
        return draw

    @staticmethod
    def _check_schedule(draw: Draw, schedule: str) -> str:
        schedule = str(schedule).strip()
        if schedule not in draw.schedules:
            raise ValidationError(
                f"Schedule {schedule!r} does not belong to draw {draw.name}",
                details={"schedule": [schedule]},
            )
        return schedule

    def _ensure_slot_free(
        self, owner_id: str, draw_id: str, date: str, schedule: str, exclude_id: str | None = None
    ) -> None:
        existing = self._results.find_slot(owner_id, draw_id, date, schedule)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(
                message=f"A result for {date} {schedule} already exists",
                details={"result_id": existing.id},
            )

    def _ensure_nothing_paid(self, owner_id: str, result: Result) -> None:
        if self._payouts.has_paid_for_slot(owner_id, result.draw_id, result.date, slugify_schedule(result.schedule)):
            raise ConflictError(
                message=f"Result {result.id} has paid prizes; reverse them before changing it",
                details={"result_id": result.id},
            )

    def save_result(self, owner_id: str, data: dict[str, Any]) -> WinnerReport:
        draw = self._get_draw(owner_id, str(data["draw_id"]))
        schedule = self._check_schedule(draw, data["schedule"])
        date = parse_iso_date(data["date"]).isoformat()
        numbers = _winning_numbers(data.get("winning_numbers") or {}, draw.number_of_digits)

        self._ensure_slot_free(owner_id, draw.id, date, schedule)

        doc = {
            "_id": new_id(),
            "owner_id": owner_id,
            "draw_id": draw.id,
            "date": date,
            "schedule": schedule,
            "winning_numbers": numbers,
            "created_at": self._clock(),
        }
        try:
            result = self._results.insert(doc)
        except DuplicateKeyError as e:
            raise ConflictError(message=f"A result for {date} {schedule} already exists") from e

        report = self._winners.compute(owner_id, result)
        logger.info(
            "Result saved owner=%s draw=%s slot=%s/%s winners=%s payout=%s",
            owner_id,
            draw.id,
            date,
            schedule,
            len(report.winners),
            report.total_payout,
        )
        return report

    def list_results(self, owner_id: str, draw_id: str | None = None, date: str | None = None) -> Sequence[Result]:
        if date:
            date = parse_iso_date(date).isoformat()
        return self._results.list_results(owner_id, draw_id=draw_id, date=date)

    def get_result(self, owner_id: str, result_id: str) -> Result:
        result = self._results.get(owner_id, result_id)
        if result is None:
            raise NotFoundError(message=f"Result {result_id} not found")
        return result

    def update_result(self, owner_id: str, result_id: str, data: dict[str, Any]) -> Result:
        result = self.get_result(owner_id, result_id)
        draw = self._get_draw(owner_id, result.draw_id)

        date = parse_iso_date(data["date"]).isoformat() if "date" in data else result.date
        schedule = self._check_schedule(draw, data["schedule"]) if "schedule" in data else result.schedule

        fields: dict[str, Any] = {}
        if (date, schedule) != (result.date, result.schedule):
            self._ensure_slot_free(owner_id, draw.id, date, schedule, exclude_id=result.id)
            fields["date"] = date
            fields["schedule"] = schedule
        if "winning_numbers" in data:
            fields["winning_numbers"] = _winning_numbers(data["winning_numbers"] or {}, draw.number_of_digits)

        if not fields:
            return result
        self._ensure_nothing_paid(owner_id, result)
        fields["updated_at"] = self._clock()
        try:
            updated = self._results.update(owner_id, result_id, fields)
        except DuplicateKeyError as e:
            raise ConflictError(message=f"A result for {date} {schedule} already exists") from e
        if updated is None:
            raise NotFoundError(message=f"Result {result_id} not found")
        return updated

    def delete_result(self, owner_id: str, result_id: str) -> None:
        result = self.get_result(owner_id, result_id)
        self._ensure_nothing_paid(owner_id, result)
        self._results.delete(owner_id, result_id)
