"""Service layer for draw definitions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from lottosales.constants import MAX_DIGITS, MAX_SCHEDULES_PER_DRAW, MIN_DIGITS
from lottosales.errors import ConflictError, NotFoundError, ValidationError
from lottosales.models.draw import Draw
from lottosales.repositories.base import new_id
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.result_repository import ResultRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.utils.dates import utcnow


def _clean_schedules(raw: Sequence[str]) -> list[str]:
    schedules: list[str] = []
    for label in raw:
        label = str(label).strip()
        if label and label not in schedules:
            schedules.append(label)
    if not schedules:
        raise ValidationError("At least one schedule is required", details={"schedules": ["empty"]})
    if len(schedules) > MAX_SCHEDULES_PER_DRAW:
        raise ValidationError(
            f"A draw has at most {MAX_SCHEDULES_PER_DRAW} schedules",
            details={"schedules": [f"max {MAX_SCHEDULES_PER_DRAW}"]},
        )
    return schedules


def _check_digits(digits: int) -> int:
    digits = int(digits)
    if not MIN_DIGITS <= digits <= MAX_DIGITS:
        raise ValidationError(
            f"number_of_digits must be between {MIN_DIGITS} and {MAX_DIGITS}",
            details={"number_of_digits": [str(digits)]},
        )
    return digits


class DrawService:
    """Draw use-cases."""

    def __init__(
        self,
        repository: DrawRepository | None = None,
        sales: SaleRepository | None = None,
        results: ResultRepository | None = None,
    ) -> None:
        self._repo = repository or DrawRepository()
        self._sales = sales or SaleRepository()
        self._results = results or ResultRepository()

    def list_draws(self, owner_id: str) -> Sequence[Draw]:
        return self._repo.list_draws(owner_id)

    def get_draw(self, owner_id: str, draw_id: str) -> Draw:
        draw = self._repo.get(owner_id, draw_id)
        if draw is None:
            raise NotFoundError(message=f"Draw {draw_id} not found")
        return draw

    def create_draw(self, owner_id: str, data: dict[str, Any]) -> Draw:
        doc = {
            "_id": new_id(),
            "owner_id": owner_id,
            "name": str(data["name"]).strip(),
            "number_of_digits": _check_digits(data["number_of_digits"]),
            "cost_per_fraction": float(data["cost_per_fraction"]),
            "schedules": _clean_schedules(data["schedules"]),
            "logo_url": data.get("logo_url"),
            "created_at": utcnow(),
        }
        return self._repo.insert(doc)

    def update_draw(self, owner_id: str, draw_id: str, data: dict[str, Any]) -> Draw:
        draw = self.get_draw(owner_id, draw_id)

        fields: dict[str, Any] = {}
        if "name" in data:
            fields["name"] = str(data["name"]).strip()
        if "cost_per_fraction" in data:
            fields["cost_per_fraction"] = float(data["cost_per_fraction"])
        if "schedules" in data:
            fields["schedules"] = _clean_schedules(data["schedules"])
        if "logo_url" in data:
            fields["logo_url"] = data["logo_url"]
        if "number_of_digits" in data:
            digits = _check_digits(data["number_of_digits"])
            if digits != draw.number_of_digits and self._is_referenced(owner_id, draw_id):
                raise ConflictError(message="Cannot change the digit count of a draw with sales or results")
            fields["number_of_digits"] = digits

        if not fields:
            return draw
        fields["updated_at"] = utcnow()
        updated = self._repo.update(owner_id, draw_id, fields)
        if updated is None:
            raise NotFoundError(message=f"Draw {draw_id} not found")
        return updated

    def delete_draw(self, owner_id: str, draw_id: str) -> None:
        self.get_draw(owner_id, draw_id)
        if self._is_referenced(owner_id, draw_id):
            raise ConflictError(message="Draw has sales or results and cannot be deleted")
        self._repo.delete(owner_id, draw_id)

    def _is_referenced(self, owner_id: str, draw_id: str) -> bool:
        return self._sales.has_sales_for_draw(owner_id, draw_id) or self._results.has_results_for_draw(
            owner_id, draw_id
        )
