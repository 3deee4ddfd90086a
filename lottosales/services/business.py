"""Shop profile use-cases."""

from __future__ import annotations

from typing import Any

from lottosales.repositories.business_repository import BusinessRecord, BusinessRepository


class BusinessService:
    def __init__(self, repository: BusinessRepository | None = None) -> None:
        self._repo = repository or BusinessRepository()

    def get_business(self, owner_id: str) -> BusinessRecord:
        return self._repo.get(owner_id) or BusinessRecord(owner_id=owner_id, name="")

    def put_business(self, owner_id: str, data: dict[str, Any]) -> BusinessRecord:
        fields = {"name": str(data["name"]).strip()}
        for key in ("phone", "logo_url"):
            if key in data:
                fields[key] = data[key]
        return self._repo.put(owner_id, fields)
