"""Repository layer for sales (tickets)."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from datetime import datetime
from typing import Any

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure

from lottosales.db import SALES
from lottosales.models.sale import Sale, SaleLine
from lottosales.repositories.base import MongoRepository
from lottosales.utils.dates import coerce_datetime

logger = logging.getLogger(__name__)


def _to_record(doc: dict[str, Any]) -> Sale:
    # Older documents kept lines under "numbers".
    raw_lines = doc.get("lines")
    if raw_lines is None:
        raw_lines = doc.get("numbers") or []

    return Sale(
        id=str(doc["_id"]),
        owner_id=str(doc.get("owner_id")),
        ticket_id=str(doc.get("ticket_id") or ""),
        draw_id=str(doc.get("draw_id") or ""),
        schedules=tuple(str(s) for s in (doc.get("schedules") or [])),
        lines=tuple(SaleLine.from_document(ln) for ln in raw_lines if isinstance(ln, dict)),
        total_cost=float(doc.get("total_cost") or 0.0),
        created_at=coerce_datetime(doc.get("created_at")),
        draw_name=str(doc.get("draw_name") or ""),
        cost_per_fraction=float(doc.get("cost_per_fraction") or 0.0),
        client_name=doc.get("client_name"),
        client_phone=doc.get("client_phone"),
        seller_id=doc.get("seller_id"),
        updated_at=coerce_datetime(doc.get("updated_at")),
    )


def _in_slot(doc: dict[str, Any], schedule: str, start: datetime, end: datetime) -> bool:
    schedules = doc.get("schedules")
    if not isinstance(schedules, list) or schedule not in schedules:
        return False
    created = coerce_datetime(doc.get("created_at"))
    return created is not None and start <= created < end


class SaleRepository(MongoRepository):
    """CRUD and slot queries for sales."""

    collection_name = SALES

    def insert(self, doc: dict[str, Any]) -> Sale:
        self.collection.insert_one(doc)
        return _to_record(doc)

    def get(self, owner_id: str, sale_id: str) -> Sale | None:
        doc = self.collection.find_one({"_id": sale_id, "owner_id": owner_id})
        return _to_record(doc) if doc else None

    def list_sales(self, owner_id: str, draw_id: str | None = None) -> Sequence[Sale]:
        query: dict[str, Any] = {"owner_id": owner_id}
        if draw_id:
            query["draw_id"] = draw_id
        cur = self.collection.find(query).sort("created_at", DESCENDING)
        return [_to_record(d) for d in cur]

    def list_between(self, owner_id: str, start: datetime, end: datetime) -> Sequence[Sale]:
        cur = self.collection.find(
            {"owner_id": owner_id, "created_at": {"$gte": start, "$lt": end}}
        ).sort("created_at", ASCENDING)
        return [_to_record(d) for d in cur]

    def find_for_slot(
        self,
        owner_id: str,
        draw_id: str,
        schedule: str,
        start: datetime,
        end: datetime,
    ) -> Sequence[Sale]:
        """Sales of one draw/schedule created in [start, end).

        Falls back to scanning every sale of the draw when the indexed query is
        rejected by the server; both paths apply the same half-open interval.
        """

        try:
            docs = self._query_slot(owner_id, draw_id, schedule, start, end)
        except OperationFailure:
            logger.warning(
                "Indexed sales query failed (owner=%s draw=%s); scanning draw sales instead",
                owner_id,
                draw_id,
                exc_info=True,
            )
            docs = self._scan_slot(owner_id, draw_id, schedule, start, end)
        return [_to_record(d) for d in docs]

    def _query_slot(
        self, owner_id: str, draw_id: str, schedule: str, start: datetime, end: datetime
    ) -> list[dict[str, Any]]:
        cur = self.collection.find(
            {
                "owner_id": owner_id,
                "draw_id": draw_id,
                "schedules": schedule,
                "created_at": {"$gte": start, "$lt": end},
            }
        ).sort("created_at", ASCENDING)
        return list(cur)

    def _scan_slot(
        self, owner_id: str, draw_id: str, schedule: str, start: datetime, end: datetime
    ) -> list[dict[str, Any]]:
        cur = self.collection.find({"owner_id": owner_id, "draw_id": draw_id})
        docs = [d for d in cur if _in_slot(d, schedule, start, end)]
        docs.sort(key=lambda d: coerce_datetime(d.get("created_at")) or start)
        return docs

    def has_sales_for_draw(self, owner_id: str, draw_id: str) -> bool:
        return self.collection.find_one({"owner_id": owner_id, "draw_id": draw_id}, {"_id": 1}) is not None

    def update(self, owner_id: str, sale_id: str, fields: dict[str, Any]) -> Sale | None:
        self.collection.update_one({"_id": sale_id, "owner_id": owner_id}, {"$set": fields})
        return self.get(owner_id, sale_id)

    def delete(self, owner_id: str, sale_id: str) -> bool:
        res = self.collection.delete_one({"_id": sale_id, "owner_id": owner_id})
        return res.deleted_count > 0

    def iter_ticket_refs(self) -> Iterator[dict[str, Any]]:
        """(owner_id, sale id, ticket id) of every sale across all shops."""

        yield from self.collection.find({}, {"_id": 1, "owner_id": 1, "ticket_id": 1})
