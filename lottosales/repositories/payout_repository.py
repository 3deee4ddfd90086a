"""Payout status records, one per (result slot, ticket)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pymongo.errors import OperationFailure

from lottosales.db import PAYOUT_STATUS
from lottosales.models.payout import PayoutState, PayoutStatus
from lottosales.repositories.base import MongoRepository

logger = logging.getLogger(__name__)


def _doc_id(owner_id: str, key: str) -> str:
    return f"{owner_id}/{key}"


def _to_record(doc: dict[str, Any]) -> PayoutStatus:
    raw_state = doc.get("state")
    if raw_state is None:
        # Records written before the lifecycle existed only carry `paid`.
        raw_state = PayoutState.PAID.value if doc.get("paid") else PayoutState.REVERSED.value
    return PayoutStatus(
        key=str(doc.get("key") or ""),
        owner_id=str(doc.get("owner_id")),
        draw_id=str(doc.get("draw_id") or ""),
        date=str(doc.get("date") or ""),
        schedule=str(doc.get("schedule") or ""),
        schedule_slug=str(doc.get("schedule_slug") or ""),
        ticket_id=str(doc.get("ticket_id") or ""),
        state=PayoutState(raw_state),
        total_win=float(doc.get("total_win") or 0),
        paid_at=doc.get("paid_at"),
        reversed_at=doc.get("reversed_at"),
        result_id=doc.get("result_id"),
    )


class PayoutRepository(MongoRepository):
    """Documents are addressed by `<owner_id>/<payout key>`, so at most one exists per key."""

    collection_name = PAYOUT_STATUS

    def get(self, owner_id: str, key: str) -> PayoutStatus | None:
        doc = self.collection.find_one({"_id": _doc_id(owner_id, key)})
        return _to_record(doc) if doc else None

    def upsert_paid(self, owner_id: str, key: str, fields: dict[str, Any], now: datetime) -> PayoutStatus:
        doc_id = _doc_id(owner_id, key)
        self.collection.update_one(
            {"_id": doc_id},
            {
                "$set": {
                    **fields,
                    "owner_id": owner_id,
                    "key": key,
                    "state": PayoutState.PAID.value,
                    "paid": True,
                    "paid_at": now,
                },
                "$unset": {"reversed_at": ""},
                "$setOnInsert": {"created_at": now},
            },
            upsert=True,
        )
        return _to_record(self.collection.find_one({"_id": doc_id}))

    def set_reversed(self, owner_id: str, key: str, now: datetime) -> PayoutStatus | None:
        doc_id = _doc_id(owner_id, key)
        self.collection.update_one(
            {"_id": doc_id},
            {"$set": {"state": PayoutState.REVERSED.value, "paid": False, "reversed_at": now}},
        )
        doc = self.collection.find_one({"_id": doc_id})
        return _to_record(doc) if doc else None

    def _query_slot(self, owner_id: str, draw_id: str, date: str, schedule_slug: str) -> list[dict[str, Any]]:
        return list(
            self.collection.find(
                {"owner_id": owner_id, "draw_id": draw_id, "date": date, "schedule_slug": schedule_slug}
            )
        )

    def _scan_slot(self, owner_id: str, draw_id: str, date: str, schedule_slug: str) -> list[dict[str, Any]]:
        return [
            d
            for d in self.collection.find({"owner_id": owner_id})
            if d.get("draw_id") == draw_id and d.get("date") == date and d.get("schedule_slug") == schedule_slug
        ]

    def slot_documents(self, owner_id: str, draw_id: str, date: str, schedule_slug: str) -> list[dict[str, Any]]:
        try:
            return self._query_slot(owner_id, draw_id, date, schedule_slug)
        except OperationFailure:
            logger.warning("Indexed payout query failed (owner=%s); scanning payouts instead", owner_id, exc_info=True)
            return self._scan_slot(owner_id, draw_id, date, schedule_slug)

    def paid_map(self, owner_id: str, draw_id: str, date: str, schedule_slug: str) -> dict[str, bool]:
        """Paid flag per ticket id for one result slot."""

        docs = self.slot_documents(owner_id, draw_id, date, schedule_slug)

        out: dict[str, bool] = {}
        for d in docs:
            ticket_id = d.get("ticket_id")
            if ticket_id:
                out[str(ticket_id)] = _to_record(d).paid
        return out

    def has_paid_for_slot(self, owner_id: str, draw_id: str, date: str, schedule_slug: str) -> bool:
        return any(_to_record(d).paid for d in self.slot_documents(owner_id, draw_id, date, schedule_slug))

    def has_paid_ticket(self, owner_id: str, ticket_id: str) -> bool:
        doc = self.collection.find_one(
            {"owner_id": owner_id, "ticket_id": ticket_id, "state": PayoutState.PAID.value}, {"_id": 1}
        )
        return doc is not None

    def paid_total_for_date(self, owner_id: str, date: str) -> float:
        cur = self.collection.find({"owner_id": owner_id, "date": date, "state": PayoutState.PAID.value})
        return float(sum(float(d.get("total_win") or 0) for d in cur))
