"""Shared pytest fixtures: in-memory MongoDB, app, client, record factories."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import mongomock
import pytest

from lottosales import create_app
from lottosales.config import TestingConfig
from lottosales.db import ensure_indexes
from lottosales.repositories.base import new_id
from lottosales.repositories.draw_repository import DrawRepository
from lottosales.repositories.payout_repository import PayoutRepository
from lottosales.repositories.result_repository import ResultRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.repositories.ticket_index_repository import TicketIndexRepository

OWNER = "owner-1"
OTHER_OWNER = "owner-2"


@pytest.fixture()
def mongo_db():
    db = mongomock.MongoClient()["lottosales_test"]
    ensure_indexes(db)
    return db


@pytest.fixture()
def app(mongo_db):
    app = create_app(TestingConfig, mongo_db=mongo_db)
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def owner_headers() -> dict[str, str]:
    return {"X-Owner-Id": OWNER}


@pytest.fixture()
def repos(mongo_db) -> dict[str, Any]:
    return {
        "draws": DrawRepository(mongo_db),
        "sales": SaleRepository(mongo_db),
        "results": ResultRepository(mongo_db),
        "payouts": PayoutRepository(mongo_db),
        "ticket_index": TicketIndexRepository(mongo_db),
    }


@pytest.fixture()
def make_draw(repos):
    def _make(
        owner_id: str = OWNER,
        name: str = "Loteka",
        digits: int = 2,
        cost: float = 1.0,
        schedules: tuple[str, ...] = ("01:00 PM", "08:00 PM"),
    ):
        return repos["draws"].insert(
            {
                "_id": new_id(),
                "owner_id": owner_id,
                "name": name,
                "number_of_digits": digits,
                "cost_per_fraction": cost,
                "schedules": list(schedules),
                "created_at": datetime(2024, 1, 1),
            }
        )

    return _make


@pytest.fixture()
def make_sale(repos):
    def _make(
        draw,
        lines: list[dict[str, Any]],
        created_at: datetime,
        schedules: tuple[str, ...] | None = None,
        ticket_id: str | None = None,
        owner_id: str | None = None,
        **extra: Any,
    ):
        sale_id = new_id()
        doc = {
            "_id": sale_id,
            "owner_id": owner_id or draw.owner_id,
            "ticket_id": ticket_id or f"T-{sale_id[:6].upper()}",
            "draw_id": draw.id,
            "draw_name": draw.name,
            "schedules": list(schedules or draw.schedules[:1]),
            "lines": lines,
            "cost_per_fraction": draw.cost_per_fraction,
            "total_cost": float(sum(int(ln.get("quantity", ln.get("fraccion", 0))) for ln in lines)),
            "created_at": created_at,
            **extra,
        }
        return repos["sales"].insert(doc)

    return _make


@pytest.fixture()
def make_result(repos):
    def _make(draw, date: str, schedule: str, first: str, second: str, third: str):
        return repos["results"].insert(
            {
                "_id": new_id(),
                "owner_id": draw.owner_id,
                "draw_id": draw.id,
                "date": date,
                "schedule": schedule,
                "winning_numbers": {"first": first, "second": second, "third": third},
                "created_at": datetime(2024, 1, 1),
            }
        )

    return _make
