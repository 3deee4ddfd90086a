"""MongoDB client and database handle management.

One client per process; repositories look the database up from the current app.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import Flask, current_app
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

DRAWS = "draws"
SALES = "sales"
RESULTS = "results"
PAYOUT_STATUS = "payout_status"
TICKET_INDEX = "ticket_index"
SETTINGS = "settings"
DAILY_CLOSURES = "daily_closures"
BUSINESSES = "businesses"

SALES_SLOT_INDEX = "sales_owner_draw_schedule_created"
RESULTS_SLOT_INDEX = "results_owner_draw_date_schedule_unique"
PAYOUT_SLOT_INDEX = "payout_owner_draw_date_schedule"


def create_client(uri: str, timeout_ms: int = 5000) -> MongoClient:
    # Datetimes are stored and read back as naive UTC.
    return MongoClient(uri, tz_aware=False, serverSelectionTimeoutMS=timeout_ms)


def ensure_indexes(db: Database) -> None:
    """Create the indexes the query paths rely on. Safe to run repeatedly."""

    db[DRAWS].create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
    db[SALES].create_index(
        [
            ("owner_id", ASCENDING),
            ("draw_id", ASCENDING),
            ("schedules", ASCENDING),
            ("created_at", ASCENDING),
        ],
        name=SALES_SLOT_INDEX,
    )
    db[SALES].create_index([("owner_id", ASCENDING), ("created_at", DESCENDING)])
    db[SALES].create_index([("owner_id", ASCENDING), ("ticket_id", ASCENDING)])
    db[RESULTS].create_index(
        [
            ("owner_id", ASCENDING),
            ("draw_id", ASCENDING),
            ("date", ASCENDING),
            ("schedule", ASCENDING),
        ],
        name=RESULTS_SLOT_INDEX,
        unique=True,
    )
    db[PAYOUT_STATUS].create_index(
        [
            ("owner_id", ASCENDING),
            ("draw_id", ASCENDING),
            ("date", ASCENDING),
            ("schedule_slug", ASCENDING),
        ],
        name=PAYOUT_SLOT_INDEX,
    )
    db[PAYOUT_STATUS].create_index([("owner_id", ASCENDING), ("ticket_id", ASCENDING)])
    db[TICKET_INDEX].create_index([("owner_id", ASCENDING)])


def init_db(app: Flask, mongo_db: Any | None = None) -> None:
    """Attach a database handle to the app (building a client unless one is injected)."""

    if mongo_db is None:
        client = create_client(
            str(app.config["MONGODB_URI"]),
            timeout_ms=int(app.config.get("MONGODB_TIMEOUT_MS", 5000)),
        )
        app.extensions["mongo_client"] = client
        mongo_db = client[str(app.config["MONGODB_DB"])]

    app.extensions["mongo_db"] = mongo_db

    if app.config.get("CREATE_INDEXES_ON_STARTUP", True):
        try:
            ensure_indexes(mongo_db)
        except PyMongoError:
            # The API still serves; the sales query falls back to a scan without its index.
            logger.warning("Could not create MongoDB indexes at startup", exc_info=True)


def get_mongo_db() -> Database:
    """Get the database handle of the current app."""

    db = current_app.extensions.get("mongo_db")
    if db is None:
        raise RuntimeError("Database not initialized")
    return db
