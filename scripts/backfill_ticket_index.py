"""Create missing global ticket index entries for existing sales.

Usage:
  MONGODB_URI=mongodb://localhost:27017 MONGODB_DB=lottosales python scripts/backfill_ticket_index.py

Existing entries are never overwritten, so the script can be re-run.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from lottosales.db import create_client
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.repositories.ticket_index_repository import TicketIndexRepository
from lottosales.services.verification import backfill_ticket_index

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Backfill the global ticket index from sales")
    parser.add_argument("--mongo-uri", dest="mongo_uri", type=str, default=None)
    parser.add_argument("--mongo-db", dest="mongo_db", type=str, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    mongo_uri = args.mongo_uri or os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    mongo_db = args.mongo_db or os.getenv("MONGODB_DB", "lottosales")

    client = create_client(mongo_uri)
    db = client[mongo_db]
    try:
        report = backfill_ticket_index(SaleRepository(db), TicketIndexRepository(db))
    except PyMongoError:
        logger.exception("Backfill failed")
        return 1
    finally:
        client.close()

    print(f"scanned={report.scanned} created={report.created} skipped={report.skipped}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
