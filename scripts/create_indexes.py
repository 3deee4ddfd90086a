"""Create the MongoDB indexes used by the API.

Usage:
  MONGODB_URI=mongodb://localhost:27017 MONGODB_DB=lottosales python scripts/create_indexes.py

Safe to run repeatedly. Fails if existing results already hold two entries
for the same draw slot; remove the duplicate before retrying.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from lottosales.db import create_client, ensure_indexes

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Create lottosales MongoDB indexes")
    parser.add_argument("--mongo-uri", dest="mongo_uri", type=str, default=None)
    parser.add_argument("--mongo-db", dest="mongo_db", type=str, default=None)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    mongo_uri = args.mongo_uri or os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    mongo_db = args.mongo_db or os.getenv("MONGODB_DB", "lottosales")

    client = create_client(mongo_uri)
    try:
        ensure_indexes(client[mongo_db])
    except PyMongoError:
        logger.exception("Index creation failed on %s", mongo_db)
        return 1
    finally:
        client.close()

    logger.info("Indexes ready on %s", mongo_db)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
