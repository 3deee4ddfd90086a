"""Batched deletion of all of a shop's sales or results."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from pymongo.errors import PyMongoError

from lottosales.config import config_value
from lottosales.constants import DEFAULT_BULK_DELETE_BATCH_SIZE
from lottosales.errors import StoreUnavailableError
from lottosales.repositories.result_repository import ResultRepository
from lottosales.repositories.sale_repository import SaleRepository
from lottosales.repositories.ticket_index_repository import TicketIndexRepository
from lottosales.utils.tickets import normalize_ticket_id

logger = logging.getLogger(__name__)

Batch = Sequence[dict[str, Any]]


def delete_in_batches(
    fetch_batch: Callable[[int], Batch],
    commit_batch: Callable[[Batch], Any],
    batch_size: int = DEFAULT_BULK_DELETE_BATCH_SIZE,
) -> int:
    """Fetch up to `batch_size` documents, commit their deletion, repeat until none are left.

    Returns the number of documents deleted. A store failure in any fetch or
    commit stops the loop and raises StoreUnavailableError; documents of
    batches committed before the failure stay deleted.
    """

    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    deleted = 0
    batches = 0
    while True:
        try:
            batch = fetch_batch(batch_size)
            if not batch:
                break
            commit_batch(batch)
        except PyMongoError as e:
            logger.error(
                "Bulk delete aborted after %s batches (%s documents)", batches, deleted, exc_info=True
            )
            raise StoreUnavailableError(
                message="Bulk delete failed part-way; some records may remain, please retry",
                details={"deleted": deleted},
            ) from e
        batches += 1
        deleted += len(batch)
    return deleted


class BulkDeleteService:
    def __init__(
        self,
        sales: SaleRepository | None = None,
        results: ResultRepository | None = None,
        ticket_index: TicketIndexRepository | None = None,
        batch_size: int | None = None,
    ) -> None:
        self._sales = sales or SaleRepository()
        self._results = results or ResultRepository()
        self._index = ticket_index or TicketIndexRepository()
        self._batch_size = batch_size

    def _size(self) -> int:
        if self._batch_size is not None:
            return int(self._batch_size)
        return int(config_value("BULK_DELETE_BATCH_SIZE", DEFAULT_BULK_DELETE_BATCH_SIZE))

    def delete_all_sales(self, owner_id: str) -> int:
        """Delete every sale of the owner along with its ticket index entries."""

        def fetch(limit: int) -> Batch:
            return self._sales.fetch_batch(owner_id, limit, projection={"_id": 1, "ticket_id": 1})

        def commit(batch: Batch) -> None:
            ticket_ids = [normalize_ticket_id(d.get("ticket_id")) for d in batch if d.get("ticket_id")]
            self._index.delete_many(owner_id, ticket_ids)
            self._sales.delete_ids(owner_id, [d["_id"] for d in batch])

        deleted = delete_in_batches(fetch, commit, batch_size=self._size())
        logger.info("Deleted %s sales for owner=%s", deleted, owner_id)
        return deleted

    def delete_all_results(self, owner_id: str) -> int:
        def fetch(limit: int) -> Batch:
            return self._results.fetch_batch(owner_id, limit)

        def commit(batch: Batch) -> None:
            self._results.delete_ids(owner_id, [d["_id"] for d in batch])

        deleted = delete_in_batches(fetch, commit, batch_size=self._size())
        logger.info("Deleted %s results for owner=%s", deleted, owner_id)
        return deleted
