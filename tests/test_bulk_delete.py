from __future__ import annotations

from datetime import datetime

import pytest
from pymongo.errors import AutoReconnect

from lottosales.db import SALES, TICKET_INDEX
from lottosales.errors import StoreUnavailableError
from lottosales.services.bulk_delete import BulkDeleteService, delete_in_batches

from tests.conftest import OTHER_OWNER, OWNER


class FakeStore:
    """List-backed store that can fail on the n-th commit."""

    def __init__(self, size: int, fail_on_commit: int | None = None) -> None:
        self.docs = [{"_id": str(i)} for i in range(size)]
        self.commits: list[int] = []
        self._fail_on_commit = fail_on_commit

    def fetch(self, limit: int):
        return self.docs[:limit]

    def commit(self, batch) -> None:
        if self._fail_on_commit is not None and len(self.commits) + 1 == self._fail_on_commit:
            raise AutoReconnect("write limit exceeded")
        ids = {d["_id"] for d in batch}
        self.docs = [d for d in self.docs if d["_id"] not in ids]
        self.commits.append(len(batch))


def test_deletes_in_fixed_size_batches():
    store = FakeStore(250)

    deleted = delete_in_batches(store.fetch, store.commit, batch_size=100)

    assert deleted == 250
    assert store.commits == [100, 100, 50]
    assert store.docs == []


def test_empty_store_commits_nothing():
    store = FakeStore(0)
    assert delete_in_batches(store.fetch, store.commit, batch_size=100) == 0
    assert store.commits == []


def test_failing_batch_aborts_without_success():
    store = FakeStore(250, fail_on_commit=2)

    with pytest.raises(StoreUnavailableError) as excinfo:
        delete_in_batches(store.fetch, store.commit, batch_size=100)

    assert store.commits == [100]
    assert len(store.docs) == 150
    assert excinfo.value.status_code == 503
    assert excinfo.value.details == {"deleted": 100}


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        delete_in_batches(lambda n: [], lambda b: None, batch_size=0)


def test_delete_all_sales_removes_ticket_index_entries(repos, make_draw, make_sale, mongo_db):
    draw = make_draw()
    for i in range(5):
        sale = make_sale(draw, [{"number": "01", "quantity": 1}], datetime(2024, 5, 10, 9), ticket_id=f"SXXXX-0000{i}")
        repos["ticket_index"].reserve(sale.ticket_id, OWNER, sale.id, datetime(2024, 5, 10, 9))
    other = make_draw(owner_id=OTHER_OWNER)
    kept = make_sale(other, [{"number": "01", "quantity": 1}], datetime(2024, 5, 10, 9), ticket_id="SKEEP-00001")
    repos["ticket_index"].reserve(kept.ticket_id, OTHER_OWNER, kept.id, datetime(2024, 5, 10, 9))

    service = BulkDeleteService(sales=repos["sales"], results=repos["results"], ticket_index=repos["ticket_index"], batch_size=2)
    deleted = service.delete_all_sales(OWNER)

    assert deleted == 5
    assert mongo_db[SALES].count_documents({"owner_id": OWNER}) == 0
    assert mongo_db[TICKET_INDEX].count_documents({"owner_id": OWNER}) == 0
    assert mongo_db[SALES].count_documents({"owner_id": OTHER_OWNER}) == 1
    assert repos["ticket_index"].get("SKEEP-00001") is not None


def test_delete_all_results(repos, make_draw, make_result):
    draw = make_draw()
    for day in range(1, 4):
        make_result(draw, f"2024-05-0{day}", "01:00 PM", "01", "02", "03")

    service = BulkDeleteService(sales=repos["sales"], results=repos["results"], ticket_index=repos["ticket_index"], batch_size=2)

    assert service.delete_all_results(OWNER) == 3
    assert repos["results"].list_results(OWNER) == []
