from __future__ import annotations

import re
from datetime import datetime

import pytest
from pymongo.errors import PyMongoError

from lottosales.db import TICKET_INDEX
from lottosales.errors import ConflictError, NotFoundError, ValidationError
from lottosales.repositories.business_repository import BusinessRepository
from lottosales.services.sales import SaleService
from lottosales.services.winners import WinnerService
from lottosales.utils.tickets import generate_ticket_id

from tests.conftest import OTHER_OWNER, OWNER

NOW = datetime(2024, 5, 10, 15, 30)


def _service(repos, mongo_db, ticket_ids=None):
    factory = iter(ticket_ids).__next__ if ticket_ids else generate_ticket_id
    return SaleService(
        sales=repos["sales"],
        draws=repos["draws"],
        ticket_index=repos["ticket_index"],
        payouts=repos["payouts"],
        businesses=BusinessRepository(mongo_db),
        ticket_id_factory=factory,
        clock=lambda: NOW,
    )


def _payload(draw, **overrides):
    data = {
        "draw_id": draw.id,
        "schedules": ["01:00 PM", "08:00 PM"],
        "lines": [{"number": "5", "quantity": 3}, {"number": "12", "quantity": 2}],
        "client_name": "Ana",
        "client_phone": "809-555-0101",
    }
    data.update(overrides)
    return data


def test_create_sale_pads_numbers_and_totals(repos, mongo_db, make_draw):
    draw = make_draw(cost=2.5)

    sale = _service(repos, mongo_db).create_sale(OWNER, _payload(draw))

    assert [(ln.number, ln.quantity) for ln in sale.lines] == [("05", 3), ("12", 2)]
    # 5 fractions * 2.5 * 2 schedules
    assert sale.total_cost == 25.0
    assert sale.draw_name == draw.name
    assert sale.created_at == NOW
    assert re.fullmatch(r"S[0-9A-Z]{4}-[0-9A-Z]{5}", sale.ticket_id)

    entry = repos["ticket_index"].get(sale.ticket_id)
    assert entry.owner_id == OWNER
    assert entry.sale_id == sale.id


def test_ticket_id_collision_retries(repos, mongo_db, make_draw):
    draw = make_draw()
    repos["ticket_index"].reserve("SAAAA-11111", OTHER_OWNER, "elsewhere", NOW)

    sale = _service(repos, mongo_db, ["saaaa-11111", "SBBBB-22222"]).create_sale(OWNER, _payload(draw))

    assert sale.ticket_id == "SBBBB-22222"
    assert repos["ticket_index"].get("SAAAA-11111").owner_id == OTHER_OWNER


def test_ticket_id_attempts_are_bounded(repos, mongo_db, make_draw):
    draw = make_draw()
    repos["ticket_index"].reserve("SAAAA-11111", OTHER_OWNER, "elsewhere", NOW)

    service = _service(repos, mongo_db, ["SAAAA-11111"] * 5)

    with pytest.raises(ConflictError):
        service.create_sale(OWNER, _payload(draw))
    assert repos["sales"].list_sales(OWNER) == []


def test_failed_insert_releases_ticket_id(repos, mongo_db, make_draw, monkeypatch):
    draw = make_draw()

    def _fail(doc):
        raise PyMongoError("insert failed")

    monkeypatch.setattr(repos["sales"], "insert", _fail)

    with pytest.raises(PyMongoError):
        _service(repos, mongo_db, ["SAAAA-11111"]).create_sale(OWNER, _payload(draw))
    assert mongo_db[TICKET_INDEX].count_documents({}) == 0


@pytest.mark.parametrize(
    "overrides",
    [
        {"schedules": ["11:00 PM"]},
        {"schedules": []},
        {"lines": []},
        {"lines": [{"number": "123", "quantity": 1}]},
        {"lines": [{"number": "1a", "quantity": 1}]},
        {"lines": [{"number": "\u0665", "quantity": 1}]},
        {"lines": [{"number": "0\u00b2", "quantity": 1}]},
        {"lines": [{"number": "12", "quantity": 0}]},
    ],
)
def test_create_sale_validation(repos, mongo_db, make_draw, overrides):
    draw = make_draw()
    with pytest.raises(ValidationError):
        _service(repos, mongo_db).create_sale(OWNER, _payload(draw, **overrides))


def test_unknown_draw(repos, mongo_db):
    with pytest.raises(NotFoundError):
        _service(repos, mongo_db).create_sale(OWNER, {"draw_id": "nope", "schedules": ["x"], "lines": []})


def test_update_recomputes_total(repos, mongo_db, make_draw):
    draw = make_draw(cost=1.0)
    service = _service(repos, mongo_db)
    sale = service.create_sale(OWNER, _payload(draw))

    updated = service.update_sale(OWNER, sale.id, {"schedules": ["08:00 PM"], "client_name": "Luis"})

    assert updated.total_cost == 5.0
    assert updated.client_name == "Luis"
    assert updated.updated_at == NOW


def test_paid_ticket_cannot_be_changed_or_deleted(repos, mongo_db, make_draw, make_result):
    draw = make_draw()
    service = _service(repos, mongo_db)
    sale = service.create_sale(OWNER, _payload(draw, schedules=["01:00 PM"]))
    result = make_result(draw, "2024-05-10", "01:00 PM", "05", "40", "41")
    WinnerService(
        results=repos["results"], draws=repos["draws"], sales=repos["sales"], payouts=repos["payouts"]
    ).mark_paid(OWNER, result.id, sale.ticket_id)

    with pytest.raises(ConflictError):
        service.update_sale(OWNER, sale.id, {"client_name": "Other"})
    with pytest.raises(ConflictError):
        service.delete_sale(OWNER, sale.id)


def test_delete_removes_index_entry(repos, mongo_db, make_draw):
    draw = make_draw()
    service = _service(repos, mongo_db)
    sale = service.create_sale(OWNER, _payload(draw))

    service.delete_sale(OWNER, sale.id)

    assert repos["sales"].get(OWNER, sale.id) is None
    assert repos["ticket_index"].get(sale.ticket_id) is None


def test_delete_survives_index_failure(repos, mongo_db, make_draw, monkeypatch, caplog):
    draw = make_draw()
    service = _service(repos, mongo_db)
    sale = service.create_sale(OWNER, _payload(draw))

    def _fail(owner_id, ticket_id):
        raise PyMongoError("index unavailable")

    monkeypatch.setattr(repos["ticket_index"], "delete", _fail)

    service.delete_sale(OWNER, sale.id)

    assert repos["sales"].get(OWNER, sale.id) is None
    assert "Could not remove ticket index entry" in caplog.text


def test_receipt(repos, mongo_db, make_draw):
    draw = make_draw()
    BusinessRepository(mongo_db).put(OWNER, {"name": "Banca La Suerte", "phone": "809-555-0000"})
    service = _service(repos, mongo_db, ["SRCPT-00001"])
    sale = service.create_sale(OWNER, _payload(draw, schedules=["01:00 PM"]))

    receipt = service.receipt(OWNER, sale.id)

    assert receipt.business_name == "Banca La Suerte"
    assert receipt.watermark == "SRCPT-00001 • $5.00 • 05x3 12x2 • ORIGINAL"
