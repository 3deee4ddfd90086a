from __future__ import annotations

from datetime import datetime

import pytest

from lottosales.db import PAYOUT_STATUS
from lottosales.errors import ConflictError, NotFoundError
from lottosales.models.payout import PayoutState
from lottosales.services.winners import WinnerService, build_payout_key

from tests.conftest import OTHER_OWNER, OWNER


@pytest.fixture()
def service(repos):
    return WinnerService(
        results=repos["results"],
        draws=repos["draws"],
        sales=repos["sales"],
        payouts=repos["payouts"],
        timezone_name="UTC",
        clock=lambda: datetime(2024, 5, 10, 22, 0),
    )


@pytest.fixture()
def slot(make_draw, make_sale, make_result):
    draw = make_draw()
    make_sale(draw, [{"number": "05", "quantity": 3}], datetime(2024, 5, 10, 9), ticket_id="SAAAA-00001")
    make_sale(
        draw,
        [{"number": "12", "quantity": 2}, {"number": "30", "quantity": 1}],
        datetime(2024, 5, 10, 11),
        ticket_id="SBBBB-00002",
    )
    # Same numbers, other day / other schedule: never candidates.
    make_sale(draw, [{"number": "05", "quantity": 9}], datetime(2024, 5, 11, 0, 0), ticket_id="SCCCC-00003")
    make_sale(
        draw,
        [{"number": "05", "quantity": 9}],
        datetime(2024, 5, 10, 9),
        schedules=("08:00 PM",),
        ticket_id="SDDDD-00004",
    )
    result = make_result(draw, "2024-05-10", "01:00 PM", "05", "12", "30")
    return draw, result


def test_winners_for_result(service, slot):
    _, result = slot

    report = service.winners_for_result(OWNER, result.id)

    assert [w.ticket_id for w in report.winners] == ["SAAAA-00001", "SBBBB-00002"]
    assert report.total_payout == 41
    assert report.paid_map == {}
    assert report.paid_total == 0


def test_unknown_result_is_not_found(service, slot):
    with pytest.raises(NotFoundError):
        service.winners_for_result(OWNER, "missing")


def test_results_are_owner_scoped(service, slot):
    _, result = slot
    with pytest.raises(NotFoundError):
        service.winners_for_result(OTHER_OWNER, result.id)


def test_mark_paid_twice_keeps_one_record_and_total(service, slot, mongo_db):
    _, result = slot

    first = service.mark_paid(OWNER, result.id, "SAAAA-00001")
    second = service.mark_paid(OWNER, result.id, "SAAAA-00001")

    key = build_payout_key(result.draw_id, result.date, result.schedule, "SAAAA-00001")
    assert first.key == second.key == key
    assert first.paid_at == second.paid_at
    assert mongo_db[PAYOUT_STATUS].count_documents({"key": key}) == 1

    report = service.winners_for_result(OWNER, result.id)
    assert report.total_payout == 41
    assert report.paid_map == {"SAAAA-00001": True}
    assert report.paid_total == 33


def test_mark_paid_rejects_non_winner(service, slot):
    _, result = slot
    with pytest.raises(NotFoundError):
        service.mark_paid(OWNER, result.id, "SCCCC-00003")


def test_reverse_then_pay_again(service, slot):
    _, result = slot
    service.mark_paid(OWNER, result.id, "SBBBB-00002")

    reversed_status = service.reverse_payout(OWNER, result.id, "SBBBB-00002")
    assert reversed_status.state is PayoutState.REVERSED
    assert reversed_status.reversed_at is not None
    assert service.winners_for_result(OWNER, result.id).paid_map == {"SBBBB-00002": False}

    paid_again = service.mark_paid(OWNER, result.id, "SBBBB-00002")
    assert paid_again.state is PayoutState.PAID
    assert paid_again.reversed_at is None


def test_reverse_requires_paid(service, slot):
    _, result = slot
    with pytest.raises(ConflictError):
        service.reverse_payout(OWNER, result.id, "SAAAA-00001")

    service.mark_paid(OWNER, result.id, "SAAAA-00001")
    service.reverse_payout(OWNER, result.id, "SAAAA-00001")
    with pytest.raises(ConflictError):
        service.reverse_payout(OWNER, result.id, "SAAAA-00001")


def test_legacy_payout_documents_are_read(service, slot, mongo_db):
    _, result = slot
    key = build_payout_key(result.draw_id, result.date, result.schedule, "SAAAA-00001")
    mongo_db[PAYOUT_STATUS].insert_one(
        {
            "_id": f"{OWNER}/{key}",
            "owner_id": OWNER,
            "key": key,
            "draw_id": result.draw_id,
            "date": result.date,
            "schedule_slug": "0100_pm",
            "ticket_id": "SAAAA-00001",
            "paid": True,
            "total_win": 33,
        }
    )

    assert service.load_paid_map(OWNER, result.draw_id, result.date, result.schedule) == {"SAAAA-00001": True}
    assert service.mark_paid(OWNER, result.id, "SAAAA-00001").state is PayoutState.PAID
