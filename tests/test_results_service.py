from __future__ import annotations

from datetime import date, datetime

import pytest

from lottosales.errors import ConflictError, NotFoundError, ValidationError
from lottosales.services.results import ResultService, normalize_winning_number
from lottosales.services.winners import WinnerService

from tests.conftest import OWNER


@pytest.fixture()
def service(repos):
    winners = WinnerService(
        results=repos["results"], draws=repos["draws"], sales=repos["sales"], payouts=repos["payouts"]
    )
    return ResultService(
        results=repos["results"],
        draws=repos["draws"],
        winners=winners,
        payouts=repos["payouts"],
        clock=lambda: datetime(2024, 5, 10, 14),
    )


def _payload(draw, **overrides):
    data = {
        "draw_id": draw.id,
        "date": date(2024, 5, 10),
        "schedule": "01:00 PM",
        "winning_numbers": {"first": "5", "second": "12", "third": "30"},
    }
    data.update(overrides)
    return data


def test_save_result_pads_and_returns_winners(service, make_draw, make_sale):
    draw = make_draw()
    make_sale(draw, [{"number": "05", "quantity": 2}], datetime(2024, 5, 10, 9), ticket_id="SWIN-1")

    report = service.save_result(OWNER, _payload(draw))

    wn = report.result.winning_numbers
    assert (wn.first, wn.second, wn.third) == ("05", "12", "30")
    assert report.result.date == "2024-05-10"
    assert [w.ticket_id for w in report.winners] == ["SWIN-1"]
    assert report.total_payout == 22


def test_duplicate_slot_is_rejected(service, make_draw):
    draw = make_draw()
    service.save_result(OWNER, _payload(draw))

    with pytest.raises(ConflictError):
        service.save_result(OWNER, _payload(draw, winning_numbers={"first": "1", "second": "2", "third": "3"}))
    assert len(service.list_results(OWNER, draw_id=draw.id)) == 1


def test_same_day_other_schedule_is_allowed(service, make_draw):
    draw = make_draw()
    service.save_result(OWNER, _payload(draw))
    service.save_result(OWNER, _payload(draw, schedule="08:00 PM"))

    assert len(service.list_results(OWNER, date="2024-05-10")) == 2


@pytest.mark.parametrize(
    ("value", "digits", "expected"),
    [("5", 2, "05"), ("005", 2, "05"), (7, 3, "007"), ("99", 2, "99")],
)
def test_normalize_winning_number(value, digits, expected):
    assert normalize_winning_number(value, digits, "first") == expected


@pytest.mark.parametrize("value", ["100", "-1", "1a", "", None, "\u00b2", "\u0665"])
def test_invalid_winning_number(value):
    with pytest.raises(ValidationError):
        normalize_winning_number(value, 2, "first")


def test_schedule_must_belong_to_draw(service, make_draw):
    draw = make_draw()
    with pytest.raises(ValidationError):
        service.save_result(OWNER, _payload(draw, schedule="11:00 PM"))


def test_update_into_taken_slot_conflicts(service, make_draw):
    draw = make_draw()
    service.save_result(OWNER, _payload(draw))
    other = service.save_result(OWNER, _payload(draw, schedule="08:00 PM")).result

    with pytest.raises(ConflictError):
        service.update_result(OWNER, other.id, {"schedule": "01:00 PM"})

    updated = service.update_result(OWNER, other.id, {"winning_numbers": {"first": "1", "second": "2", "third": "3"}})
    assert updated.winning_numbers.first == "01"


def test_delete_result(service, make_draw):
    draw = make_draw()
    result = service.save_result(OWNER, _payload(draw)).result

    service.delete_result(OWNER, result.id)

    with pytest.raises(NotFoundError):
        service.get_result(OWNER, result.id)


def _paid_result(service, repos, make_draw, make_sale):
    draw = make_draw()
    make_sale(draw, [{"number": "05", "quantity": 3}], datetime(2024, 5, 10, 9), ticket_id="SPAID-00001")
    result = service.save_result(OWNER, _payload(draw)).result
    winners = WinnerService(
        results=repos["results"], draws=repos["draws"], sales=repos["sales"], payouts=repos["payouts"]
    )
    winners.mark_paid(OWNER, result.id, "SPAID-00001")
    return result, winners


def test_paid_result_cannot_be_edited_or_deleted(service, repos, make_draw, make_sale):
    result, winners = _paid_result(service, repos, make_draw, make_sale)

    with pytest.raises(ConflictError):
        service.update_result(OWNER, result.id, {"winning_numbers": {"first": "77", "second": "12", "third": "30"}})
    with pytest.raises(ConflictError):
        service.delete_result(OWNER, result.id)

    report = winners.winners_for_result(OWNER, result.id)
    assert report.result.winning_numbers.first == "05"
    assert report.paid_total == 33


def test_result_can_change_once_payouts_are_reversed(service, repos, make_draw, make_sale):
    result, winners = _paid_result(service, repos, make_draw, make_sale)
    winners.reverse_payout(OWNER, result.id, "SPAID-00001")

    updated = service.update_result(OWNER, result.id, {"winning_numbers": {"first": "77", "second": "12", "third": "30"}})

    assert updated.winning_numbers.first == "77"
