from __future__ import annotations

from datetime import datetime

import pytest

from lottosales.models.draw import Draw
from lottosales.models.result import Result, WinningNumbers
from lottosales.models.sale import Sale, SaleLine
from lottosales.services.winners import (
    build_payout_key,
    compute_total_payout,
    pad_number,
    resolve,
    slugify_schedule,
)


def _draw(digits: int = 2) -> Draw:
    return Draw(
        id="d1",
        owner_id="o1",
        name="Loteka",
        number_of_digits=digits,
        cost_per_fraction=1.0,
        schedules=("01:00 PM",),
    )


def _result(first: str, second: str, third: str) -> Result:
    return Result(
        id="r1",
        owner_id="o1",
        draw_id="d1",
        date="2024-05-10",
        schedule="01:00 PM",
        winning_numbers=WinningNumbers(first=first, second=second, third=third),
    )


def _sale(ticket_id: str, *lines: tuple[str, int], client_name: str | None = None) -> Sale:
    return Sale(
        id=f"sale-{ticket_id}",
        owner_id="o1",
        ticket_id=ticket_id,
        draw_id="d1",
        schedules=("01:00 PM",),
        lines=tuple(SaleLine(number=n, quantity=q) for n, q in lines),
        total_cost=0.0,
        created_at=datetime(2024, 5, 10, 12),
        client_name=client_name,
    )


@pytest.mark.parametrize(
    ("value", "digits", "expected"),
    [
        ("5", 2, "05"),
        ("05", 2, "05"),
        (7, 3, "007"),
        (" 12 ", 2, "12"),
        ("1234", 2, "1234"),
        ("\u0665", 2, ""),
        ("\u00b2", 2, ""),
        ("", 2, ""),
        (None, 2, ""),
    ],
)
def test_pad_number(value, digits, expected):
    assert pad_number(value, digits) == expected


def test_two_winners_and_total_payout():
    result = _result("05", "12", "30")
    sales = [
        _sale("A", ("5", 3)),
        _sale("B", ("12", 2), ("30", 1)),
    ]

    winners = resolve(result, _draw(), sales)

    assert [w.ticket_id for w in winners] == ["A", "B"]
    a, b = winners
    assert [(h.position, h.number, h.rate, h.quantity, h.amount) for h in a.hits] == [("1st", "05", 11, 3, 33)]
    assert a.total_win == 33
    assert [(h.position, h.number, h.rate, h.quantity, h.amount) for h in b.hits] == [
        ("2nd", "12", 3, 2, 6),
        ("3rd", "30", 2, 1, 2),
    ]
    assert b.total_win == 8
    assert compute_total_payout(winners) == 41


def test_first_and_third_on_one_ticket_is_one_winner():
    winners = resolve(_result("05", "12", "30"), _draw(), [_sale("A", ("05", 1), ("30", 4))])

    assert len(winners) == 1
    assert [h.position for h in winners[0].hits] == ["1st", "3rd"]
    assert winners[0].total_win == 11 + 8


def test_non_matching_sale_is_excluded():
    winners = resolve(_result("05", "12", "30"), _draw(), [_sale("A", ("99", 5)), _sale("B", ("05", 1))])
    assert [w.ticket_id for w in winners] == ["B"]


def test_zero_quantity_lines_are_ignored():
    winners = resolve(_result("05", "12", "30"), _draw(), [_sale("A", ("05", 0))])
    assert winners == []


def test_line_pays_only_its_best_position_when_numbers_repeat():
    winners = resolve(_result("07", "07", "30"), _draw(), [_sale("A", ("7", 2))])

    assert len(winners[0].hits) == 1
    assert winners[0].hits[0].position == "1st"
    assert winners[0].total_win == 22


def test_sales_sharing_a_ticket_id_are_merged():
    winners = resolve(
        _result("05", "12", "30"),
        _draw(),
        [_sale("A", ("05", 1), client_name="Ana"), _sale("A", ("12", 1))],
    )

    assert len(winners) == 1
    assert winners[0].client_name == "Ana"
    assert winners[0].total_win == 11 + 3


def test_line_longer_than_the_draw_never_matches():
    winners = resolve(_result("23", "12", "30"), _draw(), [_sale("A", ("123", 4)), _sale("B", ("023", 1))])
    assert winners == []


def test_three_digit_draw_pads_both_sides():
    winners = resolve(_result("7", "120", "999"), _draw(digits=3), [_sale("A", ("007", 1)), _sale("B", ("120", 2))])
    assert [(w.ticket_id, w.total_win) for w in winners] == [("A", 11), ("B", 6)]


def test_slugify_schedule():
    assert slugify_schedule("  01:00 PM ") == "0100_pm"
    assert slugify_schedule("Noche   Especial!") == "noche_especial"


def test_payout_key_is_stable_under_whitespace_changes():
    base = build_payout_key("d1", "2024-05-10", "01:00 PM", "SABCD-12345")
    assert base == "d1_2024-05-10_0100_pm_SABCD-12345"
    assert build_payout_key("d1", "2024-05-10", " 01:00   PM ", "SABCD-12345") == base


@pytest.mark.parametrize(
    "changed",
    [
        ("d2", "2024-05-10", "01:00 PM", "SABCD-12345"),
        ("d1", "2024-05-11", "01:00 PM", "SABCD-12345"),
        ("d1", "2024-05-10", "01:00 PM", "SABCD-12346"),
        ("d1", "2024-05-10", "01:00 PM", "sabcd-12345"),
    ],
)
def test_payout_key_changes_with_identity(changed):
    assert build_payout_key(*changed) != build_payout_key("d1", "2024-05-10", "01:00 PM", "SABCD-12345")
