from __future__ import annotations

from datetime import datetime

import pytest
from pymongo.errors import OperationFailure

from lottosales.repositories.sale_repository import SaleRepository
from lottosales.utils.dates import day_range, shop_timezone

from tests.conftest import OWNER


@pytest.fixture()
def boundary_sales(make_draw, make_sale):
    draw = make_draw()
    make_sale(draw, [{"number": "01", "quantity": 1}], datetime(2024, 5, 9, 23, 59, 59, 999000), ticket_id="BEFORE")
    make_sale(draw, [{"number": "02", "quantity": 1}], datetime(2024, 5, 10, 0, 0), ticket_id="START")
    make_sale(draw, [{"number": "03", "quantity": 1}], datetime(2024, 5, 10, 23, 59, 59, 999000), ticket_id="LAST")
    make_sale(draw, [{"number": "04", "quantity": 1}], datetime(2024, 5, 11, 0, 0), ticket_id="NEXT_DAY")
    make_sale(
        draw,
        [{"number": "05", "quantity": 1}],
        datetime(2024, 5, 10, 12),
        schedules=("08:00 PM",),
        ticket_id="OTHER_SCHEDULE",
    )
    return draw


def _slot(repo: SaleRepository, draw):
    start, end = day_range("2024-05-10", shop_timezone("UTC"))
    return [s.ticket_id for s in repo.find_for_slot(OWNER, draw.id, "01:00 PM", start, end)]


def test_indexed_query_uses_half_open_day(repos, boundary_sales):
    assert _slot(repos["sales"], boundary_sales) == ["START", "LAST"]


def test_fallback_scan_matches_indexed_query(repos, boundary_sales, monkeypatch):
    def _reject(*args, **kwargs):
        raise OperationFailure("index not ready")

    monkeypatch.setattr(repos["sales"], "_query_slot", _reject)

    assert _slot(repos["sales"], boundary_sales) == ["START", "LAST"]


def test_legacy_line_shape_is_normalized(repos, make_draw, make_sale):
    draw = make_draw()
    sale = make_sale(draw, [{"numero": "7", "fraccion": "3"}], datetime(2024, 5, 10, 10))

    loaded = repos["sales"].get(OWNER, sale.id)

    assert loaded.lines[0].number == "7"
    assert loaded.lines[0].quantity == 3


def test_local_day_range_in_shop_timezone():
    tz = shop_timezone("America/Santo_Domingo")
    if tz.key != "America/Santo_Domingo":
        pytest.skip("time zone database unavailable")

    start, end = day_range("2024-05-10", tz)

    assert start == datetime(2024, 5, 10, 4, 0)
    assert end == datetime(2024, 5, 11, 4, 0)
