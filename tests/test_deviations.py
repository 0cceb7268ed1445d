from __future__ import annotations

from datetime import date

import pytest

from src.analytics.deviations import (
    apply_baseline,
    apply_warnings,
    is_price_outlier,
    period_median_price,
    price_deviation_pct,
)
from src.analytics.header import summarize_header
from src.schemas.analytics import (
    HeaderPeriod,
    ObjectAnalytics,
    ObjectPeriodAnalytics,
    Period,
    PeriodAnalytics,
    RoomAnalytics,
)

FIRST = date(2024, 1, 1)
LAST = date(2024, 1, 31)


def _period(busyness: float = 0.0, price: float = 0.0, disable: bool = False) -> PeriodAnalytics:
    return PeriodAnalytics(
        first_night=FIRST,
        last_night=LAST,
        busyness=busyness,
        middle_price=price,
        disable=disable,
    )


def _object(object_id: int, object_period: PeriodAnalytics, rooms: list[PeriodAnalytics]) -> ObjectAnalytics:
    return ObjectAnalytics(
        object_id=object_id,
        object_name=f"Object {object_id}",
        object_analytics=[ObjectPeriodAnalytics(**object_period.model_dump())],
        rooms_analytics=[
            RoomAnalytics(room_id=object_id * 10 + index, room_analytics=[room_period])
            for index, room_period in enumerate(rooms)
        ],
    )


def test_median_of_nonzero_prices():
    assert period_median_price([100, 300, 500]) == 300
    assert period_median_price([0, 500, 100, 300]) == 300
    assert period_median_price([100, 300]) == 300
    assert period_median_price([0, 0]) is None


def test_price_outlier_threshold():
    assert price_deviation_pct(300, 700) == pytest.approx(400 / 3)
    assert is_price_outlier(300, 700)
    assert not is_price_outlier(300, 400)
    assert is_price_outlier(300, 100)
    assert not is_price_outlier(300, 0)
    assert not is_price_outlier(None, 700)


def test_header_averages_enabled_rooms_and_priced_rooms():
    objects = [
        _object(1, _period(0.5, 1000), [_period(0.4, 1000), _period(0.6, 0)]),
        _object(2, _period(0.8, 3000), [_period(0.8, 3000), _period(0.9, 9000, disable=True)]),
        _object(3, _period(1.0, 50, disable=True), [_period(1.0, 50)]),
    ]

    header = summarize_header([Period(first_night=FIRST, last_night=LAST)], objects)

    assert len(header) == 1
    assert header[0].middle_busyness == pytest.approx((0.4 + 0.6 + 0.8) / 3)
    assert header[0].middle_price == pytest.approx((1000 + 3000) / 2)


def test_header_without_enabled_rooms_is_zero():
    objects = [_object(1, _period(disable=True), [_period(disable=True)])]

    header = summarize_header([Period(first_night=FIRST, last_night=LAST)], objects)

    assert header[0].middle_busyness == 0
    assert header[0].middle_price == 0


def test_baseline_sets_grow_flags():
    header = [HeaderPeriod(first_night=FIRST, last_night=LAST, middle_busyness=0.5, middle_price=1000)]
    objects = [
        _object(1, _period(0.6, 900), []),
        _object(2, _period(0.5, 1100), []),
    ]

    result = apply_baseline(header, objects)

    assert result[0].object_analytics[0].busyness_grow is True
    assert result[0].object_analytics[0].price_grow is False
    assert result[1].object_analytics[0].busyness_grow is False
    assert result[1].object_analytics[0].price_grow is True
    assert objects[0].object_analytics[0].busyness_grow is None


def test_grow_flags_only_on_object_periods():
    header = [HeaderPeriod(first_night=FIRST, last_night=LAST, middle_busyness=0.5, middle_price=1000)]
    objects = [_object(1, _period(0.6, 900), [_period(0.6, 900)])]

    result = apply_baseline(header, objects)[0]

    assert result.object_analytics[0].model_dump(by_alias=True)["busynessGrow"] is True
    room_period = result.rooms_analytics[0].room_analytics[0].model_dump(by_alias=True)
    assert "busynessGrow" not in room_period
    assert "priceGrow" not in room_period


def test_price_outlier_room_raises_warnings():
    header = [HeaderPeriod(first_night=FIRST, last_night=LAST)]
    objects = [_object(1, _period(0.5, 300), [_period(0.5, 100), _period(0.5, 300), _period(0.5, 500), _period(0.5, 2000)])]

    result = apply_warnings(header, objects)[0]

    flags = [room.room_analytics[0].warning for room in result.rooms_analytics]
    assert flags == [True, False, False, True]
    assert [room.warning for room in result.rooms_analytics] == flags
    assert result.warning
    assert not result.object_analytics[0].warning


def test_no_warning_inside_deviation_limit():
    header = [HeaderPeriod(first_night=FIRST, last_night=LAST)]
    objects = [_object(1, _period(0.5, 300), [_period(0.5, 300), _period(0.5, 400)])]

    result = apply_warnings(header, objects)[0]

    assert not any(room.warning for room in result.rooms_analytics)
    assert not result.warning


def test_overbooking_raises_warnings():
    header = [HeaderPeriod(first_night=FIRST, last_night=LAST)]
    objects = [_object(1, _period(1.2, 1000), [_period(1.4, 1000)])]

    result = apply_warnings(header, objects)[0]

    assert result.object_analytics[0].warning
    assert result.rooms_analytics[0].room_analytics[0].warning
    assert result.warning
