from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.analytics.periods import (
    SEASON_TEMPLATE,
    PeriodMode,
    generate_periods,
    parse_period_mode,
    split_date_range,
)
from src.core.errors import InvalidArgumentError


@pytest.mark.parametrize(
    "start, end, step",
    [
        (date(2024, 1, 1), date(2024, 1, 31), 7),
        (date(2024, 1, 1), date(2024, 1, 1), 3),
        (date(2023, 12, 20), date(2024, 3, 2), 30),
        (date(2024, 2, 1), date(2024, 2, 29), 1),
    ],
)
def test_custom_periods_tile_the_range(start, end, step):
    periods = split_date_range(start, end, step)

    assert periods[0].first_night == start
    assert periods[-1].last_night == end
    for current, following in zip(periods, periods[1:]):
        assert following.first_night == current.last_night + timedelta(days=1)
    for period in periods[:-1]:
        assert period.nights == step
    assert periods[-1].nights <= step
    assert sum(period.nights for period in periods) == (end - start).days + 1


def test_custom_final_period_is_clipped():
    periods = generate_periods("custom", date(2024, 1, 1), date(2024, 1, 10), step=4)
    assert [(p.first_night.day, p.last_night.day) for p in periods] == [(1, 4), (5, 8), (9, 10)]


@pytest.mark.parametrize("step", [0, -3])
def test_custom_rejects_non_positive_step(step):
    with pytest.raises(InvalidArgumentError):
        generate_periods(PeriodMode.CUSTOM, date(2024, 1, 1), date(2024, 1, 10), step=step)


def test_custom_requires_step():
    with pytest.raises(InvalidArgumentError):
        generate_periods(PeriodMode.CUSTOM, date(2024, 1, 1), date(2024, 1, 10))


@pytest.mark.parametrize("mode", [PeriodMode.CUSTOM, PeriodMode.FIXED_SEASON])
def test_rejects_inverted_range(mode):
    with pytest.raises(InvalidArgumentError):
        generate_periods(mode, date(2024, 2, 1), date(2024, 1, 1), step=7)


def test_unknown_mode_is_invalid_argument():
    with pytest.raises(InvalidArgumentError):
        generate_periods("weekly", date(2024, 1, 1), date(2024, 1, 10), step=7)


def test_provider_alias_maps_to_fixed_season():
    assert parse_period_mode("beds24") is PeriodMode.FIXED_SEASON
    assert parse_period_mode("fixed-season") is PeriodMode.FIXED_SEASON


def test_fixed_season_single_year():
    periods = generate_periods("fixed-season", date(2024, 1, 1), date(2024, 12, 31))

    assert periods[0].first_night == date(2024, 1, 1)
    assert periods[0].last_night == date(2024, 1, 15)
    assert periods[1].first_night == date(2024, 1, 16)
    assert periods[-1].first_night == date(2024, 12, 25)
    assert periods[-1].last_night == date(2024, 12, 31)
    assert len(periods) == len(SEASON_TEMPLATE) + 1


def test_fixed_season_winter_period_crosses_new_year():
    periods = generate_periods("fixed-season", date(2023, 12, 1), date(2024, 1, 20))
    spans = [(p.first_night, p.last_night) for p in periods]

    assert spans == [
        (date(2023, 12, 1), date(2023, 12, 9)),
        (date(2023, 12, 10), date(2023, 12, 24)),
        (date(2023, 12, 25), date(2024, 1, 15)),
        (date(2024, 1, 16), date(2024, 1, 20)),
    ]


def test_fixed_season_periods_stay_inside_window_and_are_ordered():
    start, end = date(2022, 11, 5), date(2024, 3, 17)
    periods = generate_periods(PeriodMode.FIXED_SEASON, start, end)

    for period in periods:
        assert start <= period.first_night <= period.last_night <= end
    for current, following in zip(periods, periods[1:]):
        assert following.first_night > current.last_night


def test_fixed_season_inside_one_season():
    periods = generate_periods(PeriodMode.FIXED_SEASON, date(2024, 9, 10), date(2024, 9, 20))
    assert [(p.first_night, p.last_night) for p in periods] == [(date(2024, 9, 10), date(2024, 9, 20))]
