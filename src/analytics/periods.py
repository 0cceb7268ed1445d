from __future__ import annotations

from datetime import date, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from src.core.errors import InvalidArgumentError
from src.schemas.analytics import Period


class PeriodMode(str, Enum):
    FIXED_SEASON = "fixed-season"
    CUSTOM = "custom"


# The booking UI still sends the provider name for the seasonal grid.
PERIOD_MODE_ALIASES = {"beds24": PeriodMode.FIXED_SEASON}

# (month, day) of first and last night; the first season straddles New Year.
SEASON_TEMPLATE: Tuple[Tuple[Tuple[int, int], Tuple[int, int]], ...] = (
    ((12, 25), (1, 15)),
    ((1, 16), (1, 31)),
    ((2, 1), (2, 28)),
    ((3, 1), (3, 31)),
    ((4, 1), (4, 30)),
    ((5, 1), (5, 31)),
    ((6, 1), (6, 30)),
    ((7, 1), (7, 31)),
    ((8, 1), (8, 31)),
    ((9, 1), (10, 14)),
    ((10, 15), (10, 31)),
    ((11, 1), (11, 19)),
    ((11, 20), (12, 9)),
    ((12, 10), (12, 24)),
)


def parse_period_mode(value: str) -> PeriodMode:
    normalized = (value or "").strip().lower()
    if normalized in PERIOD_MODE_ALIASES:
        return PERIOD_MODE_ALIASES[normalized]
    try:
        return PeriodMode(normalized)
    except ValueError as exc:
        raise InvalidArgumentError(f"Unsupported periodMode: {value!r}") from exc


def generate_periods(
    mode: PeriodMode | str,
    start_date: date,
    end_date: date,
    step: Optional[int] = None,
) -> List[Period]:
    period_mode = mode if isinstance(mode, PeriodMode) else parse_period_mode(mode)
    if start_date > end_date:
        raise InvalidArgumentError("startDate must be less than or equal to endDate")
    if period_mode is PeriodMode.CUSTOM:
        if step is None:
            raise InvalidArgumentError("step is required for the custom period mode")
        return split_date_range(start_date, end_date, step)
    return seasonal_periods(start_date, end_date)


def split_date_range(start_date: date, end_date: date, step: int) -> List[Period]:
    if step <= 0:
        raise InvalidArgumentError("step must be a positive number")
    if start_date > end_date:
        raise InvalidArgumentError("startDate must be less than or equal to endDate")

    periods: List[Period] = []
    cursor = start_date
    while cursor <= end_date:
        last_night = min(cursor + timedelta(days=step - 1), end_date)
        periods.append(Period(first_night=cursor, last_night=last_night))
        cursor += timedelta(days=step)
    return periods


def seasonal_periods(start_date: date, end_date: date) -> List[Period]:
    periods: List[Period] = []
    for year in range(start_date.year - 1, end_date.year + 2):
        for index, ((first_month, first_day), (last_month, last_day)) in enumerate(SEASON_TEMPLATE):
            first_year = year - 1 if index == 0 else year
            season_start = date(first_year, first_month, first_day)
            season_end = date(year, last_month, last_day)

            clipped_start = max(season_start, start_date)
            clipped_end = min(season_end, end_date)
            if clipped_start <= clipped_end:
                periods.append(Period(first_night=clipped_start, last_night=clipped_end))
    return periods
