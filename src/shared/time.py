from __future__ import annotations

import calendar
import math
from datetime import date, datetime, time, timedelta
from typing import Tuple

from src.core.errors import InvalidArgumentError

SECONDS_PER_DAY = 24 * 60 * 60


def parse_month_key(month_key: str) -> Tuple[date, date]:
    try:
        year_part, month_part = month_key.split("-")
        year, month = int(year_part), int(month_part)
        first_day = date(year, month, 1)
    except ValueError as exc:
        raise InvalidArgumentError("monthKey must use the YYYY-MM format") from exc
    last_day = date(year, month, calendar.monthrange(year, month)[1])
    return first_day, last_day


def date_in_month(value: date, month_key: str) -> bool:
    first_day, last_day = parse_month_key(month_key)
    return first_day <= value <= last_day


def add_months(value: date, months: int) -> date:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)


def days_before(anchor: date, moment: datetime) -> int:
    """Whole days from ``moment`` to midnight of ``anchor``, rounded half up."""
    start_of_anchor = datetime.combine(anchor, time.min, tzinfo=moment.tzinfo)
    seconds = (start_of_anchor - moment).total_seconds()
    return math.floor(seconds / SECONDS_PER_DAY + 0.5)


def clip_nights(arrival: date, departure: date, first_night: date, last_night: date) -> int:
    start = max(arrival, first_night)
    end = min(departure, last_night + timedelta(days=1))
    return max(0, (end - start).days)
