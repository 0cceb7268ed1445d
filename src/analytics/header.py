from __future__ import annotations

from typing import List, Sequence

from src.schemas.analytics import HeaderPeriod, ObjectAnalytics, Period


def summarize_header(periods: Sequence[Period], objects: Sequence[ObjectAnalytics]) -> List[HeaderPeriod]:
    """Portfolio baseline: unweighted mean over every enabled room, per period.

    Price is averaged only over rooms that actually have a price in the period.
    """
    header: List[HeaderPeriod] = []
    for index, period in enumerate(periods):
        busyness_total = 0.0
        price_total = 0.0
        enabled_rooms = 0
        priced_rooms = 0
        for object_data in objects:
            if object_data.object_analytics[index].disable:
                continue
            for room_data in object_data.rooms_analytics:
                room_period = room_data.room_analytics[index]
                if room_period.disable:
                    continue
                busyness_total += room_period.busyness
                enabled_rooms += 1
                if room_period.middle_price:
                    price_total += room_period.middle_price
                    priced_rooms += 1

        header.append(
            HeaderPeriod(
                first_night=period.first_night,
                last_night=period.last_night,
                middle_busyness=busyness_total / enabled_rooms if enabled_rooms else 0.0,
                middle_price=price_total / priced_rooms if priced_rooms else 0.0,
            )
        )
    return header
