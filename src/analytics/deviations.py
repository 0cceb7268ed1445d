from __future__ import annotations

from typing import List, Optional, Sequence

from src.schemas.analytics import HeaderPeriod, ObjectAnalytics, PeriodAnalytics, RoomAnalytics

PRICE_DEVIATION_LIMIT_PCT = 50.0
OVERBOOKED_BUSYNESS = 1.0


def period_median_price(prices: Sequence[float]) -> Optional[float]:
    """Median of the non-zero prices: element ``n // 2`` of the ascending sort."""
    priced = sorted(price for price in prices if price)
    if not priced:
        return None
    return priced[len(priced) // 2]


def price_deviation_pct(median: float, value: float) -> float:
    return (value - median) / median * 100


def is_price_outlier(median: Optional[float], value: float) -> bool:
    if not value or not median:
        return False
    return abs(price_deviation_pct(median, value)) > PRICE_DEVIATION_LIMIT_PCT


def apply_baseline(header: Sequence[HeaderPeriod], objects: Sequence[ObjectAnalytics]) -> List[ObjectAnalytics]:
    result: List[ObjectAnalytics] = []
    for object_data in objects:
        object_analytics = [
            object_period.model_copy(
                update={
                    "busyness_grow": object_period.busyness > baseline.middle_busyness,
                    "price_grow": object_period.middle_price > baseline.middle_price,
                }
            )
            for object_period, baseline in zip(object_data.object_analytics, header)
        ]
        result.append(object_data.model_copy(update={"object_analytics": object_analytics}))
    return result


def apply_warnings(header: Sequence[HeaderPeriod], objects: Sequence[ObjectAnalytics]) -> List[ObjectAnalytics]:
    result: List[ObjectAnalytics] = []
    for object_data in objects:
        medians = [
            period_median_price([room.room_analytics[index].middle_price for room in object_data.rooms_analytics])
            for index in range(len(header))
        ]

        rooms: List[RoomAnalytics] = []
        for room in object_data.rooms_analytics:
            room_periods = [
                _flag_room_period(room_period, medians[index])
                for index, room_period in enumerate(room.room_analytics)
            ]
            rooms.append(
                room.model_copy(
                    update={
                        "room_analytics": room_periods,
                        "warning": any(room_period.warning for room_period in room_periods),
                    }
                )
            )

        object_periods = [
            object_period.model_copy(update={"warning": object_period.busyness > OVERBOOKED_BUSYNESS})
            for object_period in object_data.object_analytics
        ]
        result.append(
            object_data.model_copy(
                update={
                    "object_analytics": object_periods,
                    "rooms_analytics": rooms,
                    "warning": any(room.warning for room in rooms),
                }
            )
        )
    return result


def _flag_room_period(room_period: PeriodAnalytics, median: Optional[float]) -> PeriodAnalytics:
    warning = is_price_outlier(median, room_period.middle_price) or (
        room_period.busyness > OVERBOOKED_BUSYNESS
    )
    return room_period.model_copy(update={"warning": warning})
