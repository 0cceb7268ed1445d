from __future__ import annotations

from datetime import date
from typing import Iterable, List, Mapping, Optional, Sequence

from src.analytics.availability import enabled_units_count, is_object_disabled, is_room_disabled
from src.models.bookings import BookingRecord, PropertyRecord
from src.schemas.analytics import (
    AnalyticsBooking,
    ObjectAnalytics,
    ObjectPeriodAnalytics,
    Period,
    PeriodAnalytics,
    RoomAnalytics,
)
from src.shared.time import clip_nights, days_before

# Fully booked below this nightly price (currency units) is treated as bad source data.
LOW_PRICE_THRESHOLD = 500


def overlapping_bookings(
    bookings: Iterable[BookingRecord],
    period: Period,
    room_ids: Optional[Sequence[int]] = None,
) -> List[BookingRecord]:
    allowed = set(room_ids) if room_ids is not None else None
    return [
        booking
        for booking in bookings
        if not booking.is_inquiry
        and booking.arrival <= period.last_night
        and booking.departure > period.first_night
        and (allowed is None or booking.unit_id in allowed)
    ]


def to_analytics_booking(booking: BookingRecord) -> AnalyticsBooking:
    return AnalyticsBooking(
        id=booking.id,
        first_name=booking.first_name,
        last_name=booking.last_name,
        status=booking.status,
        title=booking.title,
        arrival=booking.arrival,
        departure=booking.departure,
        booking_time=booking.booking_time,
        price=booking.price,
    )


def aggregate_period(
    period: Period,
    bookings: Sequence[BookingRecord],
    seen: Mapping[int, date],
    room_ids: Sequence[int],
    start_median: float,
    end_median: float,
    room_id: Optional[int] = None,
) -> PeriodAnalytics:
    """Occupancy, nightly price and booking window for one room (or the whole object).

    ``bookings`` must already be restricted to the period and to the room/object
    and sorted by creation time; the booking-window estimate depends on that order.
    ``start_median``/``end_median`` are percentages of the occupiable time.
    """
    if room_id is not None:
        disable = is_room_disabled(seen, room_id, period)
        units_count = 1
    else:
        disable = is_object_disabled(seen, period)
        units_count = enabled_units_count(seen, room_ids, period)

    black_time = 0
    for booking in bookings:
        if booking.is_black:
            black_time += clip_nights(
                booking.arrival, booking.departure, period.first_night, period.last_night
            )

    total_time = period.nights * units_count - black_time
    start_threshold = total_time * start_median / 100
    end_threshold = total_time * end_median / 100

    sum_time = 0
    sum_price = 0.0
    sum_booking_days = 0
    start_median_result: Optional[int] = None
    end_median_result: Optional[int] = None
    for booking in bookings:
        if booking.is_black:
            continue
        days_in_period = clip_nights(
            booking.arrival, booking.departure, period.first_night, period.last_night
        )
        days_in_booking = (booking.departure - booking.arrival).days

        sum_time += days_in_period
        if days_in_booking > 0:
            sum_price += booking.price / days_in_booking * days_in_period
        sum_booking_days += days_in_period

        # First crossing wins; later bookings never move the estimate.
        if start_median_result is None and sum_time > start_threshold:
            start_median_result = days_before(period.first_night, booking.booking_time)
        if end_median_result is None and sum_time > end_threshold:
            end_median_result = days_before(period.first_night, booking.booking_time)

    busyness = sum_time / total_time if total_time > 0 else 0.0
    middle_price = sum_price / sum_booking_days if sum_booking_days else 0.0

    error = bool(busyness and not middle_price) or (
        busyness == 1 and middle_price < LOW_PRICE_THRESHOLD
    )

    return PeriodAnalytics(
        first_night=period.first_night,
        last_night=period.last_night,
        bookings=[to_analytics_booking(booking) for booking in bookings],
        busyness=busyness,
        middle_price=middle_price,
        start_median_result=start_median_result or 0,
        end_median_result=end_median_result or 0,
        disable=disable,
        error=error,
    )


def analyze_room(
    prop: PropertyRecord,
    room_id: int,
    room_name: Optional[str],
    periods: Sequence[Period],
    bookings: Sequence[BookingRecord],
    seen: Mapping[int, date],
    start_median: float,
    end_median: float,
) -> RoomAnalytics:
    room_analytics = [
        aggregate_period(
            period,
            overlapping_bookings(bookings, period, [room_id]),
            seen,
            prop.room_ids,
            start_median,
            end_median,
            room_id=room_id,
        )
        for period in periods
    ]
    return RoomAnalytics(
        room_id=room_id,
        room_name=room_name,
        room_analytics=room_analytics,
        error=any(result.error for result in room_analytics),
    )


def analyze_object(
    prop: PropertyRecord,
    periods: Sequence[Period],
    bookings: Sequence[BookingRecord],
    seen: Mapping[int, date],
    start_median: float,
    end_median: float,
) -> ObjectAnalytics:
    object_analytics = [
        ObjectPeriodAnalytics(
            **aggregate_period(
                period,
                overlapping_bookings(bookings, period, prop.room_ids),
                seen,
                prop.room_ids,
                start_median,
                end_median,
            ).model_dump()
        )
        for period in periods
    ]
    rooms_analytics = [
        analyze_room(prop, room.id, room.name, periods, bookings, seen, start_median, end_median)
        for room in prop.rooms
    ]
    return ObjectAnalytics(
        object_id=prop.id,
        object_name=prop.name,
        object_analytics=object_analytics,
        rooms_analytics=rooms_analytics,
        error=any(room.error for room in rooms_analytics),
    )
