from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Mapping, Optional, Sequence

from src.models.bookings import BookingRecord
from src.schemas.analytics import Period


def first_nights(bookings: Iterable[BookingRecord]) -> Dict[int, date]:
    """Earliest arrival per unit; a unit has no inventory before its first booking."""
    result: Dict[int, date] = {}
    for booking in bookings:
        if booking.unit_id is None:
            continue
        current = result.get(booking.unit_id)
        if current is None or booking.arrival < current:
            result[booking.unit_id] = booking.arrival
    return result


def earliest_first_night(seen: Mapping[int, date]) -> Optional[date]:
    return min(seen.values()) if seen else None


def is_room_disabled(seen: Mapping[int, date], room_id: int, period: Period) -> bool:
    first_seen = seen.get(room_id)
    if first_seen is None:
        return False
    return period.last_night < first_seen


def is_object_disabled(seen: Mapping[int, date], period: Period) -> bool:
    first_seen = earliest_first_night(seen)
    if first_seen is None:
        return False
    return period.last_night < first_seen


def enabled_units_count(seen: Mapping[int, date], room_ids: Sequence[int], period: Period) -> int:
    return sum(1 for room_id in room_ids if not is_room_disabled(seen, room_id, period))
