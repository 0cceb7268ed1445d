from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Tuple

from src.core.errors import NotFoundError
from src.models.bookings import BookingRecord
from src.repositories.bookings_repository import BookingsRepository
from src.repositories.properties_repository import PropertiesRepository
from src.schemas.busyness import CalendarBooking, RoomCalendar
from src.shared.time import add_months

MONTHS_BACK = 12
MONTHS_AHEAD = 4


def calendar_window(today: date) -> Tuple[date, date]:
    """Twelve months back from the current month through the end of the third month ahead."""
    month_start = today.replace(day=1)
    start_date = add_months(month_start, -MONTHS_BACK)
    end_date = add_months(month_start, MONTHS_AHEAD) - timedelta(days=1)
    return start_date, end_date


def to_calendar_booking(booking: BookingRecord) -> CalendarBooking:
    return CalendarBooking(
        id=booking.id,
        title=booking.title or "",
        first_name=booking.first_name or "",
        last_name=booking.last_name or "",
        status=booking.status,
        arrival=booking.arrival,
        departure=booking.departure,
        price=booking.price,
        guests_count=booking.guests_count,
    )


class BusynessCalendarService:
    def __init__(
        self,
        properties_repository: PropertiesRepository,
        bookings_repository: BookingsRepository,
    ) -> None:
        self.properties_repository = properties_repository
        self.bookings_repository = bookings_repository

    def get_calendar(self, object_id: int, today: Optional[date] = None) -> List[RoomCalendar]:
        prop = self.properties_repository.get_property(object_id)
        if not prop:
            raise NotFoundError("Object not found")

        start_date, end_date = calendar_window(today or date.today())
        calendars: List[RoomCalendar] = []
        for room in prop.rooms:
            bookings = self.bookings_repository.list_room_bookings(prop.id, room.id, start_date, end_date)
            calendars.append(
                RoomCalendar(
                    room_id=room.id,
                    room_name=room.name or str(room.id),
                    bookings=[to_calendar_booking(booking) for booking in bookings if not booking.is_inquiry],
                )
            )
        return calendars
