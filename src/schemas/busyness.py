from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import Field

from src.shared.base import ResultSchema


class CalendarBooking(ResultSchema):
    id: int
    title: str = ""
    first_name: str = ""
    last_name: str = ""
    status: str = ""
    arrival: date
    departure: date
    price: float
    guests_count: int = 0


class RoomCalendar(ResultSchema):
    room_id: int = Field(alias="roomID")
    room_name: Optional[str] = None
    bookings: List[CalendarBooking]
