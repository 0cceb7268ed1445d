from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from src.shared.base import BaseSchema, ResultSchema


class Period(ResultSchema):
    first_night: date
    last_night: date

    @property
    def nights(self) -> int:
        return (self.last_night - self.first_night).days + 1


class AnalyticsBooking(ResultSchema):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: str
    title: Optional[str] = None
    arrival: date
    departure: date
    booking_time: datetime
    price: float


class PeriodAnalytics(ResultSchema):
    first_night: date
    last_night: date
    bookings: List[AnalyticsBooking] = Field(default_factory=list)
    busyness: float = 0.0
    middle_price: float = 0.0
    start_median_result: int = 0
    end_median_result: int = 0
    disable: bool = False
    error: bool = False
    warning: bool = False


class ObjectPeriodAnalytics(PeriodAnalytics):
    # Only object periods are compared against the portfolio baseline.
    busyness_grow: Optional[bool] = None
    price_grow: Optional[bool] = None


class RoomAnalytics(ResultSchema):
    room_id: int = Field(alias="roomID")
    room_name: Optional[str] = None
    room_analytics: List[PeriodAnalytics]
    error: bool = False
    warning: bool = False


class ObjectAnalytics(ResultSchema):
    object_id: int = Field(alias="objectID")
    object_name: Optional[str] = None
    object_analytics: List[ObjectPeriodAnalytics]
    rooms_analytics: List[RoomAnalytics]
    error: bool = False
    warning: bool = False


class HeaderPeriod(ResultSchema):
    first_night: date
    last_night: date
    middle_busyness: float = 0.0
    middle_price: float = 0.0


class AnalyticsResponse(ResultSchema):
    header: List[HeaderPeriod]
    data: List[ObjectAnalytics]


class AnalyticsFilters(BaseSchema):
    objects: List[int]
    start_median: float = Field(..., ge=0, le=100)
    end_median: float = Field(..., ge=0, le=100)
    start_date: date
    end_date: date
    period_mode: str
    step: Optional[int] = None
