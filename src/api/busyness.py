from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_busyness_calendar_service
from src.schemas.busyness import RoomCalendar
from src.services.busyness_calendar_service import BusynessCalendarService
from src.shared.response import Meta, ResponseEnvelope

router = APIRouter(prefix="/busyness", tags=["busyness"])


@router.get("")
def busyness_calendar(
    object_id: int = Query(..., alias="objectID"),
    service: BusynessCalendarService = Depends(get_busyness_calendar_service),
) -> ResponseEnvelope[List[RoomCalendar]]:
    data = service.get_calendar(object_id)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source="bookings",
        time_window="12m_back_3m_ahead",
        calculation_version="v1",
    )
    return ResponseEnvelope(data=data, meta=meta)
