from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_analytics_service
from src.schemas.analytics import AnalyticsFilters, AnalyticsResponse
from src.services.analytics_service import AnalyticsService
from src.shared.response import Meta, ResponseEnvelope

router = APIRouter(prefix="/analytics", tags=["analytics"])


def get_analytics_filters(
    objects: List[int] = Query(..., alias="objects[]"),
    start_median: float = Query(..., alias="startMedian", ge=0, le=100),
    end_median: float = Query(..., alias="endMedian", ge=0, le=100),
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    period_mode: str = Query(..., alias="periodMode"),
    step: Optional[int] = Query(default=None),
) -> AnalyticsFilters:
    return AnalyticsFilters(
        objects=objects,
        start_median=start_median,
        end_median=end_median,
        start_date=start_date,
        end_date=end_date,
        period_mode=period_mode,
        step=step,
    )


@router.get("")
def analytics(
    filters: AnalyticsFilters = Depends(get_analytics_filters),
    service: AnalyticsService = Depends(get_analytics_service),
) -> ResponseEnvelope[AnalyticsResponse]:
    data = service.get_analytics(filters)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source="bookings",
        time_window=f"{filters.start_date.isoformat()}..{filters.end_date.isoformat()}",
        calculation_version="v1",
    )
    return ResponseEnvelope(data=data, meta=meta)
