from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_commission_service
from src.core.errors import InvalidArgumentError
from src.schemas.commission import CommissionCalculation, CommissionFilters, RoomSelector
from src.services.commission_service import CommissionService
from src.shared.response import Meta, ResponseEnvelope

router = APIRouter(prefix="/commission", tags=["commission"])


def parse_room_selector(value: str) -> RoomSelector:
    if value == "all":
        return "all"
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidArgumentError("roomId must be a room id or 'all'") from exc


def get_commission_filters(
    object_id: int = Query(..., alias="objectId"),
    room_id: str = Query(default="all", alias="roomId"),
    month_key: str = Query(..., alias="monthKey", pattern=r"^\d{4}-\d{2}$"),
    scheme_id: int = Query(default=2, alias="schemeId", ge=1, le=4),
) -> CommissionFilters:
    return CommissionFilters(
        object_id=object_id,
        room_id=parse_room_selector(room_id),
        month_key=month_key,
        scheme_id=scheme_id,
    )


@router.get("")
def commission(
    filters: CommissionFilters = Depends(get_commission_filters),
    service: CommissionService = Depends(get_commission_service),
) -> ResponseEnvelope[CommissionCalculation]:
    data = service.calculate(filters)
    meta = Meta(
        as_of_date=date.today().isoformat(),
        source="incomes,expenses,bookings",
        time_window=filters.month_key,
        calculation_version="v1",
    )
    return ResponseEnvelope(data=data, meta=meta)
