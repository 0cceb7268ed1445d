from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

INQUIRY_STATUS = "inquiry"
BLACK_STATUS = "black"
CHARGE_ITEM_TYPE = "charge"


class InvoiceItem(BaseModel):
    id: Optional[int] = None
    type: str
    line_total: float = 0.0


class BookingRecord(BaseModel):
    id: int
    property_id: Optional[int] = None
    unit_id: Optional[int] = None
    arrival: date
    departure: date
    booking_time: datetime
    status: str = ""
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    num_adult: Optional[int] = None
    num_child: Optional[int] = None
    invoice_items: List[InvoiceItem] = Field(default_factory=list)

    @property
    def price(self) -> float:
        charges = [item.line_total for item in self.invoice_items if item.type == CHARGE_ITEM_TYPE]
        return max([0.0, *charges])

    @property
    def is_inquiry(self) -> bool:
        return self.status == INQUIRY_STATUS

    @property
    def is_black(self) -> bool:
        return self.status == BLACK_STATUS

    @property
    def guests_count(self) -> int:
        return (self.num_adult or 0) + (self.num_child or 0)


class RoomRecord(BaseModel):
    id: int
    name: Optional[str] = None


class PropertyRecord(BaseModel):
    id: int
    name: str = ""
    rooms: List[RoomRecord] = Field(default_factory=list)

    @property
    def room_ids(self) -> List[int]:
        return [room.id for room in self.rooms]
