from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class CategoryRecord(BaseModel):
    name: str
    type: str
    divisibility: Optional[str] = None


class IncomeRecord(BaseModel):
    id: Optional[str] = None
    object_id: int
    room_id: Optional[int] = None
    booking_id: Optional[int] = None
    category: str = ""
    amount: Decimal
    date: datetime.date


class ExpenseRecord(BaseModel):
    id: Optional[str] = None
    object_id: int
    room_id: Optional[int] = None
    booking_id: Optional[int] = None
    category: str
    amount: Decimal
    date: datetime.date
