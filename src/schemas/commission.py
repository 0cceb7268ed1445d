from __future__ import annotations

from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import Field, PlainSerializer

from src.shared.base import BaseSchema, ResultSchema

CommissionSchemeId = Literal[1, 2, 3, 4]
RoomSelector = Union[int, Literal["all"]]

# Amounts stay Decimal in the engine and render as JSON numbers for the UI.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ExpenseByCategory(ResultSchema):
    category: str
    amount: Money


class CommissionInput(ResultSchema):
    booking_id: int
    booking_title: Optional[str] = None
    total_nights: int
    incomes_in_month: Money
    expenses_in_month: Money
    expenses_by_category: List[ExpenseByCategory] = Field(default_factory=list)
    category_divisibility_map: dict[str, Optional[str]] = Field(default_factory=dict)


class CommissionStep(ResultSchema):
    description: str
    value: Optional[Money] = None
    formula: Optional[str] = None


class BookingCommission(ResultSchema):
    booking_id: int
    booking_title: str
    nights: int
    scheme_id: int
    steps: List[CommissionStep]
    commission: Money
    income: Money
    total_expenses: Money
    ota_co_agent_expenses: Money
    divisible_expenses: Money
    indivisible_expenses: Money


class CommissionFilters(BaseSchema):
    object_id: int
    room_id: RoomSelector = "all"
    month_key: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    scheme_id: CommissionSchemeId = 2


class CommissionCalculation(ResultSchema):
    params: CommissionFilters
    bookings: List[BookingCommission]
    total_commission: Money
    total_income: Money
    total_expenses: Money
    unlinked_income: Money
    unlinked_expenses: Money
    total_with_unlinked_expenses: Money
