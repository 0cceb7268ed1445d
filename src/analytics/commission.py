from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from math import ceil
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from src.core.errors import InvalidArgumentError
from src.models.accountancy import CategoryRecord, ExpenseRecord, IncomeRecord
from src.models.bookings import BookingRecord
from src.schemas.commission import (
    BookingCommission,
    CommissionCalculation,
    CommissionFilters,
    CommissionInput,
    CommissionStep,
    ExpenseByCategory,
    RoomSelector,
)
from src.shared.time import SECONDS_PER_DAY, date_in_month

ZERO = Decimal("0")
DIVISIBLE_TAGS = frozenset({"/2", "/3"})


class CategoryClass(str, Enum):
    OTA = "ota"
    CO_AGENT = "co_agent"
    OTHER = "other"


# Substring keywords, matched case-insensitively. Extend here, not in the tiering.
CATEGORY_KEYWORDS: Dict[CategoryClass, Tuple[str, ...]] = {
    CategoryClass.OTA: ("ota", "commission ota", "ota commission", "комиссия ota"),
    CategoryClass.CO_AGENT: (
        "co-agent",
        "coagent",
        "co-agents",
        "co-agents commission",
        "ko-agent",
        "ко-агент",
        "коагент",
    ),
}


def classify_category(
    name: str, keywords: Mapping[CategoryClass, Sequence[str]] = CATEGORY_KEYWORDS
) -> CategoryClass:
    lowered = (name or "").strip().lower()
    for category_class, category_keywords in keywords.items():
        if any(keyword.lower() in lowered for keyword in category_keywords):
            return category_class
    return CategoryClass.OTHER


def is_ota_or_co_agent(name: str) -> bool:
    return classify_category(name) in (CategoryClass.OTA, CategoryClass.CO_AGENT)


def is_divisible(divisibility: Optional[str]) -> bool:
    return divisibility in DIVISIBLE_TAGS


def nights_count(arrival: Union[date, datetime], departure: Union[date, datetime]) -> int:
    if isinstance(arrival, datetime) and isinstance(departure, datetime):
        seconds = (departure - arrival).total_seconds()
        return max(0, ceil(seconds / SECONDS_PER_DAY))
    return max(0, (departure - arrival).days)


class Deduction(str, Enum):
    DIVISIBLE = "divisible"
    OTA_CO_AGENT = "ota_co_agent"


@dataclass(frozen=True)
class SchemeTier:
    max_nights: Optional[int]
    rate_pct: Decimal
    deduction: Optional[Deduction]
    label: str


# Scheme 1 deducts divisible expenses, schemes 2-4 deduct OTA/co-agent expenses.
COMMISSION_SCHEMES: Dict[int, Tuple[SchemeTier, ...]] = {
    1: (
        SchemeTier(30, Decimal("30"), Deduction.DIVISIBLE, "bookings up to 30 nights"),
        SchemeTier(182, Decimal("20"), None, "bookings of 31-182 nights, before all expenses"),
        SchemeTier(None, Decimal("15"), None, "bookings of 183+ nights, before all expenses"),
    ),
    2: (
        SchemeTier(182, Decimal("20"), Deduction.OTA_CO_AGENT, "bookings of 1-182 nights"),
        SchemeTier(None, Decimal("15"), None, "bookings of 183+ nights, before all expenses"),
    ),
    3: (
        SchemeTier(182, Decimal("25"), Deduction.OTA_CO_AGENT, "bookings of 1-182 nights"),
        SchemeTier(None, Decimal("15"), None, "bookings of 183+ nights"),
    ),
    4: (
        SchemeTier(182, Decimal("20"), Deduction.OTA_CO_AGENT, "bookings of 1-182 nights"),
        SchemeTier(None, Decimal("15"), None, "bookings of 183+ nights"),
    ),
}

DEDUCTION_LABELS = {
    Deduction.DIVISIBLE: (
        "Divisible expenses (categories with divisibility /2 or /3)",
        "Commission base (income - divisible expenses)",
    ),
    Deduction.OTA_CO_AGENT: (
        "OTA and co-agent expenses (excluded from the base)",
        "Commission base (income - OTA/co-agent expenses)",
    ),
}


def select_tier(scheme_id: int, nights: int) -> SchemeTier:
    tiers = COMMISSION_SCHEMES.get(scheme_id)
    if tiers is None:
        raise InvalidArgumentError(f"Unknown commission scheme: {scheme_id}")
    for tier in tiers:
        if tier.max_nights is None or nights <= tier.max_nights:
            return tier
    return tiers[-1]


def _sum_amounts(items: Iterable[ExpenseByCategory]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def calculate_commission(
    commission_input: CommissionInput,
    scheme_id: int,
    classifier: Callable[[str], CategoryClass] = classify_category,
) -> BookingCommission:
    """Commission for one booking's month under ``scheme_id``, with its audit ledger."""
    income = commission_input.incomes_in_month
    expenses = commission_input.expenses_in_month
    nights = commission_input.total_nights
    by_category = commission_input.expenses_by_category
    divisibility = commission_input.category_divisibility_map
    tier = select_tier(scheme_id, nights)

    ota_co_agent = _sum_amounts(
        item for item in by_category if classifier(item.category) is not CategoryClass.OTHER
    )
    divisible = _sum_amounts(item for item in by_category if is_divisible(divisibility.get(item.category)))
    indivisible = _sum_amounts(
        item for item in by_category if not is_divisible(divisibility.get(item.category))
    )

    steps: List[CommissionStep] = [
        CommissionStep(description="Income for the month", value=income, formula="Σ incomes"),
        CommissionStep(description="Expenses for the month", value=expenses, formula="Σ expenses"),
        CommissionStep(description="Number of nights", value=Decimal(nights)),
    ]

    if tier.deduction is not None:
        deducted = divisible if tier.deduction is Deduction.DIVISIBLE else ota_co_agent
        deduction_label, base_label = DEDUCTION_LABELS[tier.deduction]
        steps.append(CommissionStep(description=deduction_label, value=deducted))
        base = max(ZERO, income - deducted)
        steps.append(
            CommissionStep(description=base_label, value=base, formula=f"{income} - {deducted} = {base}")
        )
    else:
        base = max(ZERO, income)
        steps.append(
            CommissionStep(description="Commission base (income before expenses)", value=base)
        )

    steps.append(CommissionStep(description="Commission rate", value=tier.rate_pct, formula=f"{tier.rate_pct}%"))
    commission = base * tier.rate_pct / 100
    steps.append(
        CommissionStep(
            description=f"Commission {tier.rate_pct}% ({tier.label})",
            value=commission,
            formula=f"{base} × {tier.rate_pct}% = {commission:.2f}",
        )
    )

    return BookingCommission(
        booking_id=commission_input.booking_id,
        booking_title=commission_input.booking_title or f"#{commission_input.booking_id}",
        nights=nights,
        scheme_id=scheme_id,
        steps=steps,
        commission=commission,
        income=income,
        total_expenses=expenses,
        ota_co_agent_expenses=ota_co_agent,
        divisible_expenses=divisible,
        indivisible_expenses=indivisible,
    )


def build_divisibility_map(categories: Iterable[CategoryRecord]) -> Dict[str, Optional[str]]:
    return {
        category.name: category.divisibility
        for category in categories
        if category.type == "expense" and category.name
    }


def _room_matches(room_id: RoomSelector, candidate: Optional[int]) -> bool:
    return room_id == "all" or candidate == room_id


def booking_ids_for_month(
    incomes: Iterable[IncomeRecord],
    expenses: Iterable[ExpenseRecord],
    object_id: int,
    month_key: str,
) -> List[int]:
    ids = {
        record.booking_id
        for record in [*incomes, *expenses]
        if record.object_id == object_id
        and record.booking_id is not None
        and date_in_month(record.date, month_key)
    }
    return sorted(ids)


def prepare_commission_inputs(
    bookings: Iterable[BookingRecord],
    incomes: Sequence[IncomeRecord],
    expenses: Sequence[ExpenseRecord],
    categories: Iterable[CategoryRecord],
    object_id: int,
    room_id: RoomSelector,
    month_key: str,
) -> List[CommissionInput]:
    divisibility_map = build_divisibility_map(categories)
    month_incomes = [
        income for income in incomes if income.object_id == object_id and date_in_month(income.date, month_key)
    ]
    month_expenses = [
        expense
        for expense in expenses
        if expense.object_id == object_id and date_in_month(expense.date, month_key)
    ]

    inputs: List[CommissionInput] = []
    for booking in bookings:
        if booking.property_id != object_id or not _room_matches(room_id, booking.unit_id):
            continue
        booking_incomes = [income for income in month_incomes if income.booking_id == booking.id]
        booking_expenses = [expense for expense in month_expenses if expense.booking_id == booking.id]

        by_category: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for expense in booking_expenses:
            by_category[expense.category] += expense.amount

        inputs.append(
            CommissionInput(
                booking_id=booking.id,
                booking_title=booking.title,
                total_nights=nights_count(booking.arrival, booking.departure),
                incomes_in_month=sum((income.amount for income in booking_incomes), ZERO),
                expenses_in_month=sum((expense.amount for expense in booking_expenses), ZERO),
                expenses_by_category=[
                    ExpenseByCategory(category=category, amount=amount)
                    for category, amount in by_category.items()
                ],
                category_divisibility_map=divisibility_map,
            )
        )
    return inputs


def summarize_commission(
    params: CommissionFilters,
    results: Sequence[BookingCommission],
    incomes: Iterable[IncomeRecord],
    expenses: Iterable[ExpenseRecord],
) -> CommissionCalculation:
    """Portfolio totals, including income and expenses not attached to any booking."""
    unlinked_income = sum(
        (
            income.amount
            for income in incomes
            if income.object_id == params.object_id
            and income.booking_id is None
            and date_in_month(income.date, params.month_key)
            and _room_matches(params.room_id, income.room_id)
        ),
        ZERO,
    )
    unlinked_expenses = sum(
        (
            expense.amount
            for expense in expenses
            if expense.object_id == params.object_id
            and expense.booking_id is None
            and date_in_month(expense.date, params.month_key)
            and _room_matches(params.room_id, expense.room_id)
        ),
        ZERO,
    )
    total_commission = sum((result.commission for result in results), ZERO)
    return CommissionCalculation(
        params=params,
        bookings=list(results),
        total_commission=total_commission,
        total_income=sum((result.income for result in results), ZERO) + unlinked_income,
        total_expenses=sum((result.total_expenses for result in results), ZERO) + unlinked_expenses,
        unlinked_income=unlinked_income,
        unlinked_expenses=unlinked_expenses,
        total_with_unlinked_expenses=total_commission + unlinked_expenses,
    )
