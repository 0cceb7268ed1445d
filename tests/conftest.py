from __future__ import annotations

import os
from datetime import date, datetime
from typing import Callable, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")

from src.api.dependencies import (  # noqa: E402
    get_analytics_service,
    get_busyness_calendar_service,
    get_commission_service,
)
from src.main import create_app  # noqa: E402
from src.models.accountancy import CategoryRecord, ExpenseRecord, IncomeRecord  # noqa: E402
from src.models.bookings import BookingRecord, InvoiceItem, PropertyRecord, RoomRecord  # noqa: E402
from src.services.analytics_service import AnalyticsService  # noqa: E402
from src.services.busyness_calendar_service import BusynessCalendarService  # noqa: E402
from src.services.commission_service import CommissionService  # noqa: E402

BookingFactory = Callable[..., BookingRecord]


def build_booking(
    booking_id: int,
    arrival: date,
    departure: date,
    *,
    unit_id: Optional[int] = 1,
    property_id: int = 10,
    status: str = "confirmed",
    charge: float = 0.0,
    booking_time: Optional[datetime] = None,
    title: Optional[str] = None,
    num_adult: Optional[int] = None,
    num_child: Optional[int] = None,
) -> BookingRecord:
    items = [InvoiceItem(id=booking_id, type="charge", line_total=charge)] if charge else []
    return BookingRecord(
        id=booking_id,
        property_id=property_id,
        unit_id=unit_id,
        arrival=arrival,
        departure=departure,
        booking_time=booking_time or datetime(2023, 12, 1, 12, 0, 0),
        status=status,
        title=title,
        num_adult=num_adult,
        num_child=num_child,
        invoice_items=items,
    )


@pytest.fixture()
def make_booking() -> BookingFactory:
    return build_booking


class StubPropertiesRepository:
    def __init__(self, properties: Sequence[PropertyRecord]) -> None:
        self.properties = list(properties)

    def list_properties(self, property_ids: Sequence[int]) -> List[PropertyRecord]:
        wanted = set(property_ids)
        return [prop for prop in self.properties if prop.id in wanted]

    def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        for prop in self.properties:
            if prop.id == property_id:
                return prop
        return None


class StubBookingsRepository:
    def __init__(self, bookings: Sequence[BookingRecord]) -> None:
        self.bookings = list(bookings)
        self.failing_properties: set[int] = set()

    def list_property_bookings(self, property_id: int) -> List[BookingRecord]:
        if property_id in self.failing_properties:
            raise RuntimeError(f"fetch failed for {property_id}")
        return [booking for booking in self.bookings if booking.property_id == property_id]

    def list_bookings_by_ids(self, booking_ids: Sequence[int]) -> List[BookingRecord]:
        wanted = set(booking_ids)
        return [booking for booking in self.bookings if booking.id in wanted]

    def list_room_bookings(
        self, property_id: int, room_id: int, start_date: date, end_date: date
    ) -> List[BookingRecord]:
        return [
            booking
            for booking in self.bookings
            if booking.property_id == property_id
            and booking.unit_id == room_id
            and booking.status != "inquiry"
            and booking.arrival <= end_date
            and booking.departure >= start_date
        ]


class StubAccountancyRepository:
    def __init__(
        self,
        categories: Sequence[CategoryRecord],
        incomes: Sequence[IncomeRecord],
        expenses: Sequence[ExpenseRecord],
    ) -> None:
        self.categories = list(categories)
        self.incomes = list(incomes)
        self.expenses = list(expenses)

    def list_categories(self) -> List[CategoryRecord]:
        return self.categories

    def list_incomes(self, object_id: int, start_date: date, end_date: date) -> List[IncomeRecord]:
        return [
            income
            for income in self.incomes
            if income.object_id == object_id and start_date <= income.date <= end_date
        ]

    def list_expenses(self, object_id: int, start_date: date, end_date: date) -> List[ExpenseRecord]:
        return [
            expense
            for expense in self.expenses
            if expense.object_id == object_id and start_date <= expense.date <= end_date
        ]


@pytest.fixture()
def portfolio() -> tuple[List[PropertyRecord], List[BookingRecord]]:
    properties = [
        PropertyRecord(
            id=10,
            name="Sea View",
            rooms=[RoomRecord(id=1, name="A1"), RoomRecord(id=2, name="A2")],
        ),
        PropertyRecord(id=20, name="Old Town", rooms=[RoomRecord(id=3, name="B1")]),
    ]
    bookings = [
        build_booking(100, date(2024, 1, 10), date(2024, 1, 15), unit_id=1, charge=5000),
        build_booking(101, date(2024, 1, 20), date(2024, 1, 25), unit_id=2, charge=2500),
        build_booking(102, date(2024, 1, 5), date(2024, 1, 7), unit_id=3, property_id=20, charge=1400),
        build_booking(
            103,
            date(2024, 1, 1),
            date(2024, 1, 3),
            unit_id=3,
            property_id=20,
            status="inquiry",
            charge=999,
        ),
    ]
    return properties, bookings


@pytest.fixture()
def accountancy() -> StubAccountancyRepository:
    categories = [
        CategoryRecord(name="Cleaning", type="expense", divisibility="/2"),
        CategoryRecord(name="Commission OTA", type="expense", divisibility="indivisible"),
        CategoryRecord(name="Rent", type="income"),
    ]
    incomes = [
        IncomeRecord(object_id=10, room_id=1, booking_id=100, category="Rent", amount="10000", date=date(2024, 1, 15)),
        IncomeRecord(object_id=10, room_id=1, booking_id=None, category="Deposit", amount="300", date=date(2024, 1, 20)),
    ]
    expenses = [
        ExpenseRecord(object_id=10, room_id=1, booking_id=100, category="Commission OTA", amount="1500", date=date(2024, 1, 15)),
        ExpenseRecord(object_id=10, room_id=1, booking_id=100, category="Cleaning", amount="400", date=date(2024, 1, 16)),
        ExpenseRecord(object_id=10, room_id=2, booking_id=None, category="Repairs", amount="250", date=date(2024, 1, 22)),
    ]
    return StubAccountancyRepository(categories, incomes, expenses)


@pytest.fixture()
def properties_repository(portfolio) -> StubPropertiesRepository:
    properties, _ = portfolio
    return StubPropertiesRepository(properties)


@pytest.fixture()
def bookings_repository(portfolio) -> StubBookingsRepository:
    _, bookings = portfolio
    return StubBookingsRepository(bookings)


@pytest.fixture()
def client(properties_repository, bookings_repository, accountancy) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_analytics_service] = lambda: AnalyticsService(
        properties_repository=properties_repository,
        bookings_repository=bookings_repository,
        max_workers=2,
    )
    app.dependency_overrides[get_commission_service] = lambda: CommissionService(
        accountancy_repository=accountancy,
        bookings_repository=bookings_repository,
    )
    app.dependency_overrides[get_busyness_calendar_service] = lambda: BusynessCalendarService(
        properties_repository=properties_repository,
        bookings_repository=bookings_repository,
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
