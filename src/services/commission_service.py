from __future__ import annotations

from src.analytics.commission import (
    booking_ids_for_month,
    calculate_commission,
    prepare_commission_inputs,
    summarize_commission,
)
from src.repositories.accountancy_repository import AccountancyRepository
from src.repositories.bookings_repository import BookingsRepository
from src.schemas.commission import CommissionCalculation, CommissionFilters
from src.shared.time import parse_month_key


class CommissionService:
    def __init__(
        self,
        accountancy_repository: AccountancyRepository,
        bookings_repository: BookingsRepository,
    ) -> None:
        self.accountancy_repository = accountancy_repository
        self.bookings_repository = bookings_repository

    def calculate(self, filters: CommissionFilters) -> CommissionCalculation:
        month_start, month_end = parse_month_key(filters.month_key)
        incomes = self.accountancy_repository.list_incomes(filters.object_id, month_start, month_end)
        expenses = self.accountancy_repository.list_expenses(filters.object_id, month_start, month_end)
        categories = self.accountancy_repository.list_categories()

        booking_ids = booking_ids_for_month(incomes, expenses, filters.object_id, filters.month_key)
        bookings = self.bookings_repository.list_bookings_by_ids(booking_ids)

        inputs = prepare_commission_inputs(
            bookings,
            incomes,
            expenses,
            categories,
            filters.object_id,
            filters.room_id,
            filters.month_key,
        )
        results = [calculate_commission(item, filters.scheme_id) for item in inputs]
        return summarize_commission(filters, results, incomes, expenses)
