from __future__ import annotations

from datetime import date
from typing import List

from src.core.supabase import SupabaseClient
from src.models.accountancy import CategoryRecord, ExpenseRecord, IncomeRecord


class AccountancyRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_categories(self) -> List[CategoryRecord]:
        rows = self.client.select_all(
            table="accountancy_categories",
            select="name,type,divisibility",
            order="name.asc",
        )
        return [CategoryRecord.model_validate(row) for row in rows]

    def list_incomes(self, object_id: int, start_date: date, end_date: date) -> List[IncomeRecord]:
        rows = self.client.select_all(
            table="incomes",
            select="*",
            filters=[
                ("object_id", f"eq.{object_id}"),
                ("date", f"gte.{start_date.isoformat()}"),
                ("date", f"lte.{end_date.isoformat()}"),
            ],
            order="date.asc",
        )
        return [IncomeRecord.model_validate(row) for row in rows]

    def list_expenses(self, object_id: int, start_date: date, end_date: date) -> List[ExpenseRecord]:
        rows = self.client.select_all(
            table="expenses",
            select="*",
            filters=[
                ("object_id", f"eq.{object_id}"),
                ("date", f"gte.{start_date.isoformat()}"),
                ("date", f"lte.{end_date.isoformat()}"),
            ],
            order="date.asc",
        )
        return [ExpenseRecord.model_validate(row) for row in rows]
