from __future__ import annotations

from typing import List, Optional, Sequence

from src.core.supabase import SupabaseClient, in_filter
from src.models.bookings import PropertyRecord


class PropertiesRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_properties(self, property_ids: Sequence[int]) -> List[PropertyRecord]:
        if not property_ids:
            return []
        rows = self.client.select(
            table="properties",
            select="id,name,rooms",
            filters=[("id", in_filter(list(property_ids)))],
            order="name.asc",
        )
        return [PropertyRecord.model_validate(row) for row in rows]

    def get_property(self, property_id: int) -> Optional[PropertyRecord]:
        rows = self.client.select(
            table="properties",
            select="id,name,rooms",
            filters=[("id", f"eq.{property_id}")],
            limit=1,
        )
        if not rows:
            return None
        return PropertyRecord.model_validate(rows[0])
