from __future__ import annotations

from datetime import date
from typing import List, Sequence

from src.core.supabase import SupabaseClient, in_filter
from src.models.bookings import INQUIRY_STATUS, BookingRecord


class BookingsRepository:
    def __init__(self) -> None:
        self.client = SupabaseClient()

    def list_property_bookings(self, property_id: int) -> List[BookingRecord]:
        rows = self.client.select_all(
            table="bookings",
            select="*",
            filters=[("property_id", f"eq.{property_id}")],
            order="booking_time.asc,id.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def list_bookings_by_ids(self, booking_ids: Sequence[int]) -> List[BookingRecord]:
        if not booking_ids:
            return []
        rows = self.client.select_all(
            table="bookings",
            select="*",
            filters=[("id", in_filter(list(booking_ids)))],
            order="id.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]

    def list_room_bookings(
        self, property_id: int, room_id: int, start_date: date, end_date: date
    ) -> List[BookingRecord]:
        rows = self.client.select_all(
            table="bookings",
            select="*",
            filters=[
                ("property_id", f"eq.{property_id}"),
                ("unit_id", f"eq.{room_id}"),
                ("status", f"neq.{INQUIRY_STATUS}"),
                ("arrival", f"lte.{end_date.isoformat()}"),
                ("departure", f"gte.{start_date.isoformat()}"),
            ],
            order="arrival.asc",
        )
        return [BookingRecord.model_validate(row) for row in rows]
