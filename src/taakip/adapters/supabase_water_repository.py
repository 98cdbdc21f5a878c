"""Supabase repository for water entries."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from taakip.domain.meals import WaterEntry
from taakip.numeric import to_float
from taakip.services.progress import WaterStore, day_window


@dataclass
class SupabaseWaterRepository(WaterStore):
    """Supabase implementation for the water table."""

    client: Client

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[WaterEntry]:
        """Return water rows created within the day's inclusive UTC window."""
        start, end = day_window(day, timezone_name)
        response = (
            self.client.table("water")
            .select("id, ml, created_at")
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .lte("created_at", end.isoformat())
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def insert(self, user_id: UUID, ml: float, logged_at: datetime) -> WaterEntry:
        """Insert a water row and return it."""
        response = (
            self.client.table("water")
            .insert(
                {
                    "user_id": str(user_id),
                    "ml": ml,
                    "created_at": logged_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create water entry")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> WaterEntry:
    created_raw = row.get("created_at")
    logged_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    return WaterEntry(
        id=UUID(str(row["id"])) if row.get("id") else None,
        ml=to_float(row.get("ml")),
        logged_at=logged_at,
    )
