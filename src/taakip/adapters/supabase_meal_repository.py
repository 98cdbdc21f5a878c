"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from supabase import Client

from taakip.domain.meals import LoggedMealEntry
from taakip.domain.nutrients import PortionUnit
from taakip.numeric import round_half_up, to_float
from taakip.services.progress import MealStore, day_window

_COLUMNS = (
    "id, user_id, food_name, calories, protein, carbs, fat, quantity, unit, eaten_at"
)


@dataclass
class SupabaseMealRepository(MealStore):
    """Supabase implementation for the meals table."""

    client: Client

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[LoggedMealEntry]:
        """Return meals eaten within the day's inclusive UTC window."""
        start, end = day_window(day, timezone_name)
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("eaten_at", start.isoformat())
            .lte("eaten_at", end.isoformat())
            .order("eaten_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def insert(self, user_id: UUID, entry: LoggedMealEntry) -> LoggedMealEntry:
        """Insert a meal row and return the stored entry."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "food_name": entry.food_name,
                    "calories": entry.calories,
                    "protein": entry.protein_g,
                    "carbs": entry.carbs_g,
                    "fat": entry.fat_g,
                    "quantity": entry.quantity,
                    "unit": entry.unit.value,
                    "eaten_at": entry.eaten_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal entry")
        return _parse_row(response.data[0])


def _parse_row(row: dict[str, object]) -> LoggedMealEntry:
    eaten_at_raw = row.get("eaten_at")
    eaten_at = (
        datetime.fromisoformat(eaten_at_raw)
        if isinstance(eaten_at_raw, str) and eaten_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    unit = PortionUnit.MILLILITERS if row.get("unit") == "ml" else PortionUnit.GRAMS
    return LoggedMealEntry(
        id=UUID(str(row["id"])) if row.get("id") else None,
        user_id=UUID(str(row["user_id"])) if row.get("user_id") else None,
        food_name=str(row.get("food_name") or ""),
        calories=round_half_up(to_float(row.get("calories"))),
        protein_g=to_float(row.get("protein")),
        carbs_g=to_float(row.get("carbs")),
        fat_g=to_float(row.get("fat")),
        quantity=to_float(row.get("quantity")),
        unit=unit,
        eaten_at=eaten_at,
    )
