"""Supabase-backed profile repository."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from uuid import UUID

from supabase import Client

from taakip.domain.profiles import ActivityLevel, BiologicalSex, Goal, Profile
from taakip.numeric import to_float
from taakip.services.budget import ProfileStore

# Domain field name -> profiles column.
_COLUMNS = {
    "weight_kg": "weight_kg",
    "height_cm": "height_cm",
    "date_of_birth": "date_of_birth",
    "biological_sex": "gender",
    "activity_level": "activity_level",
    "goal": "goal",
    "daily_calorie_goal": "daily_calorie_goal",
}


@dataclass
class SupabaseProfileRepository(ProfileStore):
    """Supabase implementation for the profiles table."""

    client: Client

    def get(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""
        response = (
            self.client.table("profiles")
            .select(
                "id, weight_kg, height_cm, date_of_birth, gender, activity_level, "
                "goal, daily_calorie_goal"
            )
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(response.data[0])

    def update(self, user_id: UUID, fields: dict[str, object]) -> None:
        """Update profile columns for a user."""
        payload = {
            _COLUMNS.get(name, name): _serialize(value)
            for name, value in fields.items()
        }
        if payload:
            self.client.table("profiles").update(payload).eq(
                "id", str(user_id)
            ).execute()


def _serialize(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    return value


def _parse_profile(row: dict[str, object]) -> Profile:
    daily_goal = row.get("daily_calorie_goal")
    if isinstance(daily_goal, bool) or not isinstance(daily_goal, int | float):
        daily_goal = None
    return Profile(
        user_id=UUID(str(row["id"])),
        weight_kg=to_float(row.get("weight_kg")) or None,
        height_cm=to_float(row.get("height_cm")) or None,
        date_of_birth=_parse_date(row.get("date_of_birth")),
        biological_sex=_parse_choice(row.get("gender"), BiologicalSex),
        activity_level=_parse_choice(row.get("activity_level"), ActivityLevel),
        goal=_parse_choice(row.get("goal"), Goal),
        daily_calorie_goal=round(daily_goal) if daily_goal is not None else None,
    )


def _parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _parse_choice(value: object, choices: type[Enum]) -> Enum | str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    cleaned = value.strip()
    try:
        return choices(cleaned.lower())
    except ValueError:
        return cleaned
