"""Daily consumption aggregation against energy budget targets."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo

from taakip.domain.meals import (
    DailyProgress,
    LoggedMealEntry,
    Progress,
    Totals,
    WaterEntry,
)
from taakip.domain.profiles import MacroTargets
from taakip.numeric import to_float
from taakip.services.budget import BudgetService, compute_budget

_DAY_END = time(23, 59, 59, 999000)


class MealStore(Protocol):
    """Persistence interface for logged meals."""

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[LoggedMealEntry]:
        """Return meals eaten on a local calendar day, oldest first."""

    def insert(self, user_id: UUID, entry: LoggedMealEntry) -> LoggedMealEntry:
        """Persist a meal entry and return the stored row."""


class WaterStore(Protocol):
    """Persistence interface for logged water."""

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[WaterEntry]:
        """Return water entries logged on a local calendar day."""

    def insert(self, user_id: UUID, ml: float, logged_at: datetime) -> WaterEntry:
        """Persist a water entry and return the stored row."""


def day_window(day: date, timezone_name: str = "UTC") -> tuple[datetime, datetime]:
    """Return the inclusive UTC window covering a local calendar day."""
    tz = ZoneInfo(timezone_name)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, _DAY_END, tzinfo=tz)
    return start.astimezone(UTC), end.astimezone(UTC)


def sum_entries(entries: Iterable[LoggedMealEntry]) -> Totals:
    """Sum calories and macros; malformed fields count as zero."""
    calories = protein_g = carbs_g = fat_g = 0.0
    for entry in entries:
        calories += to_float(getattr(entry, "calories", None))
        protein_g += to_float(getattr(entry, "protein_g", None))
        carbs_g += to_float(getattr(entry, "carbs_g", None))
        fat_g += to_float(getattr(entry, "fat_g", None))
    return Totals(
        calories=calories, protein_g=protein_g, carbs_g=carbs_g, fat_g=fat_g
    )


def sum_water(entries: Iterable[WaterEntry]) -> float:
    """Sum water millilitres; malformed amounts count as zero."""
    return sum((to_float(getattr(entry, "ml", None)) for entry in entries), 0.0)


def reconcile(entries: Iterable[LoggedMealEntry], targets: MacroTargets) -> Progress:
    """Compare consumed totals with targets; remaining is not clamped at zero."""
    consumed = sum_entries(entries)
    remaining = Totals(
        calories=targets.calories - consumed.calories,
        protein_g=targets.protein_g - consumed.protein_g,
        carbs_g=targets.carbs_g - consumed.carbs_g,
        fat_g=targets.fat_g - consumed.fat_g,
    )
    return Progress(consumed=consumed, target=targets, remaining=remaining)


@dataclass
class ProgressService:
    """Builds the daily progress view from stored profile, meals and water."""

    budget_service: BudgetService
    meal_store: MealStore
    water_store: WaterStore

    def get_daily_progress(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> DailyProgress:
        """Return consumed versus target for a local calendar day."""
        profile = self.budget_service.load_profile(user_id)
        targets = compute_budget(profile, day)
        meals = self.meal_store.list_for_day(user_id, day, timezone_name)
        water = self.water_store.list_for_day(user_id, day, timezone_name)
        return DailyProgress(
            day=day,
            progress=reconcile(meals, targets),
            water_ml=sum_water(water),
            meals=meals,
        )
