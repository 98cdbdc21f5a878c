"""Domain models for meal and water logging."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID

from taakip.domain.nutrients import PortionUnit
from taakip.domain.profiles import MacroTargets


@dataclass(frozen=True)
class LoggedMealEntry:
    """A logged food item with portion-scaled absolute values."""

    food_name: str
    calories: int
    protein_g: float
    carbs_g: float
    fat_g: float
    quantity: float
    unit: PortionUnit
    eaten_at: datetime
    id: UUID | None = None
    user_id: UUID | None = None


@dataclass(frozen=True)
class WaterEntry:
    """A logged amount of water."""

    ml: float
    logged_at: datetime
    id: UUID | None = None


@dataclass(frozen=True)
class Totals:
    """Summed calories and macros."""

    calories: float = 0.0
    protein_g: float = 0.0
    carbs_g: float = 0.0
    fat_g: float = 0.0


@dataclass(frozen=True)
class Progress:
    """Consumed versus target; remaining may be negative when over budget."""

    consumed: Totals
    target: MacroTargets
    remaining: Totals


@dataclass(frozen=True)
class DailyProgress:
    """Progress for a single calendar day."""

    day: date
    progress: Progress
    water_ml: float
    meals: list[LoggedMealEntry] = field(default_factory=list)
