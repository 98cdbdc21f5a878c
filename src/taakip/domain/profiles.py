"""Domain models for user profiles and energy budgets."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from uuid import UUID


class BiologicalSex(StrEnum):
    """Sex categories supported by the BMR formula."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    EXTRA_ACTIVE = "extra_active"


class Goal(StrEnum):
    """Normalized goal tag used for calorie and macro adjustment."""

    LOSE_WEIGHT = "lose_weight"
    MAINTAIN = "maintain"
    GAIN_MUSCLE = "gain_muscle"


@dataclass(frozen=True)
class Profile:
    """Biometric profile of a user as stored in the profiles table.

    Enum-typed fields keep the raw stored string when it is not a recognised
    value, so the calculator can apply its own defaults.
    """

    user_id: UUID
    weight_kg: float | None
    height_cm: float | None
    date_of_birth: date | None
    biological_sex: BiologicalSex | str | None
    activity_level: ActivityLevel | str | None
    goal: Goal | str | None
    daily_calorie_goal: int | None = None


@dataclass(frozen=True)
class MacroTargets:
    """Daily calorie and macro targets derived from a profile."""

    calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
