"""Energy budget calculation: BMR, daily calorie goal and macro targets."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from taakip.domain.errors import IncompleteProfile, ProfileNotFound
from taakip.domain.profiles import (
    ActivityLevel,
    BiologicalSex,
    Goal,
    MacroTargets,
    Profile,
)
from taakip.numeric import round_half_up

_logger = logging.getLogger(__name__)

DEFAULT_ACTIVITY_MULTIPLIER = 1.2
GOAL_CALORIE_DELTA = 300
PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

_ACTIVITY_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHT: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.ACTIVE: 1.725,
    ActivityLevel.EXTRA_ACTIVE: 1.9,
}

# (protein, carbs, fat) shares of the adjusted daily calories.
_MACRO_RATIOS: dict[Goal, tuple[float, float, float]] = {
    Goal.LOSE_WEIGHT: (0.35, 0.35, 0.30),
    Goal.GAIN_MUSCLE: (0.30, 0.55, 0.15),
    Goal.MAINTAIN: (0.20, 0.50, 0.30),
}

# Tags and the free-text labels the registration flow stores.
_GOAL_ALIASES: dict[str, Goal] = {
    "lose_weight": Goal.LOSE_WEIGHT,
    "lose weight": Goal.LOSE_WEIGHT,
    "kilo vermek": Goal.LOSE_WEIGHT,
    "gain_muscle": Goal.GAIN_MUSCLE,
    "gain muscle": Goal.GAIN_MUSCLE,
    "build muscle": Goal.GAIN_MUSCLE,
    "kas kazanmak": Goal.GAIN_MUSCLE,
    "maintain": Goal.MAINTAIN,
    "stay_healthy": Goal.MAINTAIN,
    "stay healthy": Goal.MAINTAIN,
    "sağlıklı kalmak": Goal.MAINTAIN,
}

_REQUIRED_FIELDS = (
    "weight_kg",
    "height_cm",
    "date_of_birth",
    "biological_sex",
    "activity_level",
)


def age_in_years(date_of_birth: date, evaluation_date: date) -> int:
    """Return age by calendar-year subtraction only (no month/day correction)."""
    return evaluation_date.year - date_of_birth.year


def basal_metabolic_rate(
    weight_kg: float, height_cm: float, age: int, sex: BiologicalSex | str
) -> float:
    """Mifflin-St Jeor BMR in kcal/day."""
    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    if normalize_sex(sex) == BiologicalSex.MALE:
        return bmr + 5
    return bmr - 161


def activity_multiplier(level: ActivityLevel | str | None) -> float:
    """Return the multiplier for an activity level, sedentary when unknown."""
    if level is None:
        return DEFAULT_ACTIVITY_MULTIPLIER
    return _ACTIVITY_MULTIPLIERS.get(
        str(level).strip().lower(), DEFAULT_ACTIVITY_MULTIPLIER
    )


def normalize_sex(raw: BiologicalSex | str | None) -> BiologicalSex | None:
    """Map a stored sex value to an enum member, ignoring case and padding."""
    if isinstance(raw, BiologicalSex):
        return raw
    if not raw:
        return None
    try:
        return BiologicalSex(str(raw).strip().lower())
    except ValueError:
        return None


def normalize_goal(raw: Goal | str | None) -> Goal:
    """Map a stored goal tag or UI label to a goal, maintain when unknown."""
    if isinstance(raw, Goal):
        return raw
    if not raw:
        return Goal.MAINTAIN
    return _GOAL_ALIASES.get(str(raw).strip().lower(), Goal.MAINTAIN)


def validate_profile(profile: Profile) -> None:
    """Raise IncompleteProfile when a required biometric field is missing."""
    missing = [name for name in _REQUIRED_FIELDS if not getattr(profile, name)]
    if profile.biological_sex and normalize_sex(profile.biological_sex) is None:
        missing.append("biological_sex")
    if missing:
        raise IncompleteProfile(missing)


def daily_calorie_goal(profile: Profile, evaluation_date: date) -> int:
    """Return the goal-independent daily calorie need persisted on the profile."""
    validate_profile(profile)
    age = age_in_years(profile.date_of_birth, evaluation_date)
    bmr = basal_metabolic_rate(
        profile.weight_kg, profile.height_cm, age, profile.biological_sex
    )
    return round_half_up(bmr * activity_multiplier(profile.activity_level))


def adjust_for_goal(base_calories: int, goal: Goal) -> int:
    """Apply the goal calorie deficit or surplus."""
    if goal == Goal.LOSE_WEIGHT:
        return base_calories - GOAL_CALORIE_DELTA
    if goal == Goal.GAIN_MUSCLE:
        return base_calories + GOAL_CALORIE_DELTA
    return base_calories


def macro_targets(calories: int, goal: Goal) -> MacroTargets:
    """Split calories into gram targets using the goal's ratio table."""
    protein_ratio, carbs_ratio, fat_ratio = _MACRO_RATIOS[goal]
    return MacroTargets(
        calories=calories,
        protein_g=round_half_up(calories * protein_ratio / PROTEIN_KCAL_PER_G),
        carbs_g=round_half_up(calories * carbs_ratio / CARBS_KCAL_PER_G),
        fat_g=round_half_up(calories * fat_ratio / FAT_KCAL_PER_G),
    )


def compute_budget(profile: Profile, evaluation_date: date) -> MacroTargets:
    """Compute goal-adjusted calorie and macro targets for a profile."""
    goal = normalize_goal(profile.goal)
    base = daily_calorie_goal(profile, evaluation_date)
    return macro_targets(adjust_for_goal(base, goal), goal)


class ProfileStore(Protocol):
    """Persistence interface for user profiles."""

    def get(self, user_id: UUID) -> Profile | None:
        """Return the profile for a user, if present."""

    def update(self, user_id: UUID, fields: dict[str, object]) -> None:
        """Update profile columns for a user."""


@dataclass
class BudgetService:
    """Computes targets from stored profiles and persists the calorie goal."""

    profile_store: ProfileStore

    def load_profile(self, user_id: UUID) -> Profile:
        """Return the stored profile or raise ProfileNotFound."""
        profile = self.profile_store.get(user_id)
        if profile is None:
            raise ProfileNotFound(f"No profile for user {user_id}")
        return profile

    def get_targets(
        self, user_id: UUID, evaluation_date: date | None = None
    ) -> MacroTargets:
        """Return macro targets for a user's current profile."""
        profile = self.load_profile(user_id)
        return compute_budget(profile, evaluation_date or _today())

    def recalculate(self, user_id: UUID, evaluation_date: date | None = None) -> int:
        """Recompute and store the user's daily calorie goal."""
        profile = self.load_profile(user_id)
        goal = daily_calorie_goal(profile, evaluation_date or _today())
        if goal != profile.daily_calorie_goal:
            self.profile_store.update(user_id, {"daily_calorie_goal": goal})
            _logger.info(
                "Daily calorie goal updated: user_id=%s goal=%s", user_id, goal
            )
        return goal


def _today() -> date:
    return datetime.now(tz=UTC).date()
