"""Tests for the energy budget calculator."""

from datetime import date

import pytest

from taakip.domain.errors import IncompleteProfile, ProfileNotFound
from taakip.domain.profiles import ActivityLevel, BiologicalSex, Goal, MacroTargets
from taakip.numeric import round_half_up
from taakip.services.budget import (
    BudgetService,
    activity_multiplier,
    age_in_years,
    basal_metabolic_rate,
    compute_budget,
    daily_calorie_goal,
    normalize_goal,
    normalize_sex,
)
from tests.conftest import InMemoryProfileStore, make_profile

EVALUATED_ON = date(2024, 3, 1)


def test_reference_profile_maintain() -> None:
    targets = compute_budget(make_profile(), EVALUATED_ON)

    assert targets == MacroTargets(calories=1979, protein_g=99, carbs_g=247, fat_g=66)


def test_reference_profile_lose_weight() -> None:
    targets = compute_budget(make_profile(goal=Goal.LOSE_WEIGHT), EVALUATED_ON)

    assert targets == MacroTargets(calories=1679, protein_g=147, carbs_g=147, fat_g=56)


def test_reference_profile_gain_muscle() -> None:
    targets = compute_budget(make_profile(goal=Goal.GAIN_MUSCLE), EVALUATED_ON)

    assert targets == MacroTargets(calories=2279, protein_g=171, carbs_g=313, fat_g=38)


def test_goal_adjustment_is_monotonic() -> None:
    calories = {
        goal: compute_budget(make_profile(goal=goal), EVALUATED_ON).calories
        for goal in Goal
    }

    assert calories[Goal.GAIN_MUSCLE] > calories[Goal.MAINTAIN]
    assert calories[Goal.MAINTAIN] > calories[Goal.LOSE_WEIGHT]


@pytest.mark.parametrize("goal", list(Goal))
def test_macro_energy_matches_calories(goal: Goal) -> None:
    targets = compute_budget(make_profile(goal=goal), EVALUATED_ON)

    energy = targets.protein_g * 4 + targets.carbs_g * 4 + targets.fat_g * 9
    assert abs(energy - targets.calories) <= 3


def test_compute_budget_is_deterministic() -> None:
    profile = make_profile(activity_level=ActivityLevel.MODERATE)

    assert compute_budget(profile, EVALUATED_ON) == compute_budget(
        profile, EVALUATED_ON
    )


def test_age_ignores_month_and_day() -> None:
    assert age_in_years(date(1994, 12, 31), date(2024, 1, 1)) == 30
    assert age_in_years(date(1994, 1, 1), date(2024, 12, 31)) == 30


def test_female_offset() -> None:
    assert basal_metabolic_rate(60, 165, 30, BiologicalSex.FEMALE) == 1320.25
    assert basal_metabolic_rate(60, 165, 30, "male") == 1486.25


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (ActivityLevel.SEDENTARY, 1.2),
        ("light", 1.375),
        (" Moderate ", 1.55),
        (ActivityLevel.MODERATE, 1.55),
        (ActivityLevel.ACTIVE, 1.725),
        (ActivityLevel.EXTRA_ACTIVE, 1.9),
        ("couch", 1.2),
        (None, 1.2),
    ],
)
def test_activity_multiplier(level: object, expected: float) -> None:
    assert activity_multiplier(level) == expected


def test_unknown_activity_level_falls_back_to_sedentary() -> None:
    sedentary = daily_calorie_goal(make_profile(), EVALUATED_ON)
    unknown = daily_calorie_goal(make_profile(activity_level="couch"), EVALUATED_ON)

    assert unknown == sedentary == 1979


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("lose_weight", Goal.LOSE_WEIGHT),
        ("Kilo Vermek", Goal.LOSE_WEIGHT),
        ("Kas Kazanmak", Goal.GAIN_MUSCLE),
        ("build muscle", Goal.GAIN_MUSCLE),
        ("stay_healthy", Goal.MAINTAIN),
        ("something else", Goal.MAINTAIN),
        (None, Goal.MAINTAIN),
    ],
)
def test_normalize_goal(raw: object, expected: Goal) -> None:
    assert normalize_goal(raw) is expected


def test_free_text_goal_drives_adjustment() -> None:
    targets = compute_budget(make_profile(goal="Kilo Vermek"), EVALUATED_ON)

    assert targets.calories == 1679


@pytest.mark.parametrize(
    "field_name",
    ["weight_kg", "height_cm", "date_of_birth", "biological_sex", "activity_level"],
)
def test_missing_field_raises_incomplete_profile(field_name: str) -> None:
    profile = make_profile(**{field_name: None})

    with pytest.raises(IncompleteProfile) as exc_info:
        compute_budget(profile, EVALUATED_ON)

    assert exc_info.value.missing == [field_name]


def test_unsupported_sex_category_is_incomplete() -> None:
    with pytest.raises(IncompleteProfile):
        compute_budget(make_profile(biological_sex="other"), EVALUATED_ON)


def test_sex_and_activity_labels_ignore_case() -> None:
    profile = make_profile(biological_sex=" Male ", activity_level="Sedentary")

    targets = compute_budget(profile, EVALUATED_ON)

    assert targets == MacroTargets(calories=1979, protein_g=99, carbs_g=247, fat_g=66)
    assert normalize_sex("FEMALE") is BiologicalSex.FEMALE
    assert normalize_sex("other") is None


def test_round_half_up_matches_client_rounding() -> None:
    assert round_half_up(1978.5) == 1979
    assert round_half_up(2.5) == 3
    assert round_half_up(98.95) == 99
    assert round_half_up(0.49999999999999994) == 0
    assert round_half_up(-2.5) == -2
    assert round_half_up(-2.6) == -3


def test_budget_service_recalculate_persists_goal() -> None:
    store = InMemoryProfileStore()
    profile = store.add(make_profile(goal=Goal.GAIN_MUSCLE))
    service = BudgetService(store)

    goal = service.recalculate(profile.user_id, EVALUATED_ON)

    assert goal == 1979
    assert store.profiles[profile.user_id].daily_calorie_goal == 1979
    assert store.updates == [(profile.user_id, {"daily_calorie_goal": 1979})]


def test_budget_service_recalculate_skips_unchanged_goal() -> None:
    store = InMemoryProfileStore()
    profile = store.add(make_profile(daily_calorie_goal=1979))
    service = BudgetService(store)

    service.recalculate(profile.user_id, EVALUATED_ON)

    assert store.updates == []


def test_budget_service_targets_and_missing_profile() -> None:
    store = InMemoryProfileStore()
    profile = store.add(make_profile())
    service = BudgetService(store)

    assert service.get_targets(profile.user_id, EVALUATED_ON).calories == 1979
    with pytest.raises(ProfileNotFound):
        service.get_targets(make_profile().user_id, EVALUATED_ON)
