"""Tests for profile service."""

from datetime import date
from uuid import uuid4

import pytest

from taakip.domain.errors import ProfileNotFound, ReadOnlyField
from taakip.domain.profiles import ActivityLevel, Goal
from taakip.services.budget import BudgetService
from taakip.services.profiles import ProfileService
from tests.conftest import InMemoryProfileStore, make_profile

EVALUATION_DATE = date(2024, 7, 1)


def _service(store: InMemoryProfileStore) -> ProfileService:
    return ProfileService(profile_store=store, budget_service=BudgetService(store))


def test_update_weight_recomputes_goal(profile_store: InMemoryProfileStore) -> None:
    profile = profile_store.add(make_profile(height_cm=180.0, daily_calorie_goal=2016))
    service = _service(profile_store)

    updated = service.update_profile(
        profile.user_id, {"weight_kg": 80.0}, evaluation_date=EVALUATION_DATE
    )

    assert updated.weight_kg == 80.0
    assert updated.daily_calorie_goal == 2136


def test_update_activity_recomputes_goal(profile_store: InMemoryProfileStore) -> None:
    profile = profile_store.add(make_profile())
    service = _service(profile_store)

    updated = service.update_profile(
        profile.user_id,
        {"activity_level": ActivityLevel.MODERATE},
        evaluation_date=EVALUATION_DATE,
    )

    assert updated.daily_calorie_goal == 2556


def test_update_goal_keeps_stored_calorie_goal(
    profile_store: InMemoryProfileStore,
) -> None:
    profile = profile_store.add(make_profile(daily_calorie_goal=1979))
    service = _service(profile_store)

    updated = service.update_profile(profile.user_id, {"goal": Goal.GAIN_MUSCLE})

    assert updated.goal is Goal.GAIN_MUSCLE
    assert updated.daily_calorie_goal == 1979
    assert profile_store.updates == [(profile.user_id, {"goal": Goal.GAIN_MUSCLE})]


def test_update_rejects_calorie_goal(profile_store: InMemoryProfileStore) -> None:
    profile = profile_store.add(make_profile())
    service = _service(profile_store)

    with pytest.raises(ReadOnlyField):
        service.update_profile(profile.user_id, {"daily_calorie_goal": 1200})

    assert profile_store.updates == []


def test_update_incomplete_profile_skips_recalculation(
    profile_store: InMemoryProfileStore,
) -> None:
    profile = profile_store.add(make_profile(date_of_birth=None))
    service = _service(profile_store)

    updated = service.update_profile(profile.user_id, {"weight_kg": 72.5})

    assert updated.weight_kg == 72.5
    assert updated.daily_calorie_goal is None


def test_get_profile_not_found(profile_store: InMemoryProfileStore) -> None:
    with pytest.raises(ProfileNotFound):
        _service(profile_store).get_profile(uuid4())
