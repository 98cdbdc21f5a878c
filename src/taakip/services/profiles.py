"""Profile reads and edits that keep the stored calorie goal in sync."""

import logging
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from taakip.domain.errors import IncompleteProfile, ReadOnlyField
from taakip.domain.profiles import Profile
from taakip.services.budget import BudgetService, ProfileStore

_logger = logging.getLogger(__name__)

BUDGET_INPUT_FIELDS = frozenset(
    {"weight_kg", "height_cm", "date_of_birth", "biological_sex", "activity_level"}
)
DERIVED_FIELDS = frozenset({"daily_calorie_goal"})


@dataclass
class ProfileService:
    """Application service for profile edits."""

    profile_store: ProfileStore
    budget_service: BudgetService

    def get_profile(self, user_id: UUID) -> Profile:
        """Return the stored profile or raise ProfileNotFound."""
        return self.budget_service.load_profile(user_id)

    def update_profile(
        self,
        user_id: UUID,
        fields: dict[str, object],
        evaluation_date: date | None = None,
    ) -> Profile:
        """Apply profile edits and recompute the calorie goal when needed."""
        derived = sorted(DERIVED_FIELDS & fields.keys())
        if derived:
            raise ReadOnlyField(f"Fields are computed and cannot be edited: {derived}")
        self.budget_service.load_profile(user_id)
        if fields:
            self.profile_store.update(user_id, fields)
        if BUDGET_INPUT_FIELDS & fields.keys():
            try:
                self.budget_service.recalculate(user_id, evaluation_date)
            except IncompleteProfile as exc:
                _logger.warning(
                    "Skipping calorie goal recalculation: user_id=%s missing=%s",
                    user_id,
                    exc.missing,
                )
        return self.budget_service.load_profile(user_id)
