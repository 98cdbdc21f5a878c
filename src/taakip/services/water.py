"""Water intake logging."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from taakip.domain.errors import InvalidPortion
from taakip.domain.meals import WaterEntry
from taakip.services.nutrients import parse_portion
from taakip.services.progress import WaterStore, sum_water


@dataclass
class WaterService:
    """Service for water entries."""

    repository: WaterStore

    def add_water(
        self, user_id: UUID, ml: object, logged_at: datetime | None = None
    ) -> WaterEntry:
        """Store a positive amount of water in millilitres."""
        try:
            amount = parse_portion(ml)
        except InvalidPortion as exc:
            raise InvalidPortion(
                f"Water amount must be a positive number: {ml!r}"
            ) from exc
        return self.repository.insert(
            user_id, amount, logged_at or datetime.now(tz=UTC)
        )

    def total_for_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> float:
        """Return millilitres logged on a local calendar day."""
        return sum_water(self.repository.list_for_day(user_id, day, timezone_name))
