"""Meal logging service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime
from uuid import UUID

from taakip.domain.meals import LoggedMealEntry
from taakip.domain.nutrients import PortionUnit
from taakip.numeric import round_half_up, to_float
from taakip.services.foods import FoodLookupService
from taakip.services.library import LibraryService
from taakip.services.nutrients import parse_portion, parse_unit, scale
from taakip.services.progress import MealStore

_logger = logging.getLogger(__name__)

DEFAULT_FOOD_NAME = "Product"


@dataclass
class MealLogService:
    """Turns scanned or manual foods into stored meal entries."""

    food_lookup: FoodLookupService
    library_service: LibraryService
    repository: MealStore

    async def log_product(
        self,
        user_id: UUID,
        barcode: str,
        amount: object,
        unit: PortionUnit | str | None = None,
        eaten_at: datetime | None = None,
    ) -> LoggedMealEntry:
        """Look up a barcode, scale it to the portion and store the meal."""
        product = await self.food_lookup.lookup(barcode)
        scaled = scale(product.nutrients, amount, unit or product.unit)
        entry = LoggedMealEntry(
            food_name=product.name or DEFAULT_FOOD_NAME,
            calories=scaled.calories,
            protein_g=scaled.protein_g,
            carbs_g=scaled.carbohydrate_g,
            fat_g=scaled.fat_g,
            quantity=scaled.portion_amount,
            unit=scaled.unit,
            eaten_at=eaten_at or datetime.now(tz=UTC),
            user_id=user_id,
        )
        stored = self.repository.insert(user_id, entry)
        try:
            self.library_service.record_scan(user_id, product.code)
        except Exception:
            # The meal row is already stored; scan history is best-effort.
            _logger.warning(
                "Failed to record scan: user_id=%s code=%s",
                user_id,
                product.code,
                exc_info=True,
            )
        _logger.info(
            "Meal logged from barcode: user_id=%s code=%s calories=%s",
            user_id,
            product.code,
            stored.calories,
        )
        return stored

    def log_manual(  # noqa: PLR0913
        self,
        user_id: UUID,
        food_name: str,
        calories: object,
        protein_g: object,
        carbs_g: object,
        fat_g: object,
        amount: object,
        unit: PortionUnit | str = PortionUnit.GRAMS,
        eaten_at: datetime | None = None,
    ) -> LoggedMealEntry:
        """Store a manually entered meal with absolute values."""
        entry = LoggedMealEntry(
            food_name=food_name.strip() or DEFAULT_FOOD_NAME,
            calories=round_half_up(to_float(calories)),
            protein_g=to_float(protein_g),
            carbs_g=to_float(carbs_g),
            fat_g=to_float(fat_g),
            quantity=parse_portion(amount),
            unit=parse_unit(unit),
            eaten_at=eaten_at or datetime.now(tz=UTC),
            user_id=user_id,
        )
        return self.repository.insert(user_id, entry)

    def list_for_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> list[LoggedMealEntry]:
        """Return meals eaten on a local calendar day."""
        return self.repository.list_for_day(user_id, day, timezone_name)
