"""Nutrient tables and food lookup results."""

from dataclasses import dataclass
from enum import StrEnum


class PortionUnit(StrEnum):
    """Units a portion can be logged in."""

    GRAMS = "g"
    MILLILITERS = "ml"


@dataclass(frozen=True)
class NutrientsPer100:
    """Fully-populated nutrient table per 100 g or 100 ml of product."""

    energy_kcal: float = 0.0
    protein_g: float = 0.0
    carbohydrate_g: float = 0.0
    fat_g: float = 0.0
    fiber_g: float = 0.0
    sugars_g: float = 0.0
    sodium_g: float = 0.0
    saturated_fat_g: float = 0.0


@dataclass(frozen=True)
class ScaledNutrients:
    """Absolute nutrient values for a single portion."""

    portion_amount: float
    unit: PortionUnit
    calories: int
    protein_g: float
    carbohydrate_g: float
    fat_g: float
    fiber_g: float
    sugars_g: float
    sodium_g: float
    saturated_fat_g: float

    def display(self) -> dict[str, object]:
        """Return values rounded for presentation (grams to one decimal)."""
        return {
            "portion_amount": self.portion_amount,
            "unit": self.unit.value,
            "calories": self.calories,
            "protein_g": round(self.protein_g, 1),
            "carbohydrate_g": round(self.carbohydrate_g, 1),
            "fat_g": round(self.fat_g, 1),
            "fiber_g": round(self.fiber_g, 1),
            "sugars_g": round(self.sugars_g, 1),
            "sodium_g": round(self.sodium_g, 1),
            "saturated_fat_g": round(self.saturated_fat_g, 1),
        }


@dataclass(frozen=True)
class FoodProduct:
    """Product returned by a barcode lookup, with a normalized table."""

    code: str
    name: str | None
    image_url: str | None
    unit: PortionUnit
    nutrients: NutrientsPer100
