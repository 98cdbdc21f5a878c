"""Nutrient table normalization and portion scaling."""

import math
from collections.abc import Mapping
from decimal import Decimal

from taakip.domain.errors import InvalidPortion
from taakip.domain.nutrients import NutrientsPer100, PortionUnit, ScaledNutrients
from taakip.numeric import round_half_up, to_float

# Open Food Facts ``nutriments`` keys, per 100 g / 100 ml.
_OFF_KEYS = {
    "energy_kcal": "energy-kcal_100g",
    "protein_g": "proteins_100g",
    "carbohydrate_g": "carbohydrates_100g",
    "fat_g": "fat_100g",
    "fiber_g": "fiber_100g",
    "sugars_g": "sugars_100g",
    "sodium_g": "sodium_100g",
    "saturated_fat_g": "saturated-fat_100g",
}


def normalize(raw: Mapping[str, object] | None) -> NutrientsPer100:
    """Return a fully-populated table; absent or non-numeric fields become 0."""
    if not raw:
        return NutrientsPer100()
    values: dict[str, float] = {}
    for field_name, off_key in _OFF_KEYS.items():
        value = raw.get(off_key)
        if value is None:
            value = raw.get(field_name)
        values[field_name] = to_float(value)
    return NutrientsPer100(**values)


def parse_portion(amount: object) -> float:
    """Validate a portion amount and return it as a float."""
    if isinstance(amount, bool):
        raise InvalidPortion(f"Portion must be a number, got {amount!r}")
    if isinstance(amount, int | float | Decimal):
        value = float(amount)
    elif isinstance(amount, str):
        try:
            value = float(amount.strip())
        except ValueError as exc:
            raise InvalidPortion(f"Portion must be a number, got {amount!r}") from exc
    else:
        raise InvalidPortion(f"Portion must be a number, got {amount!r}")
    if not math.isfinite(value) or value <= 0:
        raise InvalidPortion(f"Portion must be greater than zero, got {amount!r}")
    return value


def parse_unit(unit: object) -> PortionUnit:
    """Return the portion unit or raise for anything but g/ml."""
    try:
        return PortionUnit(str(unit).strip().lower())
    except ValueError as exc:
        raise InvalidPortion(f"Unsupported unit {unit!r}; use g or ml") from exc


def scale(
    per100: NutrientsPer100, amount: object, unit: PortionUnit | str
) -> ScaledNutrients:
    """Scale a per-100 table to a portion.

    No density conversion is applied between g and ml; the per-100 basis is
    assumed to match the unit.
    """
    portion = parse_portion(amount)
    resolved_unit = parse_unit(unit)
    factor = portion / 100
    return ScaledNutrients(
        portion_amount=portion,
        unit=resolved_unit,
        calories=round_half_up(per100.energy_kcal * factor),
        protein_g=per100.protein_g * factor,
        carbohydrate_g=per100.carbohydrate_g * factor,
        fat_g=per100.fat_g * factor,
        fiber_g=per100.fiber_g * factor,
        sugars_g=per100.sugars_g * factor,
        sodium_g=per100.sodium_g * factor,
        saturated_fat_g=per100.saturated_fat_g * factor,
    )
