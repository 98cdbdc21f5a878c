"""Pydantic models for API request and response bodies."""

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from taakip.domain.nutrients import PortionUnit
from taakip.domain.profiles import ActivityLevel, BiologicalSex


class ProfileUpdate(BaseModel):
    """Editable profile fields; omitted fields are left unchanged."""

    weight_kg: float | None = Field(default=None, gt=0)
    height_cm: float | None = Field(default=None, gt=0)
    date_of_birth: date | None = None
    biological_sex: BiologicalSex | None = None
    activity_level: ActivityLevel | None = None
    goal: str | None = None
    daily_calorie_goal: int | None = None


class ManualFood(BaseModel):
    """Absolute values of a manually entered food."""

    food_name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein_g: float = Field(default=0.0, ge=0)
    carbs_g: float = Field(default=0.0, ge=0)
    fat_g: float = Field(default=0.0, ge=0)


class MealCreate(BaseModel):
    """Meal logging request: either a barcode or a manual food."""

    barcode: str | None = None
    manual: ManualFood | None = None
    amount: float
    unit: PortionUnit | None = None
    eaten_at: datetime | None = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "MealCreate":
        if (self.barcode is None) == (self.manual is None):
            raise ValueError("Provide either barcode or manual, not both")
        return self


class WaterCreate(BaseModel):
    """Water logging request."""

    ml: float
    logged_at: datetime | None = None
