"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from datetime import UTC, date, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

import httpx
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request, status

from taakip.api.auth import require_api_token
from taakip.api.schemas import MealCreate, ProfileUpdate, WaterCreate
from taakip.app_logging import configure_logging
from taakip.containers import AppContainer
from taakip.domain.errors import (
    FoodNotFound,
    IncompleteProfile,
    InvalidPortion,
    ProfileNotFound,
    ReadOnlyField,
    TaakipError,
)
from taakip.domain.library import FavoriteFood
from taakip.domain.meals import DailyProgress, LoggedMealEntry, Totals, WaterEntry
from taakip.domain.nutrients import FoodProduct, ScaledNutrients
from taakip.domain.profiles import MacroTargets, Profile

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[TaakipError], int] = {
    InvalidPortion: status.HTTP_422_UNPROCESSABLE_ENTITY,
    IncompleteProfile: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ReadOnlyField: status.HTTP_422_UNPROCESSABLE_ENTITY,
    FoodNotFound: status.HTTP_404_NOT_FOUND,
    ProfileNotFound: status.HTTP_404_NOT_FOUND,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    router = APIRouter(dependencies=[Depends(require_api_token)])

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @router.get("/foods/{barcode}")
    async def get_food(
        barcode: str,
        request: Request,
        amount: float = 100,
        unit: str | None = None,
    ) -> dict[str, object]:
        """Look up a barcode and scale its nutrients to a portion."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            product, scaled = await state_container.food_lookup_service.preview(
                barcode, amount, unit
            )
        return {"product": _serialize_product(product), "portion": scaled.display()}

    @router.get("/users/{user_id}/profile")
    async def get_profile(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the stored profile."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            profile = state_container.profile_service.get_profile(user_id)
        return _serialize_profile(profile)

    @router.patch("/users/{user_id}/profile")
    async def update_profile(
        user_id: UUID, update: ProfileUpdate, request: Request
    ) -> dict[str, object]:
        """Edit profile fields; the calorie goal is recomputed."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            profile = state_container.profile_service.update_profile(
                user_id, update.model_dump(exclude_unset=True)
            )
        return _serialize_profile(profile)

    @router.get("/users/{user_id}/budget")
    async def get_budget(
        user_id: UUID, request: Request, on: date | None = None
    ) -> dict[str, object]:
        """Return calorie and macro targets."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            targets = state_container.budget_service.get_targets(user_id, on)
        return _serialize_targets(targets)

    @router.post("/users/{user_id}/budget/recalculate")
    async def recalculate_budget(user_id: UUID, request: Request) -> dict[str, object]:
        """Recompute and persist the daily calorie goal."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            goal = state_container.budget_service.recalculate(user_id)
        return {"daily_calorie_goal": goal}

    @router.get("/users/{user_id}/progress")
    async def get_progress(
        user_id: UUID,
        request: Request,
        day: date | None = None,
        tz: str | None = None,
    ) -> dict[str, object]:
        """Return consumed versus target for a day."""
        state_container: AppContainer = request.app.state.container
        timezone = _resolve_timezone(state_container, tz)
        with _domain_errors():
            progress = state_container.progress_service.get_daily_progress(
                user_id, day or _today(timezone), timezone
            )
        return _serialize_progress(progress)

    @router.get("/users/{user_id}/meals")
    async def list_meals(
        user_id: UUID,
        request: Request,
        day: date | None = None,
        tz: str | None = None,
    ) -> dict[str, object]:
        """Return meals logged on a day."""
        state_container: AppContainer = request.app.state.container
        timezone = _resolve_timezone(state_container, tz)
        meals = state_container.meal_log_service.list_for_day(
            user_id, day or _today(timezone), timezone
        )
        return {"meals": [_serialize_meal(meal) for meal in meals]}

    @router.post("/users/{user_id}/meals", status_code=status.HTTP_201_CREATED)
    async def create_meal(
        user_id: UUID, payload: MealCreate, request: Request
    ) -> dict[str, object]:
        """Log a meal from a barcode or from manual values."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            if payload.barcode is not None:
                entry = await state_container.meal_log_service.log_product(
                    user_id,
                    payload.barcode,
                    payload.amount,
                    payload.unit,
                    eaten_at=payload.eaten_at,
                )
            else:
                manual = payload.manual
                entry = state_container.meal_log_service.log_manual(
                    user_id,
                    food_name=manual.food_name,
                    calories=manual.calories,
                    protein_g=manual.protein_g,
                    carbs_g=manual.carbs_g,
                    fat_g=manual.fat_g,
                    amount=payload.amount,
                    unit=payload.unit or "g",
                    eaten_at=payload.eaten_at,
                )
        return _serialize_meal(entry)

    @router.post("/users/{user_id}/water", status_code=status.HTTP_201_CREATED)
    async def create_water(
        user_id: UUID, payload: WaterCreate, request: Request
    ) -> dict[str, object]:
        """Log an amount of water."""
        state_container: AppContainer = request.app.state.container
        with _domain_errors():
            entry = state_container.water_service.add_water(
                user_id, payload.ml, payload.logged_at
            )
        return _serialize_water(entry)

    @router.get("/users/{user_id}/favorites")
    async def list_favorites(user_id: UUID, request: Request) -> dict[str, object]:
        """Return favorite products."""
        state_container: AppContainer = request.app.state.container
        favorites = state_container.library_service.list_favorites(user_id)
        return {"favorites": [_serialize_favorite(item) for item in favorites]}

    @router.post(
        "/users/{user_id}/favorites/{barcode}", status_code=status.HTTP_201_CREATED
    )
    async def add_favorite(
        user_id: UUID, barcode: str, request: Request
    ) -> dict[str, object]:
        """Mark a product as favorite."""
        state_container: AppContainer = request.app.state.container
        favorite = state_container.library_service.add_favorite(user_id, barcode)
        return _serialize_favorite(favorite)

    @router.delete(
        "/users/{user_id}/favorites/{barcode}",
        status_code=status.HTTP_204_NO_CONTENT,
    )
    async def remove_favorite(user_id: UUID, barcode: str, request: Request) -> None:
        """Unmark a favorite product."""
        state_container: AppContainer = request.app.state.container
        state_container.library_service.remove_favorite(user_id, barcode)

    @router.get("/users/{user_id}/scans")
    async def recent_scans(
        user_id: UUID, request: Request, limit: int = Query(default=20, ge=1, le=100)
    ) -> dict[str, object]:
        """Return recently scanned barcodes."""
        state_container: AppContainer = request.app.state.container
        return {"scans": state_container.library_service.recent_scans(user_id, limit)}

    app.include_router(router)
    return app


@contextmanager
def _domain_errors() -> Iterator[None]:
    """Translate domain and upstream failures into HTTP errors."""
    try:
        yield
    except TaakipError as exc:
        status_code = _ERROR_STATUS.get(
            type(exc), status.HTTP_422_UNPROCESSABLE_ENTITY
        )
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        logger.exception("Upstream food lookup failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Food database is unavailable.",
        ) from exc


def _resolve_timezone(state_container: AppContainer, tz: str | None) -> str:
    timezone = tz or state_container.settings.default_timezone
    try:
        ZoneInfo(timezone)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown timezone {timezone!r}",
        ) from exc
    return timezone


def _today(timezone_name: str) -> date:
    return datetime.now(tz=UTC).astimezone(ZoneInfo(timezone_name)).date()


def _serialize_product(product: FoodProduct) -> dict[str, object]:
    nutrients = product.nutrients
    return {
        "code": product.code,
        "name": product.name,
        "image_url": product.image_url,
        "unit": product.unit.value,
        "per_100": {
            "energy_kcal": nutrients.energy_kcal,
            "protein_g": nutrients.protein_g,
            "carbohydrate_g": nutrients.carbohydrate_g,
            "fat_g": nutrients.fat_g,
            "fiber_g": nutrients.fiber_g,
            "sugars_g": nutrients.sugars_g,
            "sodium_g": nutrients.sodium_g,
            "saturated_fat_g": nutrients.saturated_fat_g,
        },
    }


def _serialize_profile(profile: Profile) -> dict[str, object]:
    return {
        "user_id": str(profile.user_id),
        "weight_kg": profile.weight_kg,
        "height_cm": profile.height_cm,
        "date_of_birth": profile.date_of_birth.isoformat()
        if profile.date_of_birth
        else None,
        "biological_sex": _enum_value(profile.biological_sex),
        "activity_level": _enum_value(profile.activity_level),
        "goal": _enum_value(profile.goal),
        "daily_calorie_goal": profile.daily_calorie_goal,
    }


def _serialize_targets(targets: MacroTargets) -> dict[str, object]:
    return {
        "calories": targets.calories,
        "protein_g": targets.protein_g,
        "carbs_g": targets.carbs_g,
        "fat_g": targets.fat_g,
    }


def _serialize_totals(totals: Totals) -> dict[str, object]:
    return {
        "calories": round(totals.calories),
        "protein_g": round(totals.protein_g, 1),
        "carbs_g": round(totals.carbs_g, 1),
        "fat_g": round(totals.fat_g, 1),
    }


def _serialize_meal(entry: LoggedMealEntry) -> dict[str, object]:
    return {
        "id": str(entry.id) if entry.id else None,
        "food_name": entry.food_name,
        "calories": entry.calories,
        "protein_g": round(entry.protein_g, 1),
        "carbs_g": round(entry.carbs_g, 1),
        "fat_g": round(entry.fat_g, 1),
        "quantity": entry.quantity,
        "unit": entry.unit.value,
        "eaten_at": entry.eaten_at.isoformat(),
    }


def _serialize_water(entry: WaterEntry) -> dict[str, object]:
    return {
        "id": str(entry.id) if entry.id else None,
        "ml": entry.ml,
        "logged_at": entry.logged_at.isoformat(),
    }


def _serialize_progress(daily: DailyProgress) -> dict[str, object]:
    return {
        "day": daily.day.isoformat(),
        "consumed": _serialize_totals(daily.progress.consumed),
        "target": _serialize_targets(daily.progress.target),
        "remaining": _serialize_totals(daily.progress.remaining),
        "water_ml": daily.water_ml,
        "meals": [_serialize_meal(meal) for meal in daily.meals],
    }


def _serialize_favorite(favorite: FavoriteFood) -> dict[str, object]:
    return {
        "product_code": favorite.product_code,
        "created_at": favorite.created_at.isoformat()
        if favorite.created_at
        else None,
    }


def _enum_value(value: object) -> object:
    return getattr(value, "value", value)
