"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from taakip.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from taakip.adapters.supabase_library_repository import SupabaseLibraryRepository
from taakip.adapters.supabase_meal_repository import SupabaseMealRepository
from taakip.adapters.supabase_profile_repository import SupabaseProfileRepository
from taakip.adapters.supabase_water_repository import SupabaseWaterRepository
from taakip.config import Settings
from taakip.services.budget import BudgetService
from taakip.services.cache import InMemoryCache
from taakip.services.foods import FoodLookupService
from taakip.services.library import LibraryService
from taakip.services.meals import MealLogService
from taakip.services.profiles import ProfileService
from taakip.services.progress import ProgressService
from taakip.services.water import WaterService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    budget_service: BudgetService
    profile_service: ProfileService
    food_lookup_service: FoodLookupService
    library_service: LibraryService
    meal_log_service: MealLogService
    water_service: WaterService
    progress_service: ProgressService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    profile_repository = SupabaseProfileRepository(supabase_client)
    meal_repository = SupabaseMealRepository(supabase_client)
    water_repository = SupabaseWaterRepository(supabase_client)
    library_repository = SupabaseLibraryRepository(supabase_client)

    food_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.off_base_url,
        user_agent=resolved_settings.off_user_agent,
    )
    food_lookup_service = FoodLookupService(
        client=food_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.food_cache_ttl_seconds,
    )
    budget_service = BudgetService(profile_repository)
    profile_service = ProfileService(
        profile_store=profile_repository,
        budget_service=budget_service,
    )
    library_service = LibraryService(library_repository)
    meal_log_service = MealLogService(
        food_lookup=food_lookup_service,
        library_service=library_service,
        repository=meal_repository,
    )
    water_service = WaterService(water_repository)
    progress_service = ProgressService(
        budget_service=budget_service,
        meal_store=meal_repository,
        water_store=water_repository,
    )

    async def close_resources() -> None:
        await food_client.close()

    return AppContainer(
        settings=resolved_settings,
        budget_service=budget_service,
        profile_service=profile_service,
        food_lookup_service=food_lookup_service,
        library_service=library_service,
        meal_log_service=meal_log_service,
        water_service=water_service,
        progress_service=progress_service,
        close_resources=close_resources,
    )
