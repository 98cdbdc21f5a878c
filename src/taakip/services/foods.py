"""Barcode food lookup against Open Food Facts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from taakip.adapters.openfoodfacts_client import FoodFactsClient
from taakip.domain.errors import FoodNotFound
from taakip.domain.nutrients import FoodProduct, PortionUnit, ScaledNutrients
from taakip.services.cache import Cache
from taakip.services.nutrients import normalize, scale

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class FoodLookupService:
    """Looks up products by barcode and normalizes their nutrient tables."""

    client: FoodFactsClient
    cache: Cache
    ttl_seconds: int = 86400
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def lookup(self, barcode: str) -> FoodProduct:
        """Return the product for a barcode or raise FoodNotFound."""
        code = barcode.strip()
        if not code:
            raise FoodNotFound(barcode)
        cache_key = f"off:product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, FoodProduct):
            return cached

        payload = await self._call_with_retry(
            lambda: self.client.get_product(code), action=f"get_product:{code}"
        )
        product = parse_product(code, payload)
        self.cache.set(cache_key, product, ttl_seconds=self.ttl_seconds)
        return product

    async def preview(
        self, barcode: str, amount: object, unit: PortionUnit | str | None = None
    ) -> tuple[FoodProduct, ScaledNutrients]:
        """Return a product and its nutrients scaled to a portion."""
        product = await self.lookup(barcode)
        return product, scale(product.nutrients, amount, unit or product.unit)

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[dict[str, object]]]", *, action: str
    ) -> dict[str, object]:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Food lookup %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def parse_product(barcode: str, payload: dict[str, object]) -> FoodProduct:
    """Build a product from a raw API payload, raising when there is no match."""
    product = payload.get("product")
    if payload.get("status") != 1 or not isinstance(product, dict):
        raise FoodNotFound(barcode)
    nutriments = product.get("nutriments")
    unit = (
        PortionUnit.MILLILITERS
        if product.get("serving_quantity_unit") == "ml"
        else PortionUnit.GRAMS
    )
    return FoodProduct(
        code=str(product.get("code") or barcode),
        name=product.get("product_name") or None,
        image_url=product.get("image_url") or product.get("image_front_small_url"),
        unit=unit,
        nutrients=normalize(nutriments if isinstance(nutriments, dict) else None),
    )
