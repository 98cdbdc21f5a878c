"""Supabase implementation for favorites and scan history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from taakip.domain.library import FavoriteFood, ScanRecord
from taakip.services.library import LibraryRepository


@dataclass
class SupabaseLibraryRepository(LibraryRepository):
    """Supabase-backed repository for the favorites and scan_history tables."""

    client: Client

    def upsert_favorite(self, user_id: UUID, product_code: str) -> FavoriteFood:
        """Create the favorite if missing and return it."""
        response = (
            self.client.table("favorites")
            .upsert(
                {"user_id": str(user_id), "product_code": product_code},
                on_conflict="user_id,product_code",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save favorite")
        return _parse_favorite(response.data[0])

    def delete_favorite(self, user_id: UUID, product_code: str) -> None:
        """Remove a favorite, if present."""
        self.client.table("favorites").delete().eq("user_id", str(user_id)).eq(
            "product_code", product_code
        ).execute()

    def list_favorites(self, user_id: UUID) -> list[FavoriteFood]:
        """Return the user's favorites, newest first."""
        response = (
            self.client.table("favorites")
            .select("user_id, product_code, created_at")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_favorite(row) for row in response.data or []]

    def add_scan(self, user_id: UUID, product_code: str) -> None:
        """Record a scanned barcode."""
        self.client.table("scan_history").insert(
            {"user_id": str(user_id), "product_code": product_code}
        ).execute()

    def list_scans(self, user_id: UUID, limit: int) -> list[ScanRecord]:
        """Return recent scans, newest first."""
        response = (
            self.client.table("scan_history")
            .select("user_id, product_code, scanned_at")
            .eq("user_id", str(user_id))
            .order("scanned_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [
            ScanRecord(
                user_id=UUID(str(row["user_id"])),
                product_code=str(row.get("product_code", "")),
                scanned_at=_parse_timestamp(row.get("scanned_at")),
            )
            for row in response.data or []
        ]


def _parse_favorite(row: dict[str, object]) -> FavoriteFood:
    return FavoriteFood(
        user_id=UUID(str(row["user_id"])),
        product_code=str(row.get("product_code", "")),
        created_at=_parse_timestamp(row.get("created_at")),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
