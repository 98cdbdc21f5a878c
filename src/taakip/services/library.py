"""Favorites and scan history for scanned products."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from taakip.domain.library import FavoriteFood, ScanRecord

SCAN_FETCH_FACTOR = 5


class LibraryRepository(Protocol):
    """Persistence interface for favorites and scan history."""

    def upsert_favorite(self, user_id: UUID, product_code: str) -> FavoriteFood:
        """Create the favorite if missing and return it."""

    def delete_favorite(self, user_id: UUID, product_code: str) -> None:
        """Remove a favorite, if present."""

    def list_favorites(self, user_id: UUID) -> list[FavoriteFood]:
        """Return the user's favorites, newest first."""

    def add_scan(self, user_id: UUID, product_code: str) -> None:
        """Record a scanned barcode."""

    def list_scans(self, user_id: UUID, limit: int) -> list[ScanRecord]:
        """Return recent scans, newest first."""


@dataclass
class LibraryService:
    """Application service for a user's saved and scanned products."""

    repository: LibraryRepository

    def add_favorite(self, user_id: UUID, product_code: str) -> FavoriteFood:
        """Mark a product as favorite; repeated calls keep a single row."""
        return self.repository.upsert_favorite(user_id, product_code.strip())

    def remove_favorite(self, user_id: UUID, product_code: str) -> None:
        """Unmark a favorite product."""
        self.repository.delete_favorite(user_id, product_code.strip())

    def list_favorites(self, user_id: UUID) -> list[FavoriteFood]:
        """Return favorite products."""
        return self.repository.list_favorites(user_id)

    def record_scan(self, user_id: UUID, product_code: str) -> None:
        """Record a lookup in the scan history."""
        self.repository.add_scan(user_id, product_code.strip())

    def recent_scans(self, user_id: UUID, limit: int = 20) -> list[str]:
        """Return up to ``limit`` distinct recently scanned barcodes, newest first.

        Rows are over-fetched so repeated scans of one product do not crowd out
        the others; the result can still be short when the window is all repeats.
        """
        if limit <= 0:
            return []
        seen: set[str] = set()
        codes: list[str] = []
        for scan in self.repository.list_scans(user_id, limit * SCAN_FETCH_FACTOR):
            if scan.product_code in seen:
                continue
            seen.add(scan.product_code)
            codes.append(scan.product_code)
            if len(codes) == limit:
                break
        return codes
