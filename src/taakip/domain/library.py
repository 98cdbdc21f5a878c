"""Domain models for favorites and scan history."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FavoriteFood:
    """A product the user marked as favorite."""

    user_id: UUID
    product_code: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ScanRecord:
    """A barcode the user scanned or typed in."""

    user_id: UUID
    product_code: str
    scanned_at: datetime | None = None
