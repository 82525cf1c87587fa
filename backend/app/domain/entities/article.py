"""Domain entities: pure Python business objects, no framework dependencies."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Article:
    """Inventory-style article record as stored.

    ``id`` and ``modified_at`` are always assigned by the store. ``is_active``
    may arrive in the store's raw representation (e.g. ``0``/``1``) until the
    service layer normalizes it.
    """

    id: int
    name: str
    brand: str
    modified_at: datetime
    is_active: bool
