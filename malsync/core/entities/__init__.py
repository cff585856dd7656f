"""
Business entities representing core domain concepts.

Exports:
- MediaKind: Anime or manga
- AiringStatus: Lifecycle status reported by MyAnimeList
- SequelRef: Reference to a sequel entry
- MediaRecord: Snapshot of a MyAnimeList entry
- ChainSummary: Statistics folded from a sequel chain
- CatalogRecord: Catalog entry to synchronize
- CatalogUpdate: Field set written back to the catalog
"""

from malsync.core.entities.media import (
    AiringStatus,
    ChainSummary,
    MediaKind,
    MediaRecord,
    SequelRef,
)
from malsync.core.entities.catalog import CatalogRecord, CatalogUpdate

__all__ = [
    "AiringStatus",
    "ChainSummary",
    "MediaKind",
    "MediaRecord",
    "SequelRef",
    "CatalogRecord",
    "CatalogUpdate",
]
