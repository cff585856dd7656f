"""
Catalog entities.

Entities representing the user-maintained catalog (one Notion page per
title) and the field set written back after synchronization.
"""

from dataclasses import dataclass
from typing import Optional

from malsync.core.entities.media import AiringStatus, MediaKind


@dataclass
class CatalogRecord:
    """
    A catalog entry to be enriched with MyAnimeList metadata.

    Attributes:
        key: Catalog key (Notion page ID)
        mal_id: MyAnimeList ID, None when it must be resolved by search
        kind: Series (anime) or print (manga)
        name: Display name, used to build the search query
        sequel_titles: Sequel titles stored by a previous run
        skip: Already processed, excluded from synchronization
        cleaned: Manually corrected, excluded from synchronization
        skip_sequel_traverse: Only list immediate sequels, do not walk the chain
    """

    key: str
    mal_id: Optional[int] = None
    kind: MediaKind = MediaKind.SERIES
    name: str = ""
    sequel_titles: Optional[str] = None
    skip: bool = False
    cleaned: bool = False
    skip_sequel_traverse: bool = False


@dataclass(frozen=True)
class CatalogUpdate:
    """
    Field set written back to the catalog.

    Attributes:
        mal_id: Resolved MyAnimeList ID
        total: Episodes or volumes across the chain
        duration: Per-unit duration, in minutes
        airing_status: Status of the latest counted entry
        web_rating: Averaged score on a 0-5 scale
        genres: Genre names
        sequel_titles: Comma separated sequel titles
        skip: Always reset to False on update
    """

    mal_id: int
    total: int = 0
    duration: Optional[int] = None
    airing_status: Optional[AiringStatus] = None
    web_rating: Optional[float] = None
    genres: tuple[str, ...] = ()
    sequel_titles: str = ""
    skip: bool = False
