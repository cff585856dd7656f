"""
Media metadata entities.

Entities representing anime and manga entries as returned by
MyAnimeList (through the Jikan API), and the summary folded from
a chain of sequels.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaKind(str, Enum):
    """
    Kind of media tracked in the catalog.

    The value is the label used in the catalog "Type" column and in
    search queries; ``path`` is the matching Jikan/MyAnimeList URL segment.
    """

    SERIES = "Anime"
    PRINT = "Manga"

    @property
    def path(self) -> str:
        """URL segment used by MyAnimeList and Jikan ("anime" or "manga")."""
        return "manga" if self is MediaKind.PRINT else "anime"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "MediaKind":
        """
        Map a catalog label to a kind.

        Anything that is not "Manga" is treated as a series.
        """
        if label and label.strip().lower() == "manga":
            return cls.PRINT
        return cls.SERIES


class AiringStatus(str, Enum):
    """Lifecycle status as reported by MyAnimeList."""

    AIRING = "Currently Airing"
    FINISHED_AIRING = "Finished Airing"
    NOT_YET_AIRED = "Not yet aired"
    PUBLISHING = "Publishing"
    FINISHED = "Finished"
    ON_HIATUS = "On Hiatus"
    DISCONTINUED = "Discontinued"
    NOT_YET_PUBLISHED = "Not yet published"

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["AiringStatus"]:
        """Return the matching status, or None when absent or unknown."""
        if not raw:
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


@dataclass(frozen=True)
class SequelRef:
    """
    Reference to a sequel entry, as listed on its predecessor.

    Attributes:
        mal_id: MyAnimeList ID of the sequel
        title: Title of the sequel
    """

    mal_id: int
    title: str = ""


@dataclass(frozen=True)
class MediaRecord:
    """
    Read-only snapshot of a MyAnimeList entry.

    Attributes:
        mal_id: MyAnimeList ID
        title: Main title
        kind: Series (anime) or print (manga)
        media_format: Raw MAL type ("TV", "Movie", "OVA", "Manga", ...)
        genres: Genre names
        demographics: Demographic names (Shounen, Seinen, ...)
        units: Episode count (series) or volume count (print)
        duration: Human readable duration ("24 min per ep", "2 hr 5 min")
        status: Lifecycle status
        score: Average score on a 0-10 scale
        sequels: Ordered sequel references, possibly empty
    """

    mal_id: int
    title: str
    kind: MediaKind = MediaKind.SERIES
    media_format: Optional[str] = None
    genres: tuple[str, ...] = ()
    demographics: tuple[str, ...] = ()
    units: Optional[int] = None
    duration: Optional[str] = None
    status: Optional[AiringStatus] = None
    score: Optional[float] = None
    sequels: tuple[SequelRef, ...] = ()


@dataclass
class ChainSummary:
    """
    Cumulative statistics folded from a root entry and its sequel chain.

    Attributes:
        mal_id: MyAnimeList ID of the root entry
        total_units: Episodes or volumes across the chain
        duration: Per-unit duration of the root, in minutes
        total_duration: Sum of units x duration across the chain, in minutes
        status: Status of the last counted entry
        score: Score averaged over the counted entries (0-10)
        sequel_titles: Comma separated sequel titles, in chain order
        sequel_count: Number of counted sequels
        genres: Genres of the root entry
    """

    mal_id: int
    total_units: int = 0
    duration: Optional[int] = None
    total_duration: int = 0
    status: Optional[AiringStatus] = None
    score: Optional[float] = None
    sequel_titles: str = ""
    sequel_count: int = 0
    genres: tuple[str, ...] = ()
