"""Domain entities for provider routing and stream resolution.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

MediaType = Literal["movie", "tv"]
ProviderMode = Literal["path-tmdb", "path-mal", "passthrough"]

MEDIA_TYPES: tuple[MediaType, ...] = ("movie", "tv")

# A resolved URL is only good for one playback request; upstream pages rotate
# their nested iframe targets.
ResolvedUrl = str


@dataclass(frozen=True)
class Provider:
    """A third-party site serving an embeddable player."""

    name: str
    slug: str  # Routing key, unique across the registry
    base_url: str  # e.g. "https://vidsrc.to/embed"
    emoji: str = ""
    supported_types: frozenset[MediaType] = field(default_factory=frozenset)
    mode: ProviderMode | None = None

    def supports(self, media_type: MediaType) -> bool:
        """Empty ``supported_types`` means the provider serves everything."""
        return not self.supported_types or media_type in self.supported_types

    @property
    def uses_tmdb_ids(self) -> bool:
        return self.mode is None or self.mode == "path-tmdb"


@dataclass(frozen=True)
class StreamTarget:
    """What a single proxy request must resolve.

    Exactly one of ``tmdb_id`` / ``mal_id`` / ``direct_url`` selects the
    resolution path.
    """

    provider_slug: str
    media_type: MediaType | None = None
    tmdb_id: int | None = None
    mal_id: int | None = None
    season: int | None = None
    episode: int | None = None
    direct_url: str | None = None


@dataclass(frozen=True)
class WatchLink:
    """One "watch now" button: provider label plus the URL to open."""

    name: str
    url: str
    emoji: str = ""


@dataclass(frozen=True)
class ExternalIds:
    """Ids returned by the anime id-mapping service (either may be missing)."""

    anilist_id: int | None = None
    mal_id: int | None = None


@dataclass(frozen=True)
class TitleInfo:
    """Title and release year of a TMDB entry."""

    title: str
    year: int | None = None
