"""Browse and recommendation models."""

from typing import List, Optional

from pydantic import Field

from .base import SpotifyImage, SpotifyModel
from .paging import PagingObject
from .playlists import SimplePlaylist
from .tracks import Track


class SpotifyCategory(SpotifyModel):
    id: str
    name: str = ""
    href: Optional[str] = None
    icons: List[SpotifyImage] = Field(default_factory=list)


class FeaturedPlaylists(SpotifyModel):
    message: Optional[str] = None
    playlists: PagingObject[SimplePlaylist]


class RecommendationSeed(SpotifyModel):
    id: str
    type: str
    href: Optional[str] = None
    initial_pool_size: Optional[int] = Field(default=None, alias="initialPoolSize")
    after_filtering_size: Optional[int] = Field(
        default=None, alias="afterFilteringSize"
    )
    after_relinking_size: Optional[int] = Field(
        default=None, alias="afterRelinkingSize"
    )


class RecommendationResponse(SpotifyModel):
    seeds: List[RecommendationSeed] = Field(default_factory=list)
    tracks: List[Track] = Field(default_factory=list)
