"""Artist endpoints."""

from typing import Iterable, List, Optional

from ..actions import SpotifyRestAction, SpotifyRestActionPaging
from ..models import Artist, PagingObject, SimpleAlbum, Track
from .base import SpotifyEndpoint, build_params

DEFAULT_MARKET = "US"


class ArtistApi(SpotifyEndpoint[Artist]):
    """Catalog information about artists."""

    base_path = "/artists"
    resource_type = "artist"
    model = Artist

    def get_artist(self, artist: str) -> SpotifyRestAction[Optional[Artist]]:
        """Fetch one artist by ID, URI or URL; None if it does not exist."""
        return self.get_one(artist)

    def get_artists(self, artists: Iterable[str]) -> SpotifyRestAction[List[Optional[Artist]]]:
        return self.get_several(artists, "artists")

    def get_artist_albums(
        self,
        artist: str,
        include_groups: Optional[Iterable[str]] = None,
        market: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SimpleAlbum]]:
        """
        Page through an artist's albums.

        Args:
            artist: Artist ID, URI or URL.
            include_groups: Any of ``album``, ``single``, ``appears_on``,
                ``compilation``.
            market: ISO 3166-1 alpha-2 country code.
            limit: Page size (1-50).
            offset: Index of the first album to return.
        """
        params = build_params(
            include_groups=",".join(include_groups) if include_groups else None,
            market=market,
            limit=limit,
            offset=offset,
        )
        return self.get_page(self._path(artist, "/albums"), SimpleAlbum, params)

    def get_artist_top_tracks(
        self, artist: str, market: str = DEFAULT_MARKET
    ) -> SpotifyRestAction[List[Track]]:
        return self.get_list(
            self._path(artist, "/top-tracks"), Track, "tracks", {"market": market}
        )

    def get_related_artists(self, artist: str) -> SpotifyRestAction[List[Artist]]:
        return self.get_list(self._path(artist, "/related-artists"), Artist, "artists")
