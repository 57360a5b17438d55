"""Album endpoints."""

from typing import Iterable, List, Optional

from ..actions import SpotifyRestAction, SpotifyRestActionPaging, catch_bad_request
from ..models import Album, PagingObject, SimpleTrack, parse_model
from .base import SpotifyEndpoint, build_params


class AlbumApi(SpotifyEndpoint[Album]):
    """Catalog information about albums."""

    base_path = "/albums"
    resource_type = "album"
    model = Album

    def get_album(
        self, album: str, market: Optional[str] = None
    ) -> SpotifyRestAction[Optional[Album]]:
        """
        Fetch one album; None if it does not exist.

        The embedded first page of tracks is bound to this endpoint, so
        ``album.tracks.get_all_items()`` walks the full track list.
        """
        path = self._path(album)

        def fetch() -> Album:
            result = parse_model(Album, self.http.get(path, build_params(market=market)))
            if result.tracks is not None:
                result.tracks.bind(self)
            return result

        return self.to_action(lambda: catch_bad_request(fetch))

    def get_albums(
        self, albums: Iterable[str], market: Optional[str] = None
    ) -> SpotifyRestAction[List[Optional[Album]]]:
        return self.get_several(albums, "albums", market=market)

    def get_album_tracks(
        self,
        album: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        market: Optional[str] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SimpleTrack]]:
        params = build_params(limit=limit, offset=offset, market=market)
        return self.get_page(self._path(album, "/tracks"), SimpleTrack, params)
