"""The current user's saved tracks and albums."""

from enum import Enum
from typing import Iterable, List, Optional

from ..actions import SpotifyRestAction, SpotifyRestActionPaging
from ..models import PagingObject, SavedAlbum, SavedTrack
from ..uris import join_ids
from .base import SpotifyEndpoint, build_params, chunked


class LibraryType(str, Enum):
    TRACK = "tracks"
    ALBUM = "albums"

    @property
    def resource_type(self) -> str:
        return self.value[:-1]


class ClientLibraryApi(SpotifyEndpoint[SavedTrack]):
    base_path = "/me"

    # Spotify accepts at most 50 IDs per library request
    MAX_IDS = 50

    def get_saved_tracks(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        market: Optional[str] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SavedTrack]]:
        params = build_params(limit=limit, offset=offset, market=market)
        return self.get_page("/me/tracks", SavedTrack, params)

    def get_saved_albums(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        market: Optional[str] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SavedAlbum]]:
        params = build_params(limit=limit, offset=offset, market=market)
        return self.get_page("/me/albums", SavedAlbum, params)

    def contains(
        self, library_type: LibraryType, ids: Iterable[str]
    ) -> SpotifyRestAction[List[bool]]:
        """Whether each item is saved, in the order given."""
        library_type = LibraryType(library_type)
        references = list(ids)
        path = f"/me/{library_type.value}/contains"

        def fetch() -> List[bool]:
            result = []
            for batch in chunked(references, self.MAX_IDS):
                params = {"ids": join_ids(batch, library_type.resource_type)}
                result.extend(self.get_booleans(path, params).complete())
            return result

        return self.to_action(fetch)

    def _modify(self, method: str, library_type: LibraryType, ids: Iterable[str]) -> SpotifyRestAction[None]:
        library_type = LibraryType(library_type)
        references = list(ids)
        path = f"/me/{library_type.value}"
        request = self.http.put if method == "PUT" else self.http.delete

        def run() -> None:
            for batch in chunked(references, self.MAX_IDS):
                request(path, params={"ids": join_ids(batch, library_type.resource_type)})

        return self.to_action(run)

    def add(self, library_type: LibraryType, ids: Iterable[str]) -> SpotifyRestAction[None]:
        return self._modify("PUT", library_type, ids)

    def remove(self, library_type: LibraryType, ids: Iterable[str]) -> SpotifyRestAction[None]:
        return self._modify("DELETE", library_type, ids)
