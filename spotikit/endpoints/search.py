"""Search endpoints."""

import logging
from typing import Iterable, Optional, Union

from ..actions import SpotifyRestAction, SpotifyRestActionPaging
from ..models import (
    Artist,
    PagingObject,
    SearchResult,
    SearchType,
    SimpleAlbum,
    SimplePlaylist,
    Track,
    parse_model,
)
from .base import SpotifyEndpoint, build_params

logger = logging.getLogger(__name__)

_ITEM_MODELS = {
    SearchType.ALBUM: SimpleAlbum,
    SearchType.ARTIST: Artist,
    SearchType.PLAYLIST: SimplePlaylist,
    SearchType.TRACK: Track,
}


class SearchApi(SpotifyEndpoint[SearchResult]):
    """
    Catalog search.

    Example:
        result = api.search.search("daft punk", [SearchType.ARTIST]).complete()
        artists = result.artists.get_all_items().complete()
    """

    base_path = "/search"
    model = SearchResult

    def search(
        self,
        query: str,
        types: Iterable[Union[SearchType, str]] = tuple(SearchType),
        market: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        include_external: Optional[str] = None,
    ) -> SpotifyRestAction[SearchResult]:
        """
        Search across one or more resource types.

        Every page in the result is bound to this endpoint, so its
        ``next`` link can be followed.

        Raises:
            ValueError: If ``query`` is empty or no type is requested.
        """
        search_types = [SearchType(t) for t in types]
        if not query:
            raise ValueError("Search query must not be empty")
        if not search_types:
            raise ValueError("At least one search type is required")
        params = build_params(
            q=query,
            type=",".join(t.value for t in search_types),
            market=market,
            limit=limit,
            offset=offset,
            include_external=include_external,
        )

        def fetch() -> SearchResult:
            result = parse_model(SearchResult, self.http.get(self.base_path, params))
            for search_type in search_types:
                page = getattr(result, search_type.container_key)
                if page is not None:
                    page.bind(self, search_type.container_key)
            logger.debug(f"Searched {query!r} for {params['type']}")
            return result

        return self.to_action(fetch)

    def _search_one(
        self,
        search_type: SearchType,
        query: str,
        market: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging:
        if not query:
            raise ValueError("Search query must not be empty")
        params = build_params(
            q=query, type=search_type.value, market=market, limit=limit, offset=offset
        )
        return self.get_page(
            self.base_path,
            _ITEM_MODELS[search_type],
            params,
            container_key=search_type.container_key,
        )

    def search_artist(
        self, query: str, **kwargs
    ) -> SpotifyRestActionPaging[PagingObject[Artist]]:
        """Search artists only. Accepts ``market``, ``limit`` and ``offset``."""
        return self._search_one(SearchType.ARTIST, query, **kwargs)

    def search_album(
        self, query: str, **kwargs
    ) -> SpotifyRestActionPaging[PagingObject[SimpleAlbum]]:
        return self._search_one(SearchType.ALBUM, query, **kwargs)

    def search_track(
        self, query: str, **kwargs
    ) -> SpotifyRestActionPaging[PagingObject[Track]]:
        return self._search_one(SearchType.TRACK, query, **kwargs)

    def search_playlist(
        self, query: str, **kwargs
    ) -> SpotifyRestActionPaging[PagingObject[SimplePlaylist]]:
        return self._search_one(SearchType.PLAYLIST, query, **kwargs)
