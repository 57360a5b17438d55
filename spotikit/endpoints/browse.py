"""Browse endpoints: new releases, featured playlists, categories, recommendations."""

from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from ..actions import SpotifyRestAction, SpotifyRestActionPaging
from ..exceptions import SpotifyParseError
from ..models import (
    FeaturedPlaylists,
    PagingObject,
    RecommendationResponse,
    SimpleAlbum,
    SimplePlaylist,
    SpotifyCategory,
    parse_model,
)
from ..uris import join_ids
from .base import SpotifyEndpoint, build_params

# Spotify allows up to five seeds in total across artists, genres and tracks
MAX_SEEDS = 5


class BrowseApi(SpotifyEndpoint[SpotifyCategory]):
    base_path = "/browse"
    model = SpotifyCategory

    def get_available_genre_seeds(self) -> SpotifyRestAction[List[str]]:
        def fetch() -> List[str]:
            data = self.http.get("/recommendations/available-genre-seeds")
            if not isinstance(data, dict) or not isinstance(data.get("genres"), list):
                raise SpotifyParseError("Response has no 'genres' list")
            return list(data["genres"])

        return self.to_action(fetch)

    def get_new_releases(
        self,
        country: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SimpleAlbum]]:
        params = build_params(country=country, limit=limit, offset=offset)
        return self.get_page(
            f"{self.base_path}/new-releases", SimpleAlbum, params, container_key="albums"
        )

    def get_featured_playlists(
        self,
        country: Optional[str] = None,
        locale: Optional[str] = None,
        timestamp: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestAction[FeaturedPlaylists]:
        params = build_params(
            country=country, locale=locale, timestamp=timestamp, limit=limit, offset=offset
        )

        def fetch() -> FeaturedPlaylists:
            result = parse_model(
                FeaturedPlaylists,
                self.http.get(f"{self.base_path}/featured-playlists", params),
            )
            result.playlists.bind(self, "playlists")
            return result

        return self.to_action(fetch)

    def get_categories(
        self,
        country: Optional[str] = None,
        locale: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SpotifyCategory]]:
        params = build_params(country=country, locale=locale, limit=limit, offset=offset)
        return self.get_page(
            f"{self.base_path}/categories", SpotifyCategory, params, container_key="categories"
        )

    def get_category(
        self, category_id: str, country: Optional[str] = None, locale: Optional[str] = None
    ) -> SpotifyRestAction[Optional[SpotifyCategory]]:
        path = f"{self.base_path}/categories/{quote(category_id, safe='')}"
        return self.get_one(category_id, path=path, country=country, locale=locale)

    def get_category_playlists(
        self,
        category_id: str,
        country: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SimplePlaylist]]:
        path = f"{self.base_path}/categories/{quote(category_id, safe='')}/playlists"
        params = build_params(country=country, limit=limit, offset=offset)
        return self.get_page(path, SimplePlaylist, params, container_key="playlists")

    def get_recommendations(
        self,
        seed_artists: Iterable[str] = (),
        seed_genres: Iterable[str] = (),
        seed_tracks: Iterable[str] = (),
        limit: Optional[int] = None,
        market: Optional[str] = None,
        **tunable: Any,
    ) -> SpotifyRestAction[RecommendationResponse]:
        """
        Track recommendations from up to five seeds.

        Tunable attributes are passed as keyword arguments, e.g.
        ``min_energy=0.4`` or ``target_tempo=120``.

        Raises:
            ValueError: With no seeds or more than MAX_SEEDS seeds.
        """
        seed_artists, seed_genres, seed_tracks = (
            list(seed_artists), list(seed_genres), list(seed_tracks)
        )
        seed_count = len(seed_artists) + len(seed_genres) + len(seed_tracks)
        if seed_count == 0 or seed_count > MAX_SEEDS:
            raise ValueError(
                f"Recommendations need between 1 and {MAX_SEEDS} seeds, got {seed_count}"
            )
        params: Dict[str, Any] = build_params(
            seed_artists=join_ids(seed_artists, "artist") or None,
            seed_genres=",".join(seed_genres) or None,
            seed_tracks=join_ids(seed_tracks, "track") or None,
            limit=limit,
            market=market,
            **tunable,
        )
        return self.to_action(
            lambda: parse_model(
                RecommendationResponse, self.http.get("/recommendations", params)
            )
        )
