"""Follow endpoints for users, artists and playlists."""

from typing import Iterable, List, Optional

from ..actions import SpotifyRestAction, SpotifyRestActionPaging
from ..models import Artist, CursorBasedPagingObject
from ..uris import join_ids
from .base import SpotifyEndpoint, build_params


class FollowingApi(SpotifyEndpoint[Artist]):
    """Checks that work with any token."""

    base_path = "/me/following"

    def are_following_playlist(
        self, playlist: str, users: Iterable[str]
    ) -> SpotifyRestAction[List[bool]]:
        """Whether each of ``users`` follows ``playlist``."""
        path = f"/playlists/{self._id(playlist, 'playlist')}/followers/contains"
        return self.get_booleans(path, {"ids": join_ids(users, "user")})

    def is_following_playlist(self, playlist: str, user: str) -> SpotifyRestAction[bool]:
        return self.are_following_playlist(playlist, [user]).map(lambda r: r[0])


class ClientFollowingApi(FollowingApi):
    """Follow state of the current user."""

    def _contains(self, follow_type: str, ids: Iterable[str]) -> SpotifyRestAction[List[bool]]:
        params = {"type": follow_type, "ids": join_ids(ids, follow_type)}
        return self.get_booleans(f"{self.base_path}/contains", params)

    def _change(self, method: str, follow_type: str, ids: Iterable[str]) -> SpotifyRestAction[None]:
        params = {"type": follow_type, "ids": join_ids(ids, follow_type)}
        return self.send(method, self.base_path, params=params)

    def is_following_users(self, users: Iterable[str]) -> SpotifyRestAction[List[bool]]:
        return self._contains("user", users)

    def is_following_user(self, user: str) -> SpotifyRestAction[bool]:
        return self.is_following_users([user]).map(lambda r: r[0])

    def is_following_artists(self, artists: Iterable[str]) -> SpotifyRestAction[List[bool]]:
        return self._contains("artist", artists)

    def is_following_artist(self, artist: str) -> SpotifyRestAction[bool]:
        return self.is_following_artists([artist]).map(lambda r: r[0])

    def get_followed_artists(
        self, limit: Optional[int] = None, after: Optional[str] = None
    ) -> SpotifyRestActionPaging[CursorBasedPagingObject[Artist]]:
        """Cursor-based page of followed artists; can only be walked forwards."""
        params = build_params(type="artist", limit=limit, after=after)
        return self.get_page(
            self.base_path, Artist, params, container_key="artists", cursor_based=True
        )

    def follow_users(self, users: Iterable[str]) -> SpotifyRestAction[None]:
        return self._change("PUT", "user", users)

    def follow_artists(self, artists: Iterable[str]) -> SpotifyRestAction[None]:
        return self._change("PUT", "artist", artists)

    def unfollow_users(self, users: Iterable[str]) -> SpotifyRestAction[None]:
        return self._change("DELETE", "user", users)

    def unfollow_artists(self, artists: Iterable[str]) -> SpotifyRestAction[None]:
        return self._change("DELETE", "artist", artists)

    def follow_playlist(self, playlist: str, public: bool = True) -> SpotifyRestAction[None]:
        path = f"/playlists/{self._id(playlist, 'playlist')}/followers"
        return self.send("PUT", path, json={"public": public})

    def unfollow_playlist(self, playlist: str) -> SpotifyRestAction[None]:
        path = f"/playlists/{self._id(playlist, 'playlist')}/followers"
        return self.send("DELETE", path)
