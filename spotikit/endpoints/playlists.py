"""
Playlist endpoints.

Read calls work with any token; mutations need a user token with the
``playlist-modify-*`` scopes.
"""

import base64
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..actions import SpotifyRestAction, SpotifyRestActionPaging, catch_bad_request
from ..models import (
    PagingObject,
    Playlist,
    PlaylistTrack,
    SimplePlaylist,
    SnapshotResponse,
    SpotifyImage,
    parse_model,
    parse_model_list,
)
from ..uris import to_uris
from .base import SpotifyEndpoint, build_params, chunked

logger = logging.getLogger(__name__)


class PlaylistApi(SpotifyEndpoint[Playlist]):
    """Public playlist information."""

    base_path = "/playlists"
    resource_type = "playlist"
    model = Playlist

    # Spotify accepts at most 100 tracks per add/replace request
    BATCH_SIZE = 100

    def get_playlist(
        self, playlist: str, market: Optional[str] = None
    ) -> SpotifyRestAction[Optional[Playlist]]:
        """
        Fetch a playlist; None if it does not exist.

        The embedded first page of tracks is bound to this endpoint.
        """
        path = self._path(playlist)

        def fetch() -> Playlist:
            result = parse_model(Playlist, self.http.get(path, build_params(market=market)))
            if result.tracks is not None:
                result.tracks.bind(self)
            return result

        return self.to_action(lambda: catch_bad_request(fetch))

    def get_user_playlists(
        self,
        user: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> SpotifyRestActionPaging[PagingObject[SimplePlaylist]]:
        path = f"/users/{self._id(user, 'user')}/playlists"
        return self.get_page(path, SimplePlaylist, build_params(limit=limit, offset=offset))

    def get_playlist_tracks(
        self,
        playlist: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        market: Optional[str] = None,
    ) -> SpotifyRestActionPaging[PagingObject[PlaylistTrack]]:
        params = build_params(limit=limit, offset=offset, market=market)
        return self.get_page(self._path(playlist, "/tracks"), PlaylistTrack, params)

    def get_playlist_covers(self, playlist: str) -> SpotifyRestAction[List[SpotifyImage]]:
        path = self._path(playlist, "/images")
        return self.to_action(
            lambda: parse_model_list(SpotifyImage, self.http.get(path) or [])
        )


class ClientPlaylistApi(PlaylistApi):
    """Playlist calls acting on behalf of the current user."""

    def get_client_playlists(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> SpotifyRestActionPaging[PagingObject[SimplePlaylist]]:
        return self.get_page(
            "/me/playlists", SimplePlaylist, build_params(limit=limit, offset=offset)
        )

    def create_playlist(
        self,
        user: str,
        name: str,
        description: Optional[str] = None,
        public: Optional[bool] = None,
        collaborative: Optional[bool] = None,
    ) -> SpotifyRestAction[Playlist]:
        """
        Create a playlist owned by ``user``.

        Raises:
            ValueError: If ``name`` is empty.
        """
        if not name:
            raise ValueError("Playlist name must not be empty")
        body = _drop_none(
            name=name, description=description, public=public, collaborative=collaborative
        )
        path = f"/users/{self._id(user, 'user')}/playlists"
        return self.to_action(lambda: parse_model(Playlist, self.http.post(path, json=body)))

    def change_playlist_details(
        self,
        playlist: str,
        name: Optional[str] = None,
        public: Optional[bool] = None,
        collaborative: Optional[bool] = None,
        description: Optional[str] = None,
    ) -> SpotifyRestAction[None]:
        body = _drop_none(
            name=name, public=public, collaborative=collaborative, description=description
        )
        if not body:
            raise ValueError("At least one playlist detail must be changed")
        return self.send("PUT", self._path(playlist), json=body)

    def add_tracks(
        self, playlist: str, tracks: Iterable[str], position: Optional[int] = None
    ) -> SpotifyRestAction[Optional[SnapshotResponse]]:
        """
        Add tracks (IDs, URIs or URLs), in batches of BATCH_SIZE.

        Returns:
            Snapshot of the playlist after the last batch, or None if
            ``tracks`` is empty.
        """
        uris = to_uris("track", tracks)
        path = self._path(playlist, "/tracks")

        def run() -> Optional[SnapshotResponse]:
            snapshot = None
            insert_at = position
            for batch in chunked(uris, self.BATCH_SIZE):
                body = _drop_none(uris=batch, position=insert_at)
                snapshot = parse_model(SnapshotResponse, self.http.post(path, json=body))
                if insert_at is not None:
                    insert_at += len(batch)
            logger.info(f"Added {len(uris)} tracks to playlist {playlist}")
            return snapshot

        return self.to_action(run)

    def replace_tracks(
        self, playlist: str, tracks: Iterable[str]
    ) -> SpotifyRestAction[Optional[SnapshotResponse]]:
        """
        Replace all tracks in a playlist with a new list.

        The first BATCH_SIZE tracks replace the playlist contents and the
        rest are appended in batches. An empty list clears the playlist.
        """
        uris = to_uris("track", tracks)
        path = self._path(playlist, "/tracks")

        def run() -> Optional[SnapshotResponse]:
            data = self.http.put(path, json={"uris": uris[: self.BATCH_SIZE]})
            snapshot = parse_model(SnapshotResponse, data) if data else None
            for batch in chunked(uris[self.BATCH_SIZE :], self.BATCH_SIZE):
                snapshot = parse_model(
                    SnapshotResponse, self.http.post(path, json={"uris": batch})
                )
            logger.info(f"Replaced playlist {playlist} with {len(uris)} tracks")
            return snapshot

        return self.to_action(run)

    def reorder_tracks(
        self,
        playlist: str,
        range_start: int,
        insert_before: int,
        range_length: int = 1,
        snapshot_id: Optional[str] = None,
    ) -> SpotifyRestAction[SnapshotResponse]:
        body = _drop_none(
            range_start=range_start,
            insert_before=insert_before,
            range_length=range_length,
            snapshot_id=snapshot_id,
        )
        path = self._path(playlist, "/tracks")
        return self.to_action(
            lambda: parse_model(SnapshotResponse, self.http.put(path, json=body))
        )

    def remove_tracks(
        self,
        playlist: str,
        tracks: Iterable[str],
        snapshot_id: Optional[str] = None,
    ) -> SpotifyRestAction[SnapshotResponse]:
        """Remove every occurrence of the given tracks."""
        uris = to_uris("track", tracks)
        if not uris:
            raise ValueError("No tracks to remove")
        body = _drop_none(tracks=[{"uri": uri} for uri in uris], snapshot_id=snapshot_id)
        path = self._path(playlist, "/tracks")
        return self.to_action(
            lambda: parse_model(SnapshotResponse, self.http.delete(path, json=body))
        )

    def upload_cover(self, playlist: str, jpeg: bytes) -> SpotifyRestAction[None]:
        """Upload a JPEG cover image (sent base64-encoded)."""
        payload = base64.b64encode(jpeg)
        path = self._path(playlist, "/images")
        return self.to_action(
            lambda: self.http.put(path, data=payload, content_type="image/jpeg")
        )

    def delete_playlist(self, playlist: str) -> SpotifyRestAction[None]:
        """Unfollow the playlist, which is how Spotify deletes one you own."""
        return self.send("DELETE", self._path(playlist, "/followers"))


def _drop_none(**fields: Any) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}
