"""
Spotify credentials management.

Provides a clean dataclass for Spotify application credentials.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class SpotifyCredentials:
    """
    Immutable container for Spotify application credentials.

    Client id and secret may be omitted only when the API is built from
    an existing token; without them the token can never be refreshed.

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        redirect_uri: The OAuth callback URL (authorization code flow only).
        token_string: An access token obtained elsewhere.

    Example:
        credentials = SpotifyCredentials(
            client_id='your_client_id',
            client_secret='your_client_secret',
            redirect_uri='http://localhost:8888/callback'
        )
    """

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: Optional[str] = None
    token_string: Optional[str] = None

    def __post_init__(self):
        """Validate credentials on creation."""
        if self.client_id is not None and not self.client_id:
            raise ValueError("client_id must not be empty")
        if self.client_secret is not None and not self.client_secret:
            raise ValueError("client_secret must not be empty")
        if self.redirect_uri is not None and not self.redirect_uri:
            raise ValueError("redirect_uri must not be empty")

    @property
    def has_client_secret(self) -> bool:
        """Whether both halves of the application credentials are present."""
        return bool(self.client_id and self.client_secret)

    @classmethod
    def from_env(cls) -> 'SpotifyCredentials':
        """
        Create credentials from environment variables.

        A ``.env`` file in the working directory is loaded first.
        Empty variables are treated as unset.

        Returns:
            SpotifyCredentials instance.
        """
        load_dotenv()
        return cls(
            client_id=os.getenv('SPOTIFY_CLIENT_ID') or None,
            client_secret=os.getenv('SPOTIFY_CLIENT_SECRET') or None,
            redirect_uri=os.getenv('SPOTIFY_REDIRECT_URI') or None,
            token_string=os.getenv('SPOTIFY_TOKEN') or None,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary, leaving out unset fields."""
        return {
            key: value
            for key, value in (
                ('client_id', self.client_id),
                ('client_secret', self.client_secret),
                ('redirect_uri', self.redirect_uri),
                ('token_string', self.token_string),
            )
            if value is not None
        }
