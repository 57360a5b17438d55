"""User models."""

from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import Followers, SpotifyImage, SpotifyResource


class PublicUser(SpotifyResource):
    display_name: Optional[str] = None
    followers: Optional[Followers] = None
    images: List[SpotifyImage] = Field(default_factory=list)
    type: str = "user"


class PrivateUser(PublicUser):
    """The current user's profile; extra fields depend on granted scopes."""

    country: Optional[str] = None
    email: Optional[str] = None
    product: Optional[str] = None
    birthdate: Optional[str] = None
    explicit_content: Dict[str, Any] = Field(default_factory=dict)
