"""User profile endpoints."""

from typing import Optional

from ..actions import SpotifyRestAction
from ..models import PrivateUser, PublicUser, parse_model
from .base import SpotifyEndpoint


class UserApi(SpotifyEndpoint[PublicUser]):
    base_path = "/users"
    resource_type = "user"
    model = PublicUser

    def get_profile(self, user: str) -> SpotifyRestAction[Optional[PublicUser]]:
        """Public profile of any user; None if the user does not exist."""
        return self.get_one(user)


class ClientProfileApi(UserApi):
    """Adds the current user's private profile (needs a user token)."""

    def get_current_user(self) -> SpotifyRestAction[PrivateUser]:
        return self.to_action(lambda: parse_model(PrivateUser, self.http.get("/me")))
