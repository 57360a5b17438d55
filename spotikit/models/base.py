"""Shared pydantic base and parsing helpers for Spotify models."""

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..exceptions import SpotifyParseError

M = TypeVar("M", bound=BaseModel)


class SpotifyModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SpotifyImage(SpotifyModel):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class Followers(SpotifyModel):
    href: Optional[str] = None
    total: int = 0


class SpotifyResource(SpotifyModel):
    """Anything addressable by id and URI."""

    id: Optional[str] = None
    uri: Optional[str] = None
    href: Optional[str] = None
    external_urls: Dict[str, str] = Field(default_factory=dict)


def parse_model(model: Type[M], data: Any) -> M:
    """
    Validate ``data`` into ``model``.

    Raises:
        SpotifyParseError: If the payload does not match the model.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SpotifyParseError(
            f"Could not parse {model.__name__}: {e}"
        ) from e


def parse_model_list(
    model: Type[M], data: Any, key: Optional[str] = None
) -> List[Optional[M]]:
    """
    Validate a JSON array (optionally nested under ``key``) into models.

    ``null`` entries, which Spotify returns for unknown ids, stay None.
    """
    if key is not None:
        if not isinstance(data, dict) or key not in data:
            raise SpotifyParseError(f"Response has no '{key}' field")
        data = data[key]
    if not isinstance(data, list):
        raise SpotifyParseError(
            f"Expected a list of {model.__name__}, got {type(data).__name__}"
        )
    return [None if item is None else parse_model(model, item) for item in data]
