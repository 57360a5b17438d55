"""
Base class for endpoint groups.

A SpotifyEndpoint is parameterized by the base path of its resource
family and the model its single-resource calls return. Subclasses only
add resource-specific calls; building requests, parsing responses and
wrapping them in deferred actions happens here.
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from ..actions import SpotifyRestAction, SpotifyRestActionPaging, catch_bad_request
from ..exceptions import SpotifyParseError
from ..models.base import parse_model, parse_model_list
from ..models.paging import AbstractPagingObject, CursorBasedPagingObject, PagingObject
from ..uris import encode_id, join_ids

logger = logging.getLogger(__name__)

M = TypeVar("M")
T = TypeVar("T")

# Spotify caps most "several" lookups at 50 IDs per request
MAX_IDS_PER_REQUEST = 50


def build_params(**params: Any) -> Dict[str, Any]:
    """Drop unset query parameters and lower-case booleans."""
    result = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, Enum):
            value = value.value
        result[key] = value
    return result


def chunked(items: List[T], size: int) -> Iterable[List[T]]:
    for i in range(0, len(items), size):
        yield items[i : i + size]


class SpotifyEndpoint(Generic[M]):
    """
    Generic endpoint façade.

    Attributes:
        base_path: Path of the resource family, e.g. ``/artists``.
        resource_type: Type used when parsing IDs/URIs, e.g. ``artist``.
        model: Model returned by ``get_one``.

    Args:
        api: The owning SpotifyApi; gives access to the HTTP client and
            worker pool.
    """

    base_path: str = ""
    resource_type: Optional[str] = None
    model: Optional[Type[M]] = None

    def __init__(self, api):
        self.api = api

    @property
    def http(self):
        return self.api.http_client

    # -----------------------------------------------------------------
    # Action factories
    # -----------------------------------------------------------------

    def to_action(self, supplier: Callable[[], T]) -> SpotifyRestAction[T]:
        return SpotifyRestAction(supplier, self.api.executor)

    def to_paging_action(self, supplier: Callable[[], T]) -> SpotifyRestActionPaging[T]:
        return SpotifyRestActionPaging(supplier, self.api.executor)

    # -----------------------------------------------------------------
    # Request helpers
    # -----------------------------------------------------------------

    def _id(self, reference: str, resource_type: Optional[str] = None) -> str:
        return encode_id(reference, resource_type or self.resource_type)

    def _path(self, reference: str, suffix: str = "") -> str:
        return f"{self.base_path}/{self._id(reference)}{suffix}"

    def _parse_page(
        self,
        item_model: Type[T],
        data: Any,
        container_key: Optional[str] = None,
        cursor_based: bool = False,
    ) -> AbstractPagingObject[T]:
        page_type = (
            CursorBasedPagingObject[item_model]
            if cursor_based
            else PagingObject[item_model]
        )
        if container_key is not None:
            data = data.get(container_key) if isinstance(data, dict) else None
        page = parse_model(page_type, data)
        return page.bind(self, container_key)

    def get_one(
        self,
        reference: str,
        path: Optional[str] = None,
        model: Optional[Type] = None,
        **params: Any,
    ) -> SpotifyRestAction[Optional[M]]:
        """
        Fetch a single resource, by default of this family.

        Returns None (instead of failing) when Spotify answers 400/404,
        i.e. for unknown or malformed IDs.
        """
        path = path or self._path(reference)
        model = model or self.model

        def fetch() -> Optional[M]:
            return parse_model(model, self.http.get(path, build_params(**params)))

        return self.to_action(lambda: catch_bad_request(fetch))

    def get_several(
        self,
        references: Iterable[str],
        key: str,
        path: Optional[str] = None,
        model: Optional[Type] = None,
        **params: Any,
    ) -> SpotifyRestAction[List[Optional[M]]]:
        """
        Fetch resources by ID in batches, preserving order.

        Unknown IDs come back as None entries.
        """
        references = list(references)
        path = path or self.base_path
        model = model or self.model

        def fetch() -> List[Optional[M]]:
            logger.debug(f"Fetching {len(references)} items from {path}")
            results = []
            for batch in chunked(references, MAX_IDS_PER_REQUEST):
                data = self.http.get(
                    path,
                    build_params(ids=join_ids(batch, self.resource_type), **params),
                )
                results.extend(parse_model_list(model, data, key))
            return results

        return self.to_action(fetch)

    def get_page(
        self,
        path: str,
        item_model: Type[T],
        params: Optional[Dict[str, Any]] = None,
        container_key: Optional[str] = None,
        cursor_based: bool = False,
    ) -> SpotifyRestActionPaging[AbstractPagingObject[T]]:
        """Action fetching the first page of a paged collection."""

        def fetch():
            data = self.http.get(path, params)
            return self._parse_page(item_model, data, container_key, cursor_based)

        return self.to_paging_action(fetch)

    def get_list(
        self, path: str, item_model: Type[T], key: str, params: Optional[Dict] = None
    ) -> SpotifyRestAction[List[T]]:
        """Action fetching a non-paged list nested under ``key``."""
        return self.to_action(
            lambda: parse_model_list(item_model, self.http.get(path, params), key)
        )

    def get_booleans(
        self, path: str, params: Dict[str, Any]
    ) -> SpotifyRestAction[List[bool]]:
        """Action for the ``/contains`` style endpoints returning ``[bool]``."""

        def fetch() -> List[bool]:
            data = self.http.get(path, params)
            if not isinstance(data, list) or not all(
                isinstance(value, bool) for value in data
            ):
                raise SpotifyParseError(f"Expected a list of booleans from {path}")
            return data

        return self.to_action(fetch)

    def send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> SpotifyRestAction[None]:
        """Action for calls whose response body is ignored."""
        request = {
            "PUT": self.http.put,
            "POST": self.http.post,
            "DELETE": self.http.delete,
        }[method]

        def run() -> None:
            request(path, json=json, params=params)

        return self.to_action(run)
