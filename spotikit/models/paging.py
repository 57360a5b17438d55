"""
Paged result sets.

Spotify returns long lists one page at a time, either offset-based
(``next``/``previous`` links) or cursor-based (``next`` link plus
``cursors``). Pages parsed through an endpoint are bound to it so they
can fetch their neighbours.
"""

import logging
from enum import Enum
from typing import Any, Generic, Iterator, List, Optional, TypeVar

from pydantic import Field, PrivateAttr

from ..actions import SpotifyRestAction
from ..exceptions import SpotifyError, SpotifyParseError
from .base import SpotifyModel, parse_model

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Cursor(SpotifyModel):
    """Keys for the neighbouring pages of a cursor-based result set."""

    before: Optional[str] = None
    after: Optional[str] = None


class AbstractPagingObject(SpotifyModel, Generic[T]):
    """
    Common behaviour of offset- and cursor-based pages.

    Attributes:
        href: Link to the endpoint returning the full result.
        items: The requested data.
        limit: Maximum number of items in the response.
        next: URL of the next page (None on the last page).
        total: Total number of items available, if reported.
    """

    href: Optional[str] = None
    items: List[T] = Field(default_factory=list)
    limit: Optional[int] = None
    next: Optional[str] = None
    total: Optional[int] = None

    _endpoint: Any = PrivateAttr(default=None)
    _container_key: Optional[str] = PrivateAttr(default=None)

    def bind(self, endpoint, container_key: Optional[str] = None):
        """
        Attach the endpoint used to fetch neighbouring pages.

        Args:
            endpoint: The SpotifyEndpoint this page came from.
            container_key: Key the page is nested under in responses
                (e.g. ``artists`` for search results).
        """
        self._endpoint = endpoint
        self._container_key = container_key
        return self

    @property
    def forward_link(self) -> Optional[str]:
        return self.next

    @property
    def backward_link(self) -> Optional[str]:
        return None

    def _fetch(self, url: str):
        if self._endpoint is None:
            raise SpotifyError("Page is not bound to an API instance")
        data = self._endpoint.http.get_url(url)
        if self._container_key is not None:
            if not isinstance(data, dict) or self._container_key not in data:
                raise SpotifyParseError(
                    f"Page response has no '{self._container_key}' field"
                )
            data = data[self._container_key]
        page = parse_model(type(self), data)
        return page.bind(self._endpoint, self._container_key)

    def fetch_next(self):
        """Fetch the next page on this thread, or None on the last page."""
        link = self.forward_link
        return self._fetch(link) if link else None

    def fetch_previous(self):
        """Fetch the previous page on this thread, or None on the first page."""
        link = self.backward_link
        return self._fetch(link) if link else None

    def iter_pages(self) -> Iterator["AbstractPagingObject[T]"]:
        """Yield this page and then each following page as it is fetched."""
        page = self
        yield page
        while page.forward_link:
            page = page.fetch_next()
            yield page

    def iter_items(self) -> Iterator[T]:
        """Lazily yield items from this page onwards. Not restartable."""
        for page in self.iter_pages():
            yield from page.items

    def get_all_pages(self) -> List["AbstractPagingObject[T]"]:
        """Every page of the result set, in order, including earlier pages."""
        earlier = []
        page = self.fetch_previous()
        while page is not None:
            earlier.append(page)
            page = page.fetch_previous()
        earlier.reverse()
        return earlier + list(self.iter_pages())

    def collect_all_items(self) -> List[T]:
        return [item for page in self.get_all_pages() for item in page.items]

    def cursor(self) -> "PagingCursor[T]":
        """A traversal cursor positioned on this page."""
        return PagingCursor(self)

    # -----------------------------------------------------------------
    # Deferred variants
    # -----------------------------------------------------------------

    def _to_action(self, supplier) -> SpotifyRestAction:
        if self._endpoint is None:
            return SpotifyRestAction(supplier)
        return self._endpoint.to_action(supplier)

    def get_next(self) -> SpotifyRestAction:
        return self._to_action(self.fetch_next)

    def get_previous(self) -> SpotifyRestAction:
        return self._to_action(self.fetch_previous)

    def get_all(self) -> SpotifyRestAction:
        return self._to_action(self.get_all_pages)

    def get_all_items(self) -> SpotifyRestAction:
        return self._to_action(self.collect_all_items)


class PagingObject(AbstractPagingObject[T], Generic[T]):
    """
    Offset-based page.

    Attributes:
        offset: Offset of the first item on this page.
        previous: URL of the previous page (None on the first page).
    """

    offset: int = 0
    previous: Optional[str] = None

    @property
    def backward_link(self) -> Optional[str]:
        return self.previous


class CursorBasedPagingObject(AbstractPagingObject[T], Generic[T]):
    """
    Cursor-based page. Spotify only links these forwards.
    """

    cursors: Optional[Cursor] = None

    def fetch_previous(self):
        raise ValueError("Cursor-based pages can only be traversed forwards")

    def get_all_pages(self) -> List["AbstractPagingObject[T]"]:
        return list(self.iter_pages())


class CursorState(Enum):
    HAS_NEXT = "has_next"
    EXHAUSTED = "exhausted"


class PagingCursor(Generic[T]):
    """
    Walks a result set page by page.

    The cursor is ``HAS_NEXT`` while the current page links to a next
    page and ``EXHAUSTED`` once it does not. Fetch failures propagate;
    nothing is skipped.

    Example:
        cursor = api.playlists.get_playlist_tracks(pid).complete().cursor()
        tracks = cursor.get_all_items()
        assert cursor.state is CursorState.EXHAUSTED
    """

    def __init__(self, page: AbstractPagingObject[T]):
        self._page = page
        self._state = (
            CursorState.HAS_NEXT if page.forward_link else CursorState.EXHAUSTED
        )

    @property
    def page(self) -> AbstractPagingObject[T]:
        return self._page

    @property
    def state(self) -> CursorState:
        return self._state

    def next(self) -> Optional[AbstractPagingObject[T]]:
        """Advance to the next page; None once the cursor is exhausted."""
        if self._state is CursorState.EXHAUSTED:
            return None
        page = self._page.fetch_next()
        if page is None:
            self._state = CursorState.EXHAUSTED
            return None
        self._page = page
        if not page.forward_link:
            self._state = CursorState.EXHAUSTED
        return page

    def previous(self) -> Optional[AbstractPagingObject[T]]:
        """Step back to the previous page; None on the first page."""
        page = self._page.fetch_previous()
        if page is None:
            return None
        self._page = page
        self._state = (
            CursorState.HAS_NEXT if page.forward_link else CursorState.EXHAUSTED
        )
        return page

    def get_all_items(self) -> List[T]:
        """Drain the cursor, returning items from the current page onwards."""
        items = list(self._page.items)
        while self.next() is not None:
            items.extend(self._page.items)
        logger.debug(f"Collected {len(items)} items")
        return items

    def __iter__(self) -> Iterator[T]:
        yield from self._page.items
        while self.next() is not None:
            yield from self._page.items
