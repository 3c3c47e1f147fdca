"""
Pager: a cursor over page-at-a-time list endpoints.

The first page is fetched by the list call that creates the pager. Later
pages are fetched on demand, either explicitly with next_page() or
implicitly by `async for`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Generic, Optional, TypeVar, Union

from pydantic import BaseModel

from genai_client.errors import InvalidStateError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PagedItem(str, Enum):
    """Kind of listed entity; the value is the envelope field holding the items."""
    BATCH_JOBS = "batchJobs"
    MODELS = "models"
    TUNING_JOBS = "tuningJobs"
    FILES = "files"
    CACHED_CONTENTS = "cachedContents"


class ListConfig(BaseModel):
    page_size: Optional[int] = None
    page_token: Optional[str] = None
    filter: Optional[str] = None
    query_base: Optional[bool] = None


def as_list_config(config: Optional[Union[ListConfig, dict[str, Any]]]) -> ListConfig:
    if config is None:
        return ListConfig()
    if isinstance(config, dict):
        return ListConfig(**config)
    return config


RequestFn = Callable[[ListConfig], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class PageCursor(Generic[T]):
    page: list[T] = field(default_factory=list)
    params: ListConfig = field(default_factory=ListConfig)
    next_page_token: Optional[str] = None


def advance(name: PagedItem, params: ListConfig, response: dict[str, Any]) -> PageCursor[Any]:
    """Build the cursor for a freshly fetched page. A missing item field is an empty page."""
    items = response.get(name.value) or []
    token = response.get("nextPageToken") or None
    return PageCursor(page=list(items), params=params, next_page_token=token)


class Pager(Generic[T]):
    def __init__(
        self,
        name: PagedItem,
        request: RequestFn,
        response: dict[str, Any],
        params: Optional[ListConfig] = None,
    ):
        self._name = name
        self._request = request
        self._cursor: PageCursor[T] = advance(name, params or ListConfig(), response)
        self._page_size = self._cursor.params.page_size or len(self._cursor.page)
        self._idx = 0

    @property
    def page(self) -> list[T]:
        """Items of the most recently fetched page. Never triggers a fetch."""
        return self._cursor.page

    @property
    def name(self) -> PagedItem:
        return self._name

    @property
    def page_size(self) -> int:
        """Requested page size; the last page may hold fewer items."""
        return self._page_size

    @property
    def params(self) -> ListConfig:
        return self._cursor.params

    @property
    def page_length(self) -> int:
        return len(self._cursor.page)

    def get_item(self, index: int) -> T:
        if index < 0 or index >= len(self._cursor.page):
            raise IndexError(f"Index {index} out of range for page of length {len(self._cursor.page)}")
        return self._cursor.page[index]

    def has_next_page(self) -> bool:
        return bool(self._cursor.next_page_token)

    async def next_page(self) -> list[T]:
        """Fetch the next page and make it current.

        Raises InvalidStateError when there are no more pages. If the request
        fails or is cancelled the pager is left exactly as it was.
        """
        if not self.has_next_page():
            raise InvalidStateError("No more pages to fetch.")
        params = self._cursor.params.model_copy(update={"page_token": self._cursor.next_page_token})
        response = await self._request(params)
        self._cursor = advance(self._name, params, response)
        self._idx = 0
        logger.debug("Fetched %s page of %d items", self._name.value, len(self._cursor.page))
        return self._cursor.page

    def __aiter__(self) -> AsyncIterator[T]:
        # Each iteration restarts at the beginning of the current page.
        self._idx = 0
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[T]:
        while True:
            while self._idx >= len(self._cursor.page):
                if not self.has_next_page():
                    return
                await self.next_page()
            item = self._cursor.page[self._idx]
            self._idx += 1
            yield item

    def __repr__(self) -> str:
        return f"Pager(name={self._name.value!r}, page_length={self.page_length}, has_next_page={self.has_next_page()})"
