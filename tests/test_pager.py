"""Pager cursor behavior, driven by an in-memory page source."""

import asyncio
from typing import Any, Optional

import pytest

from genai_client import InvalidStateError, ListConfig, PagedItem, Pager
from genai_client.pagers import PageCursor, advance


def page(items: list[Any], token: Optional[str] = None, field: str = "models") -> dict[str, Any]:
    response: dict[str, Any] = {field: items}
    if token:
        response["nextPageToken"] = token
    return response


class PageSource:
    """Serves pages keyed by page token and records the params it was called with."""

    def __init__(self, pages: dict[str, dict[str, Any]]):
        self.pages = pages
        self.calls: list[ListConfig] = []
        self.fail_next: Optional[BaseException] = None
        self.gate: Optional[asyncio.Event] = None

    async def __call__(self, params: ListConfig) -> dict[str, Any]:
        self.calls.append(params)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_next is not None:
            error, self.fail_next = self.fail_next, None
            raise error
        return self.pages[params.page_token]


def make_pager(source: PageSource, first: dict[str, Any], page_size: Optional[int] = None) -> Pager:
    return Pager(PagedItem.MODELS, source, first, ListConfig(page_size=page_size))


async def collect(pager: Pager) -> list[Any]:
    return [item async for item in pager]


class TestAdvance:
    def test_builds_cursor_from_response(self):
        params = ListConfig(page_size=2)
        cursor = advance(PagedItem.MODELS, params, page(["a", "b"], "t1"))
        assert cursor == PageCursor(page=["a", "b"], params=params, next_page_token="t1")

    def test_missing_item_field_is_empty_page(self):
        cursor = advance(PagedItem.FILES, ListConfig(), {"nextPageToken": "t1"})
        assert cursor.page == []
        assert cursor.next_page_token == "t1"

    def test_empty_token_means_last_page(self):
        cursor = advance(PagedItem.MODELS, ListConfig(), {"models": ["a"], "nextPageToken": ""})
        assert cursor.next_page_token is None

    def test_does_not_mutate_inputs(self):
        params = ListConfig(page_size=5)
        response = page(["a"], "t1")
        advance(PagedItem.MODELS, params, response)
        assert params == ListConfig(page_size=5)
        assert response == page(["a"], "t1")

    def test_uses_envelope_field_for_kind(self):
        cursor = advance(PagedItem.CACHED_CONTENTS, ListConfig(), {"cachedContents": [1, 2], "models": [3]})
        assert cursor.page == [1, 2]


class TestPagerState:
    def test_initial_page(self):
        pager = make_pager(PageSource({}), page(["a", "b", "c"], "t1"))
        assert pager.page == ["a", "b", "c"]
        assert pager.page_length == 3
        assert pager.name is PagedItem.MODELS
        assert pager.has_next_page()

    def test_page_size_from_params(self):
        pager = make_pager(PageSource({}), page(["a"]), page_size=10)
        assert pager.page_size == 10

    def test_page_size_defaults_to_first_page_length(self):
        pager = make_pager(PageSource({}), page(["a", "b"]))
        assert pager.page_size == 2

    def test_get_item(self):
        pager = make_pager(PageSource({}), page(["a", "b"]))
        assert pager.get_item(0) == "a"
        assert pager.get_item(1) == "b"

    @pytest.mark.parametrize("index", [-1, 2, 100])
    def test_get_item_out_of_range(self, index):
        pager = make_pager(PageSource({}), page(["a", "b"]))
        with pytest.raises(IndexError):
            pager.get_item(index)

    def test_repr(self):
        pager = make_pager(PageSource({}), page(["a"], "t1"))
        assert repr(pager) == "Pager(name='models', page_length=1, has_next_page=True)"


class TestNextPage:
    @pytest.mark.asyncio
    async def test_fetches_with_token_and_keeps_params(self):
        source = PageSource({"t1": page(["c"])})
        pager = Pager(PagedItem.MODELS, source, page(["a", "b"], "t1"), ListConfig(page_size=2, filter="x"))

        result = await pager.next_page()

        assert result == ["c"]
        assert pager.page == ["c"]
        assert source.calls == [ListConfig(page_size=2, filter="x", page_token="t1")]
        assert pager.params.page_token == "t1"
        assert pager.page_size == 2
        assert not pager.has_next_page()

    @pytest.mark.asyncio
    async def test_terminal_page_raises_and_keeps_state(self):
        source = PageSource({})
        pager = make_pager(source, page(["a"]))

        with pytest.raises(InvalidStateError):
            await pager.next_page()

        assert pager.page == ["a"]
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_failed_request_keeps_state_and_can_retry(self):
        source = PageSource({"t1": page(["b"])})
        pager = make_pager(source, page(["a"], "t1"))
        source.fail_next = RuntimeError("network down")

        with pytest.raises(RuntimeError, match="network down"):
            await pager.next_page()

        assert pager.page == ["a"]
        assert pager.has_next_page()
        assert pager.params.page_token is None

        assert await pager.next_page() == ["b"]

    @pytest.mark.asyncio
    async def test_cancelled_request_keeps_state(self):
        source = PageSource({"t1": page(["b"])})
        source.gate = asyncio.Event()
        pager = make_pager(source, page(["a"], "t1"))

        task = asyncio.create_task(pager.next_page())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert pager.page == ["a"]
        assert pager.has_next_page()


class TestIteration:
    @pytest.mark.asyncio
    async def test_yields_every_item_across_pages(self):
        source = PageSource({"t1": page(["c", "d"], "t2"), "t2": page(["e"])})
        pager = make_pager(source, page(["a", "b"], "t1"))

        assert await collect(pager) == ["a", "b", "c", "d", "e"]
        assert [c.page_token for c in source.calls] == ["t1", "t2"]
        assert not pager.has_next_page()

    @pytest.mark.asyncio
    async def test_skips_empty_intermediate_page(self):
        source = PageSource({"t1": page([], "t2"), "t2": page(["b"])})
        pager = make_pager(source, page(["a"], "t1"))

        assert await collect(pager) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_empty_single_page(self):
        pager = make_pager(PageSource({}), {})
        assert await collect(pager) == []

    @pytest.mark.asyncio
    async def test_reiteration_restarts_at_current_page(self):
        source = PageSource({"t1": page(["c"])})
        pager = make_pager(source, page(["a", "b"], "t1"))

        assert await collect(pager) == ["a", "b", "c"]
        # Earlier pages are gone; only the current page is replayed.
        assert await collect(pager) == ["c"]
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_partial_iteration_then_restart(self):
        source = PageSource({})
        pager = make_pager(source, page(["a", "b", "c"]))

        seen = []
        async for item in pager:
            seen.append(item)
            if len(seen) == 2:
                break

        assert seen == ["a", "b"]
        assert await collect(pager) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_iteration_error_propagates_and_keeps_page(self):
        source = PageSource({"t1": page(["b"])})
        pager = make_pager(source, page(["a"], "t1"))
        source.fail_next = RuntimeError("boom")

        seen = []
        with pytest.raises(RuntimeError):
            async for item in pager:
                seen.append(item)

        assert seen == ["a"]
        assert pager.page == ["a"]
        assert await collect(pager) == ["a", "b"]
