"""
Files API (Gemini API only).
"""

from __future__ import annotations

from typing import Any, Optional, Union

from genai_client import _transformers as t
from genai_client.errors import InvalidStateError
from genai_client.pagers import ListConfig, PagedItem, Pager, as_list_config
from genai_client.transport.http import HttpClient
from genai_client.types import File

COLLECTION = "files"


class Files:
    def __init__(self, http: HttpClient):
        self._http = http

    def _ensure_gemini(self) -> None:
        if self._http.config.vertexai:
            raise InvalidStateError("The Files API is only supported by the Gemini API client.")

    async def get(self, name: str) -> File:
        self._ensure_gemini()
        return File.model_validate(await self._http.get(t.t_resource_name(self._http.config, COLLECTION, name)))

    async def delete(self, name: str) -> None:
        self._ensure_gemini()
        await self._http.delete(t.t_resource_name(self._http.config, COLLECTION, name))

    async def _list_page(self, params: ListConfig) -> dict[str, Any]:
        data = await self._http.get(COLLECTION, params={"pageSize": params.page_size, "pageToken": params.page_token})
        return {
            "nextPageToken": data.get("nextPageToken"),
            PagedItem.FILES.value: [File.model_validate(f) for f in data.get(COLLECTION) or []],
        }

    async def list(self, config: Optional[Union[ListConfig, dict[str, Any]]] = None) -> Pager[File]:
        self._ensure_gemini()
        params = as_list_config(config)
        return Pager(PagedItem.FILES, self._list_page, await self._list_page(params), params)
