"""
Cached contents API.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from genai_client import _transformers as t
from genai_client.errors import InvalidArgumentError
from genai_client.pagers import ListConfig, PagedItem, Pager, as_list_config
from genai_client.transport.http import HttpClient
from genai_client.types import CachedContent, CreateCachedContentConfig

COLLECTION = "cachedContents"


class Caches:
    def __init__(self, http: HttpClient):
        self._http = http

    def _name(self, name: str) -> str:
        return t.t_resource_name(self._http.config, COLLECTION, name)

    async def create(
        self, model: str, config: Optional[Union[CreateCachedContentConfig, dict[str, Any]]] = None,
    ) -> CachedContent:
        if isinstance(config, dict):
            config = CreateCachedContentConfig.model_validate(config)
        config = config or CreateCachedContentConfig()
        body: dict[str, Any] = {"model": t.t_model(self._http.config, model)}
        if config.contents is not None:
            body["contents"] = [c.to_wire() for c in t.t_contents(config.contents)]
        if config.system_instruction is not None:
            body["systemInstruction"] = t.t_content(config.system_instruction).to_wire()
        if config.tools:
            body["tools"] = [tool.to_wire() for tool in t.t_tools(config.tools)]
        if config.tool_config:
            body["toolConfig"] = config.tool_config
        if config.ttl:
            body["ttl"] = config.ttl
        if config.expire_time:
            body["expireTime"] = config.expire_time
        if config.display_name:
            body["displayName"] = config.display_name
        return CachedContent.model_validate(await self._http.post(COLLECTION, body))

    async def get(self, name: str) -> CachedContent:
        return CachedContent.model_validate(await self._http.get(self._name(name)))

    async def update(self, name: str, ttl: Optional[str] = None, expire_time: Optional[str] = None) -> CachedContent:
        """Change the expiration. Exactly one of ttl / expire_time."""
        if (ttl is None) == (expire_time is None):
            raise InvalidArgumentError("Pass exactly one of ttl or expire_time")
        body = {"ttl": ttl} if ttl is not None else {"expireTime": expire_time}
        return CachedContent.model_validate(await self._http.patch(self._name(name), body))

    async def delete(self, name: str) -> None:
        await self._http.delete(self._name(name))

    async def _list_page(self, params: ListConfig) -> dict[str, Any]:
        data = await self._http.get(COLLECTION, params={"pageSize": params.page_size, "pageToken": params.page_token})
        return {
            "nextPageToken": data.get("nextPageToken"),
            PagedItem.CACHED_CONTENTS.value: [CachedContent.model_validate(c) for c in data.get(COLLECTION) or []],
        }

    async def list(self, config: Optional[Union[ListConfig, dict[str, Any]]] = None) -> Pager[CachedContent]:
        params = as_list_config(config)
        return Pager(PagedItem.CACHED_CONTENTS, self._list_page, await self._list_page(params), params)
