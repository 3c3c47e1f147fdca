"""
REST HTTP client for the generative AI service.
"""

import json
import logging
from typing import Any, AsyncIterator, Optional

import httpx

from genai_client.config import ClientConfig
from genai_client.errors import APIError

logger = logging.getLogger(__name__)

USER_AGENT = "genai-client/0.1.0"


class HttpClient:
    def __init__(self, config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._config = config
        # Resolved once: later set_default_base_urls() calls do not affect this client.
        self._base_url = config.resolve_base_url()
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}{config.api_version}/",
            headers={
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
                **config.auth_headers(),
                **config.http_options.headers,
            },
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._base_url

    def _path(self, path: str) -> str:
        """Prefix Vertex AI paths with projects/{p}/locations/{l}/ unless already absolute."""
        path = path.lstrip("/")
        if self._config.vertexai and not path.startswith("projects/"):
            return self._config.resource_prefix() + path
        return path

    @staticmethod
    def _raise_for_status(resp: httpx.Response, text: str) -> None:
        if resp.status_code < 400:
            return
        try:
            body = json.loads(text) if text else None
        except json.JSONDecodeError:
            body = None
        raise APIError.from_response(resp.status_code, body, text)

    async def request(
        self,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        params = {k: v for k, v in (params or {}).items() if v is not None}
        resp = await self._client.request(method, self._path(path), json=body, params=params or None)
        self._raise_for_status(resp, resp.text)
        if not resp.content:
            return {}
        return resp.json()

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Optional[dict[str, Any]] = None, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, body=body, params=params)

    async def patch(self, path: str, body: Optional[dict[str, Any]] = None, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("PATCH", path, body=body, params=params)

    async def delete(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self.request("DELETE", path, params=params)

    async def stream(self, path: str, body: Optional[dict[str, Any]] = None) -> AsyncIterator[dict[str, Any]]:
        """POST with alt=sse and yield each `data:` payload as decoded JSON."""
        async with self._client.stream("POST", self._path(path), json=body, params={"alt": "sse"}) as resp:
            if resp.status_code >= 400:
                text = (await resp.aread()).decode("utf-8", errors="replace")
                self._raise_for_status(resp, text)
            async for line in resp.aiter_lines():
                if not line.startswith("data:"):
                    continue
                payload = line[len("data:"):].strip()
                if not payload:
                    continue
                chunk = json.loads(payload)
                if isinstance(chunk, dict) and isinstance(chunk.get("error"), dict):
                    raise APIError.from_response(chunk["error"].get("code") or 500, chunk, payload)
                yield chunk

    async def close(self) -> None:
        await self._client.aclose()
