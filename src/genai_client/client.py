"""
AsyncGenAI and GenAI: the main SDK clients.
"""

import asyncio
from typing import Any, Optional, Union

import httpx

from genai_client.caches import Caches
from genai_client.chats import Chats
from genai_client.config import ClientConfig, HttpOptions
from genai_client.files import Files
from genai_client.live import Live
from genai_client.models import Models
from genai_client.pagers import ListConfig
from genai_client.transport.http import HttpClient
from genai_client.transport.websocket import WebSocketFactory
from genai_client.tunings import Tunings
from genai_client.types import CountTokensResponse, EmbedContentResponse, GenerateContentResponse, Model


class AsyncGenAI:
    """Async client (primary).

    Backend selection happens here, once: the Gemini API with an API key, or
    Vertex AI (vertexai=True) with a project and location. Unset arguments
    are read from GOOGLE_* environment variables.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        vertexai: Optional[bool] = None,
        project: Optional[str] = None,
        location: Optional[str] = None,
        access_token: Optional[str] = None,
        http_options: Optional[Union[HttpOptions, dict[str, Any]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        websocket_factory: Optional[WebSocketFactory] = None,
    ):
        self.config = ClientConfig.from_env(
            api_key=api_key,
            vertexai=vertexai,
            project=project,
            location=location,
            access_token=access_token,
            http_options=http_options,
        )
        self.http = HttpClient(self.config, transport=transport)
        self.models = Models(self.http)
        self.caches = Caches(self.http)
        self.files = Files(self.http)
        self.tunings = Tunings(self.http)
        self.chats = Chats(self.models)
        self.live = Live(self.http, websocket_factory)

    @property
    def vertexai(self) -> bool:
        return self.config.vertexai

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AsyncGenAI":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class GenAI:
    """Sync wrapper around AsyncGenAI for the unary REST calls. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncGenAI(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def vertexai(self) -> bool:
        return self._async.vertexai

    def generate_content(self, model: str, contents: Any, config: Any = None) -> GenerateContentResponse:
        return self._run(self._async.models.generate_content(model, contents, config))

    def embed_content(self, model: str, contents: Any, config: Any = None) -> EmbedContentResponse:
        return self._run(self._async.models.embed_content(model, contents, config))

    def count_tokens(self, model: str, contents: Any) -> CountTokensResponse:
        return self._run(self._async.models.count_tokens(model, contents))

    def list_models(self, config: Optional[Union[ListConfig, dict[str, Any]]] = None) -> list[Model]:
        """All models across every page (blocking)."""
        async def _collect() -> list[Model]:
            pager = await self._async.models.list(config)
            return [m async for m in pager]
        return self._run(_collect())

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
