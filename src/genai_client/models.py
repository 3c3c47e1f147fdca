"""
Models API: generation, embeddings, token counting, model listing.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Optional, Union

from genai_client import _transformers as t
from genai_client.pagers import ListConfig, PagedItem, Pager, as_list_config
from genai_client.transport.http import HttpClient
from genai_client.types import (
    ContentEmbedding,
    CountTokensResponse,
    EmbedContentConfig,
    EmbedContentResponse,
    GenerateContentConfig,
    GenerateContentResponse,
    Model,
)
from genai_client.types.content import REQUEST_LEVEL_FIELDS, join_text

ConfigArg = Optional[Union[GenerateContentConfig, dict[str, Any]]]


class Models:
    def __init__(self, http: HttpClient):
        self._http = http

    def _generate_body(self, contents: t.ContentListUnion, config: ConfigArg) -> dict[str, Any]:
        body: dict[str, Any] = {"contents": [c.to_wire() for c in t.t_contents(contents)]}
        if config is None:
            return body
        if isinstance(config, dict):
            config = GenerateContentConfig.model_validate(config)
        if config.system_instruction is not None:
            body["systemInstruction"] = t.t_content(config.system_instruction).to_wire()
        if config.safety_settings:
            body["safetySettings"] = [s.to_wire() for s in config.safety_settings]
        if config.tools:
            body["tools"] = [tool.to_wire() for tool in t.t_tools(config.tools)]
        if config.tool_config:
            body["toolConfig"] = config.tool_config
        if config.cached_content:
            body["cachedContent"] = t.t_resource_name(self._http.config, "cachedContents", config.cached_content)
        if config.labels and self._http.config.vertexai:
            body["labels"] = config.labels
        generation = config.model_dump(by_alias=True, exclude_none=True, mode="json", exclude=set(REQUEST_LEVEL_FIELDS))
        if generation:
            body["generationConfig"] = generation
        return body

    async def generate_content(
        self, model: str, contents: t.ContentListUnion, config: ConfigArg = None,
    ) -> GenerateContentResponse:
        """Single-shot generation."""
        path = f"{t.t_model(self._http.config, model)}:generateContent"
        data = await self._http.post(path, self._generate_body(contents, config))
        return GenerateContentResponse.model_validate(data)

    async def generate_content_stream(
        self, model: str, contents: t.ContentListUnion, config: ConfigArg = None,
    ) -> AsyncIterator[GenerateContentResponse]:
        """Streaming generation; yields partial responses as the server produces them."""
        path = f"{t.t_model(self._http.config, model)}:streamGenerateContent"
        async for chunk in self._http.stream(path, self._generate_body(contents, config)):
            yield GenerateContentResponse.model_validate(chunk)

    async def embed_content(
        self,
        model: str,
        contents: t.ContentListUnion,
        config: Optional[Union[EmbedContentConfig, dict[str, Any]]] = None,
    ) -> EmbedContentResponse:
        """Embed each content. Vertex AI embeds the concatenated text of each content."""
        if isinstance(config, dict):
            config = EmbedContentConfig.model_validate(config)
        config = config or EmbedContentConfig()
        name = t.t_model(self._http.config, model)
        normalized = t.t_contents(contents)

        if self._http.config.vertexai:
            instances = []
            for content in normalized:
                instance: dict[str, Any] = {"content": join_text(content.parts) or ""}
                if config.task_type:
                    instance["task_type"] = config.task_type
                if config.title:
                    instance["title"] = config.title
                if config.mime_type:
                    instance["mimeType"] = config.mime_type
                instances.append(instance)
            parameters = {
                k: v for k, v in {
                    "outputDimensionality": config.output_dimensionality,
                    "autoTruncate": config.auto_truncate,
                }.items() if v is not None
            }
            body: dict[str, Any] = {"instances": instances}
            if parameters:
                body["parameters"] = parameters
            data = await self._http.post(f"{name}:predict", body)
            embeddings = [
                ContentEmbedding.model_validate(p.get("embeddings") or {})
                for p in data.get("predictions") or []
            ]
            return EmbedContentResponse(embeddings=embeddings, metadata=data.get("metadata"))

        extra = config.model_dump(
            by_alias=True, exclude_none=True, mode="json", include={"task_type", "title", "output_dimensionality"},
        )
        requests = [{"model": name, "content": content.to_wire(), **extra} for content in normalized]
        data = await self._http.post(f"{name}:batchEmbedContents", {"requests": requests})
        return EmbedContentResponse.model_validate(data)

    async def count_tokens(self, model: str, contents: t.ContentListUnion) -> CountTokensResponse:
        path = f"{t.t_model(self._http.config, model)}:countTokens"
        body = {"contents": [c.to_wire() for c in t.t_contents(contents)]}
        return CountTokensResponse.model_validate(await self._http.post(path, body))

    async def get(self, model: str) -> Model:
        return Model.model_validate(await self._http.get(t.t_model(self._http.config, model)))

    def _list_target(self, query_base: bool) -> tuple[str, str]:
        """(path, response field) of the model collection to list."""
        if self._http.config.vertexai:
            return ("publishers/google/models", "publisherModels") if query_base else ("models", "models")
        return ("models", "models") if query_base else ("tunedModels", "tunedModels")

    async def _list_page(self, params: ListConfig) -> dict[str, Any]:
        query_base = params.query_base is not False
        path, field = self._list_target(query_base)
        data = await self._http.get(path, params={
            "pageSize": params.page_size,
            "pageToken": params.page_token,
            "filter": params.filter,
        })
        return {
            "nextPageToken": data.get("nextPageToken"),
            PagedItem.MODELS.value: [Model.model_validate(m) for m in data.get(field) or []],
        }

    async def list(self, config: Optional[Union[ListConfig, dict[str, Any]]] = None) -> Pager[Model]:
        """List base models (default) or tuned models (query_base=False)."""
        params = as_list_config(config)
        return Pager(PagedItem.MODELS, self._list_page, await self._list_page(params), params)
