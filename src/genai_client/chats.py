"""
Multi-turn chat on top of Models.generate_content.

History is kept client-side. A second send_message waits for the first
exchange to be recorded. A stream holds no lock while it is consumed: it
snapshots the history when it starts and records its exchange when it
finishes or is closed.
"""

import asyncio
from typing import Any, AsyncIterator, Optional, Union

from genai_client import _transformers as t
from genai_client.errors import InvalidArgumentError
from genai_client.models import Models
from genai_client.types import Content, GenerateContentConfig, GenerateContentResponse, Part

ConfigArg = Optional[Union[GenerateContentConfig, dict[str, Any]]]


def _is_valid_content(content: Content) -> bool:
    if not content.parts:
        return False
    for part in content.parts:
        if not part.model_dump(exclude_none=True):
            return False
        if part.text == "":
            return False
    return True


def _validate_history(history: list[Content]) -> None:
    for content in history:
        if content.role not in ("user", "model"):
            raise InvalidArgumentError(f"Role must be user or model, but got {content.role}")


def extract_curated_history(history: list[Content]) -> list[Content]:
    """Drop model turns with invalid content, together with the user input that produced them."""
    curated: list[Content] = []
    i = 0
    while i < len(history):
        if history[i].role == "user":
            curated.append(history[i])
            i += 1
            continue
        model_turns: list[Content] = []
        valid = True
        while i < len(history) and history[i].role == "model":
            model_turns.append(history[i])
            valid = valid and _is_valid_content(history[i])
            i += 1
        if valid:
            curated.extend(model_turns)
        elif curated:
            curated.pop()
    return curated


class Chat:
    def __init__(
        self,
        models: Models,
        model: str,
        config: ConfigArg = None,
        history: Optional[list[Content]] = None,
    ):
        self._models = models
        self._model = model
        self._config = config
        self._history: list[Content] = list(history or [])
        self._lock = asyncio.Lock()

    def get_history(self, curated: bool = False) -> list[Content]:
        """Comprehensive history by default; curated=True keeps only valid exchanges."""
        history = extract_curated_history(self._history) if curated else self._history
        return list(history)

    def _record(self, inputs: list[Content], outputs: list[Content]) -> None:
        self._history.extend(inputs)
        valid = [c for c in outputs if _is_valid_content(c)]
        if valid:
            self._history.extend(valid)
        else:
            # Keep the failed exchange in the comprehensive history only.
            self._history.append(Content(role="model", parts=[]))

    async def send_message(self, message: t.ContentListUnion) -> GenerateContentResponse:
        inputs = t.t_contents(message)
        async with self._lock:
            response = await self._models.generate_content(
                self._model, self.get_history(curated=True) + inputs, self._config,
            )
            outputs = []
            if response.candidates and response.candidates[0].content is not None:
                outputs.append(response.candidates[0].content)
            self._record(inputs, outputs)
            return response

    async def send_message_stream(self, message: t.ContentListUnion) -> AsyncIterator[GenerateContentResponse]:
        """Stream the reply. The exchange is recorded when the stream ends or is closed early."""
        inputs = t.t_contents(message)
        async with self._lock:
            history = self.get_history(curated=True)
        parts: list[Part] = []
        stream = self._models.generate_content_stream(self._model, history + inputs, self._config)
        try:
            async for chunk in stream:
                if chunk.candidates and chunk.candidates[0].content is not None:
                    content = chunk.candidates[0].content
                    if _is_valid_content(content):
                        parts.extend(content.parts or [])
                yield chunk
        finally:
            self._record(inputs, [Content(role="model", parts=parts)] if parts else [])
            await stream.aclose()


class Chats:
    def __init__(self, models: Models):
        self._models = models

    def create(self, model: str, config: ConfigArg = None, history: Optional[list[Content]] = None) -> Chat:
        history = [t.t_content(c) if not isinstance(c, Content) else c for c in history or []]
        _validate_history(history)
        return Chat(self._models, model, config, history)
