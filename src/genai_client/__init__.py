"""
genai-client: Python client for the generative AI service.

REST (httpx) for generation, embeddings, caches, files and tuning jobs;
WebSocket (websockets) for bidirectional live sessions.
"""

from genai_client.client import AsyncGenAI, GenAI
from genai_client.config import ClientConfig, HttpOptions, set_default_base_urls
from genai_client.errors import (
    APIError,
    ConnectionError,
    GenAIError,
    InvalidArgumentError,
    InvalidStateError,
)
from genai_client.live import AsyncSession, Live, LiveCallbacks
from genai_client.pagers import ListConfig, PagedItem, Pager

__version__ = "0.1.0"
__all__ = [
    "AsyncGenAI",
    "GenAI",
    "ClientConfig",
    "HttpOptions",
    "set_default_base_urls",
    "GenAIError",
    "APIError",
    "ConnectionError",
    "InvalidArgumentError",
    "InvalidStateError",
    "AsyncSession",
    "Live",
    "LiveCallbacks",
    "ListConfig",
    "PagedItem",
    "Pager",
]
