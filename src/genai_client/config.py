"""
Client configuration: backend selection, credentials, base URLs.

Two backends are supported. The Gemini API is keyed by an API key; Vertex AI
is addressed by cloud project and location. The choice is made once, when a
client is constructed.
"""

import os
import threading
from typing import Any, Optional

from pydantic import BaseModel, Field

from genai_client.errors import InvalidArgumentError

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/"
VERTEX_BASE_URL_TEMPLATE = "https://{location}-aiplatform.googleapis.com/"
GEMINI_API_VERSION = "v1beta"
VERTEX_API_VERSION = "v1beta1"
DEFAULT_TIMEOUT_S = 30.0

_TRUTHY = {"1", "true", "yes", "on"}

# Process-wide base URL overrides. Last writer wins; read once per client.
_default_base_urls: dict[str, Optional[str]] = {"gemini": None, "vertex": None}
_default_base_urls_lock = threading.Lock()


def set_default_base_urls(gemini_url: Optional[str] = None, vertex_url: Optional[str] = None) -> None:
    """Override the default base URLs for clients constructed after this call.

    Clients that already exist keep the URL they resolved at construction.
    An explicit HttpOptions.base_url still takes precedence.
    """
    with _default_base_urls_lock:
        _default_base_urls["gemini"] = gemini_url
        _default_base_urls["vertex"] = vertex_url


def get_default_base_urls() -> dict[str, Optional[str]]:
    with _default_base_urls_lock:
        return dict(_default_base_urls)


class HttpOptions(BaseModel):
    base_url: Optional[str] = None
    api_version: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: Optional[float] = None


class ClientConfig(BaseModel):
    vertexai: bool = False
    api_key: Optional[str] = None
    project: Optional[str] = None
    location: Optional[str] = None
    access_token: Optional[str] = None
    http_options: HttpOptions = Field(default_factory=HttpOptions)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Fill unset fields from GOOGLE_* environment variables, then validate."""
        values = {k: v for k, v in overrides.items() if v is not None}
        if "vertexai" not in values:
            values["vertexai"] = os.environ.get("GOOGLE_GENAI_USE_VERTEXAI", "").lower() in _TRUTHY
        if "api_key" not in values:
            env_key = os.environ.get("GOOGLE_API_KEY") or os.environ.get("GEMINI_API_KEY")
            if env_key:
                values["api_key"] = env_key
        if "project" not in values and os.environ.get("GOOGLE_CLOUD_PROJECT"):
            values["project"] = os.environ["GOOGLE_CLOUD_PROJECT"]
        if "location" not in values and os.environ.get("GOOGLE_CLOUD_LOCATION"):
            values["location"] = os.environ["GOOGLE_CLOUD_LOCATION"]
        if isinstance(values.get("http_options"), dict):
            values["http_options"] = HttpOptions(**values["http_options"])
        config = cls(**values)
        config.validate_backend()
        return config

    def validate_backend(self) -> None:
        if self.vertexai:
            if not self.http_options.base_url and not (self.project and self.location):
                raise InvalidArgumentError("Vertex AI requires project and location (or an explicit base_url).")
        elif not self.api_key:
            raise InvalidArgumentError("An API key is required for the Gemini API. Set GOOGLE_API_KEY or pass api_key.")

    @property
    def api_version(self) -> str:
        if self.http_options.api_version:
            return self.http_options.api_version
        return VERTEX_API_VERSION if self.vertexai else GEMINI_API_VERSION

    @property
    def timeout(self) -> float:
        return self.http_options.timeout if self.http_options.timeout is not None else DEFAULT_TIMEOUT_S

    def resolve_base_url(self) -> str:
        """Explicit base_url, else the process-wide default, else the backend default."""
        if self.http_options.base_url:
            url = self.http_options.base_url
        else:
            defaults = get_default_base_urls()
            if self.vertexai:
                url = defaults["vertex"] or VERTEX_BASE_URL_TEMPLATE.format(location=self.location)
            else:
                url = defaults["gemini"] or GEMINI_BASE_URL
        return url if url.endswith("/") else url + "/"

    def resource_prefix(self) -> str:
        """Path prefix for Vertex AI resources; empty for the Gemini API."""
        if self.vertexai and self.project and self.location:
            return f"projects/{self.project}/locations/{self.location}/"
        return ""

    def auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.vertexai:
            if self.access_token:
                headers["Authorization"] = f"Bearer {self.access_token}"
            if self.project:
                headers["x-goog-user-project"] = self.project
        elif self.api_key:
            headers["x-goog-api-key"] = self.api_key
        return headers

    def live_url(self, base_url: str) -> str:
        """WebSocket URL of the bidirectional generate endpoint."""
        ws_base = base_url.replace("https://", "wss://", 1).replace("http://", "ws://", 1)
        version = self.api_version
        if self.vertexai:
            return f"{ws_base}ws/google.cloud.aiplatform.{version}.LlmBidiService/BidiGenerateContent"
        return (
            f"{ws_base}ws/google.ai.generativelanguage.{version}"
            f".GenerativeService.BidiGenerateContent?key={self.api_key}"
        )
