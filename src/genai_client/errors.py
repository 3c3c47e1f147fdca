"""
genai-client error types.
"""

from typing import Any, Optional


class GenAIError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class InvalidArgumentError(GenAIError):
    """Malformed input rejected before anything is sent."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("invalid_argument", message, details)


class InvalidStateError(GenAIError):
    """Operation not allowed in the object's current state (closed session, last page)."""

    def __init__(self, message: str):
        super().__init__("invalid_state", message)


class APIError(GenAIError):
    def __init__(self, status_code: int, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("http_error", message, details)
        self.status_code = status_code

    @classmethod
    def from_response(cls, status_code: int, body: Any, text: str = "") -> "APIError":
        """Build from a decoded error body: {"error": {"code", "message", "status"}}."""
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error = body["error"]
            message = error.get("message") or text[:200]
            return cls(status_code, f"HTTP {status_code}: {message}", error)
        return cls(status_code, f"HTTP {status_code}: {text[:200]}")


class ConnectionError(GenAIError):
    def __init__(self, message: str):
        super().__init__("connection_error", message)
