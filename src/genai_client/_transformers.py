"""
Normalization of flexible caller input into canonical wire types.

Every "str, object, dict, or list of those" parameter in the public API goes
through one of these functions. They raise InvalidArgumentError on malformed
input, before anything is sent.
"""

from collections.abc import Sequence
from typing import Any, Optional, Union

from pydantic import ValidationError

from genai_client.config import ClientConfig
from genai_client.errors import InvalidArgumentError
from genai_client.types import (
    Blob,
    Content,
    FunctionResponse,
    Part,
    PrebuiltVoiceConfig,
    SpeechConfig,
    Tool,
    VoiceConfig,
)

PartUnion = Union[str, Part, dict[str, Any]]
ContentUnion = Union[str, Part, Content, dict[str, Any]]
ContentListUnion = Union[ContentUnion, Sequence[ContentUnion]]

_CONTENT_KEYS = {"role", "parts"}


def _validate(model: Any, value: dict[str, Any], what: str) -> Any:
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid {what}: {e}") from e


def t_model(config: ClientConfig, model: str) -> str:
    """Expand a short model id into the backend's resource name."""
    if not model:
        raise InvalidArgumentError("model is required")
    if not config.vertexai:
        if model.startswith(("models/", "tunedModels/")):
            return model
        return f"models/{model}"
    if model.startswith("projects/"):
        return model
    prefix = config.resource_prefix()
    if model.startswith("publishers/"):
        return prefix + model
    if model.startswith("models/"):
        return f"{prefix}publishers/google/{model}"
    if "/" in model:
        publisher, name = model.split("/", 1)
        return f"{prefix}publishers/{publisher}/models/{name}"
    return f"{prefix}publishers/google/models/{model}"


def t_resource_name(config: ClientConfig, collection: str, name: str) -> str:
    """`abc` -> `<collection>/abc`; already qualified names pass through."""
    if not name:
        raise InvalidArgumentError(f"{collection} name is required")
    if name.startswith(f"{collection}/") or name.startswith("projects/"):
        return name
    return f"{collection}/{name}"


def _is_content_like(value: Any) -> bool:
    return isinstance(value, Content) or (isinstance(value, dict) and bool(_CONTENT_KEYS & value.keys()))


def t_part(value: PartUnion) -> Part:
    if isinstance(value, Part):
        return value
    if isinstance(value, str):
        return Part(text=value)
    if isinstance(value, dict):
        return _validate(Part, value, "part")
    raise InvalidArgumentError(f"Unsupported part type: {type(value).__name__}")


def _check_parts(content: Content) -> Content:
    if not content.parts:
        raise InvalidArgumentError("content has no parts")
    return content


def t_content(value: ContentUnion, role: str = "user") -> Content:
    if isinstance(value, Content):
        return _check_parts(value)
    if _is_content_like(value):
        return _check_parts(_validate(Content, value, "content"))
    return Content(role=role, parts=[t_part(value)])


def t_contents(value: ContentListUnion) -> list[Content]:
    """Normalize to an ordered list of Content.

    A string, Part or part dict becomes one user turn. In a list, consecutive
    part-like items are grouped into a single user turn; Content items are
    kept as they are.
    """
    if value is None:
        raise InvalidArgumentError("contents are required")
    if isinstance(value, (str, Part, Content, dict)):
        return [t_content(value)]
    if not isinstance(value, Sequence) or len(value) == 0:
        raise InvalidArgumentError("contents are required")

    result: list[Content] = []
    pending_parts: list[Part] = []
    for item in value:
        if _is_content_like(item):
            if pending_parts:
                result.append(Content(role="user", parts=pending_parts))
                pending_parts = []
            result.append(t_content(item))
        else:
            pending_parts.append(t_part(item))
    if pending_parts:
        result.append(Content(role="user", parts=pending_parts))
    return result


def t_blob(value: Union[Blob, dict[str, Any]]) -> Blob:
    if isinstance(value, Blob):
        return value
    if isinstance(value, dict):
        return _validate(Blob, value, "blob")
    raise InvalidArgumentError(f"Unsupported blob type: {type(value).__name__}")


def t_function_responses(
    value: Union[FunctionResponse, dict[str, Any], Sequence[Union[FunctionResponse, dict[str, Any]]]],
) -> list[FunctionResponse]:
    if value is None:
        raise InvalidArgumentError("function_responses is required")
    items = [value] if isinstance(value, (FunctionResponse, dict)) else list(value)
    if not items:
        raise InvalidArgumentError("function_responses is required")
    responses = []
    for item in items:
        if isinstance(item, FunctionResponse):
            responses.append(item)
        elif isinstance(item, dict):
            responses.append(_validate(FunctionResponse, item, "function response"))
        else:
            raise InvalidArgumentError(f"Unsupported function response type: {type(item).__name__}")
    return responses


def t_tools(tools: Optional[Sequence[Union[Tool, dict[str, Any]]]]) -> Optional[list[Tool]]:
    if tools is None:
        return None
    return [t if isinstance(t, Tool) else _validate(Tool, t, "tool") for t in tools]


def t_speech_config(value: Union[str, SpeechConfig, dict[str, Any], None]) -> Optional[SpeechConfig]:
    """A bare string is taken as a prebuilt voice name."""
    if value is None or isinstance(value, SpeechConfig):
        return value
    if isinstance(value, str):
        return SpeechConfig(voice_config=VoiceConfig(prebuilt_voice_config=PrebuiltVoiceConfig(voice_name=value)))
    return _validate(SpeechConfig, value, "speech config")
