"""
Content, tool and generation config models shared by the REST and live APIs.
"""

from __future__ import annotations

import base64
from enum import Enum
from typing import Any, Optional

from genai_client.types.base import WireModel


class HarmCategory(str, Enum):
    HARM_CATEGORY_UNSPECIFIED = "HARM_CATEGORY_UNSPECIFIED"
    HARM_CATEGORY_HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    HARM_CATEGORY_DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"
    HARM_CATEGORY_HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HARM_CATEGORY_SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    HARM_CATEGORY_CIVIC_INTEGRITY = "HARM_CATEGORY_CIVIC_INTEGRITY"


class HarmBlockThreshold(str, Enum):
    HARM_BLOCK_THRESHOLD_UNSPECIFIED = "HARM_BLOCK_THRESHOLD_UNSPECIFIED"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_NONE = "BLOCK_NONE"
    OFF = "OFF"


class Modality(str, Enum):
    MODALITY_UNSPECIFIED = "MODALITY_UNSPECIFIED"
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    AUDIO = "AUDIO"


class MediaResolution(str, Enum):
    MEDIA_RESOLUTION_UNSPECIFIED = "MEDIA_RESOLUTION_UNSPECIFIED"
    MEDIA_RESOLUTION_LOW = "MEDIA_RESOLUTION_LOW"
    MEDIA_RESOLUTION_MEDIUM = "MEDIA_RESOLUTION_MEDIUM"
    MEDIA_RESOLUTION_HIGH = "MEDIA_RESOLUTION_HIGH"


class Blob(WireModel):
    """Inline media. `data` is base64 text, as it travels in JSON."""
    data: Optional[str] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> Blob:
        return cls(data=base64.b64encode(data).decode("ascii"), mime_type=mime_type)

    def as_bytes(self) -> bytes:
        return base64.b64decode(self.data) if self.data else b""


class FileData(WireModel):
    file_uri: Optional[str] = None
    mime_type: Optional[str] = None


class FunctionCall(WireModel):
    id: Optional[str] = None
    name: Optional[str] = None
    args: Optional[dict[str, Any]] = None


class FunctionResponse(WireModel):
    """Result of a client-executed function. `id` must echo the FunctionCall id."""
    id: Optional[str] = None
    name: Optional[str] = None
    response: Optional[dict[str, Any]] = None


class Part(WireModel):
    """One piece of a Content. Exactly one payload field should be set."""
    text: Optional[str] = None
    thought: Optional[bool] = None
    inline_data: Optional[Blob] = None
    file_data: Optional[FileData] = None
    function_call: Optional[FunctionCall] = None
    function_response: Optional[FunctionResponse] = None
    executable_code: Optional[dict[str, Any]] = None
    code_execution_result: Optional[dict[str, Any]] = None

    @classmethod
    def from_text(cls, text: str) -> Part:
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> Part:
        return cls(inline_data=Blob.from_bytes(data, mime_type))

    @classmethod
    def from_uri(cls, file_uri: str, mime_type: str) -> Part:
        return cls(file_data=FileData(file_uri=file_uri, mime_type=mime_type))

    @classmethod
    def from_function_response(cls, name: str, response: dict[str, Any]) -> Part:
        return cls(function_response=FunctionResponse(name=name, response=response))


class Content(WireModel):
    role: Optional[str] = None
    parts: Optional[list[Part]] = None


class FunctionDeclaration(WireModel):
    name: Optional[str] = None
    description: Optional[str] = None
    parameters: Optional[dict[str, Any]] = None
    response: Optional[dict[str, Any]] = None


class Tool(WireModel):
    function_declarations: Optional[list[FunctionDeclaration]] = None
    google_search: Optional[dict[str, Any]] = None
    google_search_retrieval: Optional[dict[str, Any]] = None
    code_execution: Optional[dict[str, Any]] = None
    retrieval: Optional[dict[str, Any]] = None


class PrebuiltVoiceConfig(WireModel):
    voice_name: Optional[str] = None


class VoiceConfig(WireModel):
    prebuilt_voice_config: Optional[PrebuiltVoiceConfig] = None


class SpeechConfig(WireModel):
    voice_config: Optional[VoiceConfig] = None
    language_code: Optional[str] = None


class SafetySetting(WireModel):
    category: Optional[HarmCategory] = None
    threshold: Optional[HarmBlockThreshold] = None


class GenerationConfig(WireModel):
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[float] = None
    candidate_count: Optional[int] = None
    max_output_tokens: Optional[int] = None
    stop_sequences: Optional[list[str]] = None
    presence_penalty: Optional[float] = None
    frequency_penalty: Optional[float] = None
    seed: Optional[int] = None
    response_mime_type: Optional[str] = None
    response_schema: Optional[dict[str, Any]] = None
    response_modalities: Optional[list[Modality]] = None
    media_resolution: Optional[MediaResolution] = None
    speech_config: Optional[SpeechConfig] = None


# Fields of GenerateContentConfig that sit at the request's top level instead
# of inside generationConfig.
REQUEST_LEVEL_FIELDS = ("system_instruction", "safety_settings", "tools", "tool_config", "cached_content", "labels")


class GenerateContentConfig(GenerationConfig):
    system_instruction: Optional[Any] = None
    safety_settings: Optional[list[SafetySetting]] = None
    tools: Optional[list[Tool]] = None
    tool_config: Optional[dict[str, Any]] = None
    cached_content: Optional[str] = None
    labels: Optional[dict[str, str]] = None


class UsageMetadata(WireModel):
    prompt_token_count: Optional[int] = None
    cached_content_token_count: Optional[int] = None
    candidates_token_count: Optional[int] = None
    response_token_count: Optional[int] = None
    tool_use_prompt_token_count: Optional[int] = None
    thoughts_token_count: Optional[int] = None
    total_token_count: Optional[int] = None


def join_text(parts: Optional[list[Part]]) -> Optional[str]:
    """Concatenate the text parts, skipping thoughts. None when there is no text at all."""
    texts = [p.text for p in parts or [] if p.text is not None and not p.thought]
    if not texts:
        return None
    return "".join(texts)


def join_inline_data(parts: Optional[list[Part]]) -> Optional[bytes]:
    """Concatenate the decoded inline_data payloads. None when there is none."""
    chunks = [p.inline_data.as_bytes() for p in parts or [] if p.inline_data is not None]
    if not chunks:
        return None
    return b"".join(chunks)
