"""
Live API wire envelopes.

Client frames carry exactly one of setup / clientContent / realtimeInput /
toolResponse. Server frames carry exactly one of the fields enumerated by
ServerMessageKind.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from genai_client.types.base import WireModel
from genai_client.types.content import (
    Blob,
    Content,
    FunctionCall,
    FunctionResponse,
    GenerationConfig,
    MediaResolution,
    Modality,
    SpeechConfig,
    Tool,
    UsageMetadata,
    join_inline_data,
    join_text,
)


class ActivityStart(WireModel):
    pass


class ActivityEnd(WireModel):
    pass


class AudioTranscriptionConfig(WireModel):
    pass


class Transcription(WireModel):
    text: Optional[str] = None
    finished: Optional[bool] = None


class SessionResumptionConfig(WireModel):
    """`handle` resumes a previous session; `transparent` asks for lastConsumedClientMessageIndex."""
    handle: Optional[str] = None
    transparent: Optional[bool] = None


class SlidingWindow(WireModel):
    target_tokens: Optional[int] = None


class ContextWindowCompressionConfig(WireModel):
    trigger_tokens: Optional[int] = None
    sliding_window: Optional[SlidingWindow] = None


class AutomaticActivityDetection(WireModel):
    disabled: Optional[bool] = None
    start_of_speech_sensitivity: Optional[str] = None
    end_of_speech_sensitivity: Optional[str] = None
    prefix_padding_ms: Optional[int] = None
    silence_duration_ms: Optional[int] = None


class RealtimeInputConfig(WireModel):
    automatic_activity_detection: Optional[AutomaticActivityDetection] = None
    activity_handling: Optional[str] = None
    turn_coverage: Optional[str] = None


class LiveConnectConfig(WireModel):
    generation_config: Optional[GenerationConfig] = None
    response_modalities: Optional[list[Modality]] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[float] = None
    max_output_tokens: Optional[int] = None
    media_resolution: Optional[MediaResolution] = None
    seed: Optional[int] = None
    # A bare string names a prebuilt voice.
    speech_config: Optional[Union[SpeechConfig, str]] = None
    system_instruction: Optional[Any] = None
    tools: Optional[list[Any]] = None
    session_resumption: Optional[SessionResumptionConfig] = None
    input_audio_transcription: Optional[AudioTranscriptionConfig] = None
    output_audio_transcription: Optional[AudioTranscriptionConfig] = None
    realtime_input_config: Optional[RealtimeInputConfig] = None
    context_window_compression: Optional[ContextWindowCompressionConfig] = None


# LiveConnectConfig fields that fold into setup.generationConfig.
GENERATION_FIELDS = (
    "response_modalities",
    "temperature",
    "top_p",
    "top_k",
    "max_output_tokens",
    "media_resolution",
    "seed",
    "speech_config",
)


class LiveClientSetup(WireModel):
    model: Optional[str] = None
    generation_config: Optional[GenerationConfig] = None
    system_instruction: Optional[Content] = None
    tools: Optional[list[Tool]] = None
    realtime_input_config: Optional[RealtimeInputConfig] = None
    session_resumption: Optional[SessionResumptionConfig] = None
    context_window_compression: Optional[ContextWindowCompressionConfig] = None
    input_audio_transcription: Optional[AudioTranscriptionConfig] = None
    output_audio_transcription: Optional[AudioTranscriptionConfig] = None


class LiveClientContent(WireModel):
    turns: Optional[list[Content]] = None
    turn_complete: Optional[bool] = None


class LiveClientRealtimeInput(WireModel):
    media_chunks: Optional[list[Blob]] = None
    audio: Optional[Blob] = None
    audio_stream_end: Optional[bool] = None
    video: Optional[Blob] = None
    text: Optional[str] = None
    activity_start: Optional[ActivityStart] = None
    activity_end: Optional[ActivityEnd] = None


class LiveClientToolResponse(WireModel):
    function_responses: Optional[list[FunctionResponse]] = None


class LiveClientMessage(WireModel):
    setup: Optional[LiveClientSetup] = None
    client_content: Optional[LiveClientContent] = None
    realtime_input: Optional[LiveClientRealtimeInput] = None
    tool_response: Optional[LiveClientToolResponse] = None


class LiveServerSetupComplete(WireModel):
    session_id: Optional[str] = None


class LiveServerContent(WireModel):
    model_turn: Optional[Content] = None
    turn_complete: Optional[bool] = None
    interrupted: Optional[bool] = None
    generation_complete: Optional[bool] = None
    grounding_metadata: Optional[dict[str, Any]] = None
    input_transcription: Optional[Transcription] = None
    output_transcription: Optional[Transcription] = None


class LiveServerToolCall(WireModel):
    function_calls: Optional[list[FunctionCall]] = None


class LiveServerToolCallCancellation(WireModel):
    ids: Optional[list[str]] = None


class LiveServerGoAway(WireModel):
    """`time_left` is a duration string such as "10s"."""
    time_left: Optional[str] = None


class LiveServerSessionResumptionUpdate(WireModel):
    new_handle: Optional[str] = None
    resumable: Optional[bool] = None
    last_consumed_client_message_index: Optional[int] = None


class ServerMessageKind(str, Enum):
    SETUP_COMPLETE = "setup_complete"
    SERVER_CONTENT = "server_content"
    TOOL_CALL = "tool_call"
    TOOL_CALL_CANCELLATION = "tool_call_cancellation"
    USAGE_METADATA = "usage_metadata"
    GO_AWAY = "go_away"
    SESSION_RESUMPTION_UPDATE = "session_resumption_update"


class LiveServerMessage(WireModel):
    setup_complete: Optional[LiveServerSetupComplete] = None
    server_content: Optional[LiveServerContent] = None
    tool_call: Optional[LiveServerToolCall] = None
    tool_call_cancellation: Optional[LiveServerToolCallCancellation] = None
    usage_metadata: Optional[UsageMetadata] = None
    go_away: Optional[LiveServerGoAway] = None
    session_resumption_update: Optional[LiveServerSessionResumptionUpdate] = None

    def populated_kinds(self) -> list[ServerMessageKind]:
        return [k for k in ServerMessageKind if getattr(self, k.value) is not None]

    @property
    def kind(self) -> Optional[ServerMessageKind]:
        """The populated field, or None for a frame with no recognized field."""
        kinds = self.populated_kinds()
        return kinds[0] if kinds else None

    @property
    def text(self) -> Optional[str]:
        """Concatenated text of the model turn, if any."""
        if self.server_content is None or self.server_content.model_turn is None:
            return None
        return join_text(self.server_content.model_turn.parts)

    @property
    def data(self) -> Optional[bytes]:
        """Concatenated inline data (audio) of the model turn, if any."""
        if self.server_content is None or self.server_content.model_turn is None:
            return None
        return join_inline_data(self.server_content.model_turn.parts)
