"""
Wire types for the generative AI service.
"""

from genai_client.types.base import WireModel
from genai_client.types.content import (
    Blob,
    Content,
    FileData,
    FunctionCall,
    FunctionDeclaration,
    FunctionResponse,
    GenerateContentConfig,
    GenerationConfig,
    HarmBlockThreshold,
    HarmCategory,
    MediaResolution,
    Modality,
    Part,
    PrebuiltVoiceConfig,
    SafetySetting,
    SpeechConfig,
    Tool,
    UsageMetadata,
    VoiceConfig,
)
from genai_client.types.live import (
    ActivityEnd,
    ActivityStart,
    AudioTranscriptionConfig,
    AutomaticActivityDetection,
    ContextWindowCompressionConfig,
    LiveClientContent,
    LiveClientMessage,
    LiveClientRealtimeInput,
    LiveClientSetup,
    LiveClientToolResponse,
    LiveConnectConfig,
    LiveServerContent,
    LiveServerGoAway,
    LiveServerMessage,
    LiveServerSessionResumptionUpdate,
    LiveServerSetupComplete,
    LiveServerToolCall,
    LiveServerToolCallCancellation,
    RealtimeInputConfig,
    ServerMessageKind,
    SessionResumptionConfig,
    SlidingWindow,
    Transcription,
)
from genai_client.types.resources import (
    CachedContent,
    Candidate,
    ContentEmbedding,
    CountTokensResponse,
    CreateCachedContentConfig,
    CreateTuningJobConfig,
    EmbedContentConfig,
    EmbedContentResponse,
    File,
    GenerateContentResponse,
    Model,
    TuningDataset,
    TuningExample,
    TuningJob,
)

__all__ = [
    "WireModel",
    "Blob",
    "Content",
    "FileData",
    "FunctionCall",
    "FunctionDeclaration",
    "FunctionResponse",
    "GenerateContentConfig",
    "GenerationConfig",
    "HarmBlockThreshold",
    "HarmCategory",
    "MediaResolution",
    "Modality",
    "Part",
    "PrebuiltVoiceConfig",
    "SafetySetting",
    "SpeechConfig",
    "Tool",
    "UsageMetadata",
    "VoiceConfig",
    "ActivityEnd",
    "ActivityStart",
    "AudioTranscriptionConfig",
    "AutomaticActivityDetection",
    "ContextWindowCompressionConfig",
    "LiveClientContent",
    "LiveClientMessage",
    "LiveClientRealtimeInput",
    "LiveClientSetup",
    "LiveClientToolResponse",
    "LiveConnectConfig",
    "LiveServerContent",
    "LiveServerGoAway",
    "LiveServerMessage",
    "LiveServerSessionResumptionUpdate",
    "LiveServerSetupComplete",
    "LiveServerToolCall",
    "LiveServerToolCallCancellation",
    "RealtimeInputConfig",
    "ServerMessageKind",
    "SessionResumptionConfig",
    "SlidingWindow",
    "Transcription",
    "CachedContent",
    "CreateCachedContentConfig",
    "CreateTuningJobConfig",
    "EmbedContentConfig",
    "TuningDataset",
    "TuningExample",
    "Candidate",
    "ContentEmbedding",
    "CountTokensResponse",
    "EmbedContentResponse",
    "File",
    "GenerateContentResponse",
    "Model",
    "TuningJob",
]
