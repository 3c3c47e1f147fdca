"""
REST response models: generation results and the listable resources.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, Field

from genai_client.types.base import WireModel
from genai_client.types.content import Content, FunctionCall, UsageMetadata, join_text


class Candidate(WireModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None
    finish_message: Optional[str] = None
    index: Optional[int] = None
    safety_ratings: Optional[list[dict[str, Any]]] = None
    citation_metadata: Optional[dict[str, Any]] = None
    grounding_metadata: Optional[dict[str, Any]] = None
    avg_logprobs: Optional[float] = None


class GenerateContentResponse(WireModel):
    candidates: Optional[list[Candidate]] = None
    prompt_feedback: Optional[dict[str, Any]] = None
    usage_metadata: Optional[UsageMetadata] = None
    model_version: Optional[str] = None
    response_id: Optional[str] = None

    @property
    def text(self) -> Optional[str]:
        """Concatenated text of the first candidate."""
        if not self.candidates or self.candidates[0].content is None:
            return None
        return join_text(self.candidates[0].content.parts)

    @property
    def function_calls(self) -> Optional[list[FunctionCall]]:
        if not self.candidates or self.candidates[0].content is None:
            return None
        calls = [p.function_call for p in self.candidates[0].content.parts or [] if p.function_call]
        return calls or None


class ContentEmbedding(WireModel):
    values: Optional[list[float]] = None
    statistics: Optional[dict[str, Any]] = None


class EmbedContentResponse(WireModel):
    embeddings: Optional[list[ContentEmbedding]] = None
    metadata: Optional[dict[str, Any]] = None


class CountTokensResponse(WireModel):
    total_tokens: Optional[int] = None
    cached_content_token_count: Optional[int] = None


class Model(WireModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    version: Optional[str] = None
    endpoints: Optional[list[dict[str, Any]]] = None
    labels: Optional[dict[str, str]] = None
    tuned_model_info: Optional[dict[str, Any]] = None
    input_token_limit: Optional[int] = None
    output_token_limit: Optional[int] = None
    # The Gemini API calls this supportedGenerationMethods.
    supported_actions: Optional[list[str]] = Field(
        default=None,
        validation_alias=AliasChoices("supportedActions", "supportedGenerationMethods", "supported_actions"),
        serialization_alias="supportedActions",
    )


class File(WireModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None
    expiration_time: Optional[str] = None
    sha256_hash: Optional[str] = None
    uri: Optional[str] = None
    download_uri: Optional[str] = None
    state: Optional[str] = None
    source: Optional[str] = None
    error: Optional[dict[str, Any]] = None


class CachedContent(WireModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    model: Optional[str] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None
    expire_time: Optional[str] = None
    usage_metadata: Optional[dict[str, Any]] = None


class TuningJob(WireModel):
    name: Optional[str] = None
    state: Optional[str] = None
    create_time: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    update_time: Optional[str] = None
    error: Optional[dict[str, Any]] = None
    description: Optional[str] = None
    base_model: Optional[str] = None
    tuned_model: Optional[dict[str, Any]] = None
    tuned_model_display_name: Optional[str] = None
    supervised_tuning_spec: Optional[dict[str, Any]] = None
    tuning_data_stats: Optional[dict[str, Any]] = None
    experiment: Optional[str] = None


class EmbedContentConfig(WireModel):
    task_type: Optional[str] = None
    title: Optional[str] = None
    output_dimensionality: Optional[int] = None
    mime_type: Optional[str] = None
    auto_truncate: Optional[bool] = None


class CreateCachedContentConfig(WireModel):
    """`ttl` is a duration string ("3600s"); `expire_time` an RFC 3339 timestamp."""
    contents: Optional[Any] = None
    system_instruction: Optional[Any] = None
    tools: Optional[list[Any]] = None
    tool_config: Optional[dict[str, Any]] = None
    ttl: Optional[str] = None
    expire_time: Optional[str] = None
    display_name: Optional[str] = None


class TuningExample(WireModel):
    text_input: Optional[str] = None
    output: Optional[str] = None


class TuningDataset(WireModel):
    """Cloud Storage JSONL on Vertex AI, inline examples on the Gemini API."""
    gcs_uri: Optional[str] = None
    examples: Optional[list[TuningExample]] = None


class CreateTuningJobConfig(WireModel):
    tuned_model_display_name: Optional[str] = None
    description: Optional[str] = None
    validation_dataset_uri: Optional[str] = None
    epoch_count: Optional[int] = None
    learning_rate_multiplier: Optional[float] = None
    learning_rate: Optional[float] = None
    batch_size: Optional[int] = None
    adapter_size: Optional[str] = None
