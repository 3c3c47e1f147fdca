"""Input normalization: flexible caller values into canonical wire types."""

import pytest

from genai_client import ClientConfig, InvalidArgumentError
from genai_client import _transformers as t
from genai_client.types import Content, FunctionResponse, Part, SpeechConfig


@pytest.fixture
def gemini_config():
    return ClientConfig(api_key="k")


@pytest.fixture
def vertex_config():
    return ClientConfig(vertexai=True, project="p", location="l")


class TestModelNames:
    @pytest.mark.parametrize("model, expected", [
        ("gemini-2.0-flash", "models/gemini-2.0-flash"),
        ("models/gemini-2.0-flash", "models/gemini-2.0-flash"),
        ("tunedModels/my-model", "tunedModels/my-model"),
    ])
    def test_gemini(self, gemini_config, model, expected):
        assert t.t_model(gemini_config, model) == expected

    @pytest.mark.parametrize("model, expected", [
        ("gemini-2.0-flash", "projects/p/locations/l/publishers/google/models/gemini-2.0-flash"),
        ("models/gemini-2.0-flash", "projects/p/locations/l/publishers/google/models/gemini-2.0-flash"),
        ("publishers/meta/models/llama", "projects/p/locations/l/publishers/meta/models/llama"),
        ("meta/llama", "projects/p/locations/l/publishers/meta/models/llama"),
        ("projects/x/locations/y/endpoints/1", "projects/x/locations/y/endpoints/1"),
    ])
    def test_vertex(self, vertex_config, model, expected):
        assert t.t_model(vertex_config, model) == expected

    def test_empty_model_rejected(self, gemini_config):
        with pytest.raises(InvalidArgumentError):
            t.t_model(gemini_config, "")

    def test_resource_name(self, gemini_config):
        assert t.t_resource_name(gemini_config, "cachedContents", "abc") == "cachedContents/abc"
        assert t.t_resource_name(gemini_config, "cachedContents", "cachedContents/abc") == "cachedContents/abc"
        with pytest.raises(InvalidArgumentError):
            t.t_resource_name(gemini_config, "files", "")


class TestContents:
    def test_string_becomes_user_turn(self):
        assert t.t_contents("hello") == [Content(role="user", parts=[Part(text="hello")])]

    def test_part_becomes_user_turn(self):
        part = Part.from_uri("gs://bucket/a.png", "image/png")
        assert t.t_contents(part) == [Content(role="user", parts=[part])]

    def test_content_dict_is_validated(self):
        contents = t.t_contents({"role": "model", "parts": [{"text": "a"}]})
        assert contents == [Content(role="model", parts=[Part(text="a")])]

    def test_consecutive_parts_are_grouped(self):
        contents = t.t_contents([
            "a",
            {"text": "b"},
            Content(role="model", parts=[Part(text="c")]),
            "d",
        ])
        assert [c.role for c in contents] == ["user", "model", "user"]
        assert [p.text for p in contents[0].parts] == ["a", "b"]
        assert [p.text for p in contents[2].parts] == ["d"]

    @pytest.mark.parametrize("value", [None, [], ()])
    def test_missing_contents_rejected(self, value):
        with pytest.raises(InvalidArgumentError):
            t.t_contents(value)

    def test_content_without_parts_rejected(self):
        with pytest.raises(InvalidArgumentError):
            t.t_contents([Content(role="user", parts=[])])

    def test_unsupported_part_type_rejected(self):
        with pytest.raises(InvalidArgumentError):
            t.t_contents([42])

    def test_invalid_content_dict_rejected(self):
        with pytest.raises(InvalidArgumentError):
            t.t_content({"role": "user", "parts": "not a list"})

    def test_system_instruction_role(self):
        assert t.t_content("be brief", role="system").role == "system"


class TestOtherTransformers:
    def test_blob_from_dict(self):
        blob = t.t_blob({"data": "AAE=", "mimeType": "audio/pcm"})
        assert blob.mime_type == "audio/pcm"
        assert blob.as_bytes() == b"\x00\x01"

    def test_blob_rejects_other_types(self):
        with pytest.raises(InvalidArgumentError):
            t.t_blob(b"raw bytes")

    def test_function_responses_single_or_list(self):
        response = {"id": "1", "name": "f", "response": {"ok": True}}
        assert t.t_function_responses(response) == t.t_function_responses([response])
        assert t.t_function_responses(response) == [FunctionResponse(id="1", name="f", response={"ok": True})]

    @pytest.mark.parametrize("value", [None, []])
    def test_function_responses_required(self, value):
        with pytest.raises(InvalidArgumentError):
            t.t_function_responses(value)

    def test_tools(self):
        tools = t.t_tools([{"functionDeclarations": [{"name": "lookup", "description": "Find a thing"}]}])
        assert tools[0].function_declarations[0].name == "lookup"
        assert t.t_tools(None) is None

    def test_speech_config_from_voice_name(self):
        config = t.t_speech_config("Kore")
        assert isinstance(config, SpeechConfig)
        assert config.voice_config.prebuilt_voice_config.voice_name == "Kore"
        assert t.t_speech_config(None) is None
