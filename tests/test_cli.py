"""CLI commands with the client pointed at an httpx mock backend."""

import asyncio
import json

import httpx
import pytest
from click.testing import CliRunner

from genai_client import AsyncGenAI
from genai_client.cli import main as cli_main
from genai_client.transport.websocket import CloseEvent


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(cli_main, "CONFIG_FILE", path)
    return path


@pytest.fixture
def cli_backend(backend, ws_factory, monkeypatch):
    def make_client():
        return AsyncGenAI(
            api_key="test-key", vertexai=False, transport=httpx.MockTransport(backend), websocket_factory=ws_factory,
        )

    monkeypatch.setattr(cli_main, "_get_client", make_client)
    return backend


def invoke(*args):
    return CliRunner().invoke(cli_main.main, list(args))


class TestConfig:
    def test_set_show_clear(self, config_file):
        result = invoke("config", "set", "--api-key", "abcd1234efgh5678")
        assert result.exit_code == 0
        assert json.loads(config_file.read_text()) == {"api_key": "abcd1234efgh5678"}

        result = invoke("config", "show")
        assert "Gemini API" in result.output
        assert "abcd" in result.output
        assert "abcd1234efgh5678" not in result.output

        invoke("config", "clear")
        assert json.loads(config_file.read_text()) == {}

    def test_set_merges_with_saved(self, config_file):
        invoke("config", "set", "--api-key", "k")
        invoke("config", "set", "--vertexai", "--project", "proj", "--location", "us-central1")

        assert json.loads(config_file.read_text()) == {
            "api_key": "k",
            "vertexai": True,
            "project": "proj",
            "location": "us-central1",
        }

    def test_show_without_config(self, config_file):
        result = invoke("config", "show")
        assert "No saved configuration" in result.output

    def test_missing_credentials_exit(self, config_file, monkeypatch):
        for var in ("GOOGLE_API_KEY", "GEMINI_API_KEY", "GOOGLE_GENAI_USE_VERTEXAI"):
            monkeypatch.delenv(var, raising=False)

        result = invoke("generate", "hi")

        assert result.exit_code == 1
        assert "API key" in result.output


class TestGenerate:
    def test_generate(self, cli_backend):
        cli_backend.add("POST", "/v1beta/models/gemini-2.0-flash:generateContent", {
            "candidates": [{"content": {"role": "model", "parts": [{"text": "Hello there"}]}}],
        })

        result = invoke("generate", "hi")

        assert result.exit_code == 0, result.output
        assert "Hello there" in result.output

    def test_generate_json(self, cli_backend):
        cli_backend.add("POST", "/v1beta/models/other:generateContent", {
            "candidates": [{"content": {"role": "model", "parts": [{"text": "x"}]}}],
        })

        result = invoke("generate", "hi", "--model", "other", "--json")

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["candidates"][0]["content"]["parts"] == [{"text": "x"}]

    def test_generate_stream(self, cli_backend):
        body = "".join(
            f"data: {json.dumps({'candidates': [{'content': {'parts': [{'text': t}]}}]})}\n\n" for t in ("a", "b")
        )
        cli_backend.add("POST", "/v1beta/models/gemini-2.0-flash:streamGenerateContent",
                        httpx.Response(200, content=body.encode()))

        result = invoke("generate", "hi", "--stream")

        assert result.exit_code == 0, result.output
        assert result.output == "ab\n"


def answer_turns(transport):
    """Acknowledge setup, then answer each client turn with "pong"."""
    transport.deliver({"setupComplete": {}})
    record = transport.send

    def send(message):
        record(message)
        if "clientContent" in json.loads(message):
            transport.deliver({"serverContent": {"modelTurn": {"parts": [{"text": "pong"}]}}})
            transport.deliver({"serverContent": {"turnComplete": True}})
    transport.send = send


class TestLive:
    def test_live_prints_reply(self, cli_backend, ws_factory):
        ws_factory.on_setup = answer_turns

        result = invoke("live", "ping")

        assert result.exit_code == 0, result.output
        assert "pong" in result.output
        sent = ws_factory.last.sent
        assert sent[0]["setup"]["generationConfig"] == {"responseModalities": ["TEXT"]}
        assert sent[1] == {
            "clientContent": {"turns": [{"role": "user", "parts": [{"text": "ping"}]}], "turnComplete": True},
        }
        assert ws_factory.last.closed

    def test_live_waits_for_close_handshake(self, cli_backend, ws_factory, monkeypatch):
        events = []
        make_client = cli_main._get_client

        def get_client():
            client = make_client()
            close = client.close

            async def close_client():
                events.append("client closed")
                await close()
            client.close = close_client
            return client

        def answer_then_close_slowly(transport):
            answer_turns(transport)

            def report_close():
                events.append("socket closed")
                transport.on_close(CloseEvent(code=1000, reason=""))

            def close():
                transport.closed = True
                asyncio.get_running_loop().call_later(0.05, report_close)
            transport.close = close

        monkeypatch.setattr(cli_main, "_get_client", get_client)
        ws_factory.on_setup = answer_then_close_slowly

        result = invoke("live", "ping")

        assert result.exit_code == 0, result.output
        assert events == ["socket closed", "client closed"]


class TestResources:
    def test_models_list_json(self, cli_backend):
        cli_backend.add("GET", "/v1beta/models", [
            {"models": [{"name": "models/a"}, {"name": "models/b"}], "nextPageToken": "t"},
            {"models": [{"name": "models/c"}]},
        ])

        result = invoke("models", "list", "--limit", "3", "--json")

        assert result.exit_code == 0, result.output
        assert [m["name"] for m in json.loads(result.output)] == ["models/a", "models/b", "models/c"]

    def test_limit_stops_paging(self, cli_backend):
        cli_backend.add("GET", "/v1beta/models", {"models": [{"name": "models/a"}, {"name": "models/b"}], "nextPageToken": "t"})

        result = invoke("models", "list", "--limit", "1", "--json")

        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)) == 1
        assert len(cli_backend.requests) == 1
        assert cli_backend.requests[0].url.params["pageSize"] == "1"

    def test_tuned_models(self, cli_backend):
        cli_backend.add("GET", "/v1beta/tunedModels", {"tunedModels": [{"name": "tunedModels/t"}]})

        result = invoke("models", "list", "--tuned", "--json")

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)[0]["name"] == "tunedModels/t"

    def test_caches_table(self, cli_backend):
        cli_backend.add("GET", "/v1beta/cachedContents", {"cachedContents": [{"name": "cachedContents/c1", "model": "models/m"}]})

        result = invoke("caches", "list")

        assert result.exit_code == 0, result.output
        assert "Cached contents" in result.output
        assert "cachedContents/c1" in result.output

    def test_files_and_tunings(self, cli_backend):
        cli_backend.add("GET", "/v1beta/files", {"files": [{"name": "files/f"}]})
        cli_backend.add("GET", "/v1beta/tunedModels", {"tunedModels": []})

        files = invoke("files", "list", "--json")
        tunings = invoke("tunings", "list", "--json")

        assert json.loads(files.output) == [{"name": "files/f"}]
        assert json.loads(tunings.output) == []
