"""CLI: genai generate, genai live"""

import asyncio
import json

import click
from rich.console import Console

from genai_client.live import LiveCallbacks
from genai_client.transport.websocket import CloseEvent
from genai_client.types import LiveServerMessage

console = Console()

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_LIVE_MODEL = "gemini-2.0-flash-live-001"
CLOSE_TIMEOUT_S = 2.0


def _get_client():
    from genai_client.cli.main import _get_client
    return _get_client()


def _run(coro):
    from genai_client.cli.main import _run
    return _run(coro)


@click.command("generate")
@click.argument("prompt")
@click.option("-m", "--model", default=DEFAULT_MODEL, show_default=True)
@click.option("--stream", is_flag=True, help="Print chunks as they arrive")
@click.option("--json-output", "--json", is_flag=True)
def generate_cmd(prompt: str, model: str, stream: bool, json_output: bool):
    """Generate a response to PROMPT."""

    async def _generate():
        client = _get_client()
        try:
            if stream:
                async for chunk in client.models.generate_content_stream(model, prompt):
                    if json_output:
                        click.echo(json.dumps(chunk.to_wire()))
                    elif chunk.text:
                        click.echo(chunk.text, nl=False)
                if not json_output:
                    click.echo()
                return
            with console.status("Generating..."):
                response = await client.models.generate_content(model, prompt)
            if json_output:
                click.echo(json.dumps(response.to_wire(), indent=2))
            else:
                click.echo(response.text or "")
        finally:
            await client.close()

    _run(_generate())


@click.command("live")
@click.argument("prompt")
@click.option("-m", "--model", default=DEFAULT_LIVE_MODEL, show_default=True)
def live_cmd(prompt: str, model: str):
    """Send PROMPT as one turn over a live session and print the text reply."""

    async def _live():
        client = _get_client()
        done = asyncio.Event()
        closed = asyncio.Event()

        def on_message(message: LiveServerMessage) -> None:
            if message.text:
                click.echo(message.text, nl=False)
            content = message.server_content
            if content is not None and (content.turn_complete or content.interrupted):
                done.set()

        def on_error(error: BaseException) -> None:
            console.print(f"\n[red]Live error: {error}[/red]")

        def on_close(_event: CloseEvent) -> None:
            closed.set()
            done.set()

        callbacks = LiveCallbacks(on_message=on_message, on_error=on_error, on_close=on_close)
        try:
            session = await client.live.connect(model, callbacks, config={"response_modalities": ["TEXT"]})
            try:
                session.send_client_content(prompt)
                await done.wait()
                click.echo()
            finally:
                session.close()
                # close() only queues the close frame; let the handshake finish.
                try:
                    await asyncio.wait_for(closed.wait(), timeout=CLOSE_TIMEOUT_S)
                except asyncio.TimeoutError:
                    pass
        finally:
            await client.close()

    _run(_live())
