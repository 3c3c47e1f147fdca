"""
genai CLI: the `genai` command.

Commands:
  genai config set|show|clear   Saved credentials and backend selection
  genai generate <prompt>       One-shot (or streamed) generation
  genai live <prompt>           One turn over a live session
  genai models list             Paged listings
  genai files list
  genai caches list
  genai tunings list
"""

import asyncio
import json
from pathlib import Path

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install genai-client[cli]")

from genai_client.client import AsyncGenAI
from genai_client.errors import InvalidArgumentError

console = Console()
CONFIG_FILE = Path.home() / ".genai" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client() -> AsyncGenAI:
    """Saved config first; anything unset falls back to GOOGLE_* environment variables."""
    cfg = _load_config()
    http_options = {"base_url": cfg["base_url"]} if cfg.get("base_url") else None
    try:
        return AsyncGenAI(
            api_key=cfg.get("api_key"),
            vertexai=cfg.get("vertexai"),
            project=cfg.get("project"),
            location=cfg.get("location"),
            http_options=http_options,
        )
    except InvalidArgumentError as e:
        console.print(f"[red]{e}[/red]")
        console.print("[dim]Run `genai config set --api-key ...` or set GOOGLE_API_KEY.[/dim]")
        raise SystemExit(1)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
def main():
    """genai CLI: talk to the generative AI service from the shell."""


# Register subcommands from separate modules
from genai_client.cli.config import config  # noqa: E402
from genai_client.cli.generate import generate_cmd, live_cmd  # noqa: E402
from genai_client.cli.resources import caches, files, models, tunings  # noqa: E402

main.add_command(config)
main.add_command(generate_cmd)
main.add_command(live_cmd)
main.add_command(models)
main.add_command(files)
main.add_command(caches)
main.add_command(tunings)


if __name__ == "__main__":
    main()
