"""CLI: genai config set|show|clear"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _load_config() -> dict:
    from genai_client.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from genai_client.cli.main import _save_config
    _save_config(cfg)


def _mask(secret: str) -> str:
    return secret[:4] + "…" + secret[-4:] if len(secret) > 8 else "****"


@click.group()
def config():
    """Saved client configuration."""


@config.command("set")
@click.option("--api-key", default=None, help="Gemini API key")
@click.option("--vertexai/--gemini", "vertexai", default=None, help="Backend to use")
@click.option("--project", default=None, help="Cloud project (Vertex AI)")
@click.option("--location", default=None, help="Cloud location (Vertex AI)")
@click.option("--base-url", default=None, help="Override the API base URL")
def config_set(api_key: Optional[str], vertexai: Optional[bool], project: Optional[str],
               location: Optional[str], base_url: Optional[str]):
    """Save credentials and backend selection."""
    cfg = _load_config()
    updates = {
        "api_key": api_key,
        "vertexai": vertexai,
        "project": project,
        "location": location,
        "base_url": base_url,
    }
    cfg.update({k: v for k, v in updates.items() if v is not None})
    _save_config(cfg)
    console.print("[green]Configuration saved.[/green]")


@config.command("show")
def config_show():
    """Show the saved configuration."""
    cfg = _load_config()
    if not cfg:
        console.print("[yellow]No saved configuration. Run `genai config set`.[/yellow]")
        return
    backend = "Vertex AI" if cfg.get("vertexai") else "Gemini API"
    console.print(f"Backend: [bold]{backend}[/bold]")
    if cfg.get("api_key"):
        console.print(f"API key: {_mask(cfg['api_key'])}")
    for key in ("project", "location", "base_url"):
        if cfg.get(key):
            console.print(f"{key}: {cfg[key]}")


@config.command("clear")
def config_clear():
    """Remove saved configuration."""
    _save_config({})
    console.print("[green]Configuration cleared.[/green]")
