"""CLI: genai models|files|caches|tunings list"""

import json
from typing import Any, Callable

import click
from rich.console import Console
from rich.table import Table

from genai_client.pagers import Pager

console = Console()


def _get_client():
    from genai_client.cli.main import _get_client
    return _get_client()


def _run(coro):
    from genai_client.cli.main import _run
    return _run(coro)


async def _take(pager: Pager, limit: int) -> list:
    items = []
    async for item in pager:
        items.append(item)
        if len(items) >= limit:
            break
    return items


def _list_and_render(
    title: str,
    fetch: Callable[[Any], Any],
    columns: list[tuple[str, str]],
    limit: int,
    json_output: bool,
) -> None:
    """Fetch up to `limit` items page by page and print a table (or JSON lines)."""

    async def _list():
        client = _get_client()
        try:
            pager = await fetch(client)
            items = await _take(pager, limit)
        finally:
            await client.close()
        if json_output:
            click.echo(json.dumps([item.to_wire() for item in items], indent=2))
            return
        table = Table(title=f"{title} ({len(items)} shown)")
        for header, _ in columns:
            table.add_column(header, style="bold" if header == "Name" else None)
        for item in items:
            table.add_row(*[str(getattr(item, attr) or "") for _, attr in columns])
        console.print(table)

    _run(_list())


def _page_size(limit: int) -> int:
    return min(limit, 100)


@click.group()
def models():
    """Models."""


@models.command("list")
@click.option("--limit", default=20, type=int)
@click.option("--base/--tuned", "query_base", default=True, help="Base models or your tuned models")
@click.option("--json-output", "--json", is_flag=True)
def models_list(limit: int, query_base: bool, json_output: bool):
    """List models."""
    _list_and_render(
        "Models",
        lambda c: c.models.list({"page_size": _page_size(limit), "query_base": query_base}),
        [("Name", "name"), ("Display name", "display_name"), ("Input limit", "input_token_limit")],
        limit,
        json_output,
    )


@click.group()
def files():
    """Uploaded files."""


@files.command("list")
@click.option("--limit", default=20, type=int)
@click.option("--json-output", "--json", is_flag=True)
def files_list(limit: int, json_output: bool):
    """List files."""
    _list_and_render(
        "Files",
        lambda c: c.files.list({"page_size": _page_size(limit)}),
        [("Name", "name"), ("MIME type", "mime_type"), ("State", "state"), ("Expires", "expiration_time")],
        limit,
        json_output,
    )


@click.group()
def caches():
    """Cached contents."""


@caches.command("list")
@click.option("--limit", default=20, type=int)
@click.option("--json-output", "--json", is_flag=True)
def caches_list(limit: int, json_output: bool):
    """List cached contents."""
    _list_and_render(
        "Cached contents",
        lambda c: c.caches.list({"page_size": _page_size(limit)}),
        [("Name", "name"), ("Model", "model"), ("Expires", "expire_time")],
        limit,
        json_output,
    )


@click.group()
def tunings():
    """Tuning jobs."""


@tunings.command("list")
@click.option("--limit", default=20, type=int)
@click.option("--json-output", "--json", is_flag=True)
def tunings_list(limit: int, json_output: bool):
    """List tuning jobs."""
    _list_and_render(
        "Tuning jobs",
        lambda c: c.tunings.list({"page_size": _page_size(limit)}),
        [("Name", "name"), ("State", "state"), ("Base model", "base_model")],
        limit,
        json_output,
    )
