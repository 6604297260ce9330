"""Helpers shared by the CLI commands."""

import json
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.panel import Panel

from candlescope.models import Candle

console = Console()

file_argument = click.argument(
    "path", type=click.Path(dir_okay=False, path_type=Path)
)
format_option = click.option(
    "--format", "fmt",
    type=click.Choice(["csv", "json"]),
    default=None,
    help="Input format (default: from config or file extension).",
)
json_option = click.option(
    "--json", "as_json", is_flag=True, help="Print JSON instead of tables."
)


def get_config() -> dict:
    """Lazily load configuration."""
    from candlescope.config import load_config

    return load_config()


def fail(title: str, message: str) -> NoReturn:
    """Show an error panel and exit with status 1."""
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise click.ClickException(message)


def load_series(path: Path, fmt: Optional[str], config: dict) -> list[Candle]:
    """Load candles, turning loader errors into CLI errors."""
    from candlescope.data.loader import load_candles

    try:
        return load_candles(path, fmt or config["data"].get("format"))
    except FileNotFoundError as e:
        fail("File Not Found", str(e))
    except ValueError as e:
        fail("Invalid Candle Data", str(e))


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_jsonable(v) for v in value]
    return value


def print_json(value: Any) -> None:
    click.echo(json.dumps(to_jsonable(value), indent=2))
