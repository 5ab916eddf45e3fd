"""Command-line interface for resultobject.

Inspect the message catalogs and try templates without writing code:

    resultobject render not_found --token type=Order --token id=42 --locale fr
    resultobject catalog --catalog validator --locale de
    resultobject format "Total: {amount:N2}" --token amount=1234.5
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from resultobject.config import load_settings
from resultobject.exceptions import ResultObjectError
from resultobject.i18n.formatting import format_template
from resultobject.i18n.locale import NEUTRAL_LOCALE, get_locale, normalize_locale, with_locale
from resultobject.message import Message
from resultobject.resources import CATALOGS, get_catalog
from resultobject.types import MessageKind

app = typer.Typer(
    name="resultobject",
    help="Inspect localized result messages and templates",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="YAML or JSON configuration file"),
    ] = None,
) -> None:
    """Load settings before running a command."""
    if config is not None:
        try:
            load_settings(config)
        except ResultObjectError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)


def parse_tokens(tokens: list[str] | None) -> dict[str, Any]:
    """Parse ``name=value`` pairs; values are read as YAML scalars."""
    parsed: dict[str, Any] = {}
    for item in tokens or []:
        name, sep, raw = item.partition("=")
        if not sep or not name.strip():
            typer.echo(f"Error: Token must look like name=value: {item!r}", err=True)
            raise typer.Exit(1)
        try:
            parsed[name.strip()] = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            parsed[name.strip()] = raw
    return parsed


def _resolve_catalog(name: str):
    try:
        return get_catalog(name)
    except KeyError:
        typer.echo(
            f"Error: Unknown catalog '{name}'. Available: {', '.join(sorted(CATALOGS))}",
            err=True,
        )
        raise typer.Exit(1)


@app.command(name="render")
def render_cmd(
    key: Annotated[str, typer.Argument(help="Resource key, e.g. not_found")],
    catalog: Annotated[
        str,
        typer.Option("--catalog", help="Catalog holding the key (core, validator)"),
    ] = "core",
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Locale to render in"),
    ] = None,
    token: Annotated[
        Optional[list[str]],
        typer.Option("--token", "-t", help="Token as name=value (repeatable)"),
    ] = None,
    kind: Annotated[
        MessageKind,
        typer.Option("--kind", "-k", help="Message kind"),
    ] = MessageKind.INFORMATION,
) -> None:
    """Render a catalog message as JSON."""
    resource = _resolve_catalog(catalog)
    tokens = parse_tokens(token)

    message = Message.create(kind, resource, key, locale=locale, tokens=tokens or None)
    payload = {
        "type": message.kind.value,
        "code": message.code,
        "languageCode": message.language_code,
        "template": message.template,
        "content": message.content,
        "invariantContent": message.invariant_content,
    }
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


@app.command(name="catalog")
def catalog_cmd(
    catalog: Annotated[
        str,
        typer.Option("--catalog", help="Catalog to list (core, validator)"),
    ] = "core",
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Locale to list templates for"),
    ] = None,
) -> None:
    """List catalog keys with their template for a locale."""
    resource = _resolve_catalog(catalog)

    with with_locale(locale):
        active = get_locale()
        table = Table(
            title=f"{resource.name} messages ({active})",
            show_header=True,
            header_style="bold magenta",
        )
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("From")
        table.add_column("Template")

        try:
            requested = normalize_locale(active)
        except ValueError:
            requested = NEUTRAL_LOCALE

        for key in resource.keys(active):
            template, found = resource.resolve(key, active)
            origin = found or "neutral"
            if found != requested:
                origin = f"[yellow]{origin}[/yellow]"
            table.add_row(key, origin, template or "")

    console.print(table)


@app.command(name="format")
def format_cmd(
    template: Annotated[str, typer.Argument(help="Template with {name} placeholders")],
    token: Annotated[
        Optional[list[str]],
        typer.Option("--token", "-t", help="Token as name=value (repeatable)"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Fail when a placeholder has no token"),
    ] = False,
) -> None:
    """Interpolate tokens into a template."""
    tokens = parse_tokens(token)
    try:
        typer.echo(format_template(template, tokens, strict=strict or None))
    except ResultObjectError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
