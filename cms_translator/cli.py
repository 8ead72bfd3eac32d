"""Command-line interface for exporting and importing entry translations."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from . import TranslatorError
from .contentful_client import ContentfulClient
from .project_model import parse_import_payload, read_entry_ids
from .settings import SETTINGS_FILE, TOKEN_ENV_VAR, Settings, get_access_token
from .translation_engine import TranslationEngine

app = typer.Typer(
    name="contentful-translator",
    help="Export translatable strings from Contentful entries and import translations back",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    settings_path: Path = typer.Option(
        SETTINGS_FILE, "--settings", "-s", help="Path to the JSON settings file",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    ctx.obj = {"settings_path": str(settings_path), "verbose": verbose}


def _load_settings(ctx: typer.Context) -> Settings:
    state = ctx.obj or {}
    settings = Settings.load(state.get("settings_path", SETTINGS_FILE))
    level = "DEBUG" if state.get("verbose") else settings.log_level
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def _make_client(settings: Settings) -> ContentfulClient:
    token = get_access_token()
    if not token:
        console.print(f"[red]Error:[/red] {TOKEN_ENV_VAR} is not set")
        raise typer.Exit(1)
    return ContentfulClient(token, base_url=settings.base_url, timeout=settings.timeout)


def _run_engine(engine: TranslationEngine, description: str, func, *args, **kwargs):
    """Run an engine pass behind a batch progress bar."""
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total} batches"),
        console=console,
    ) as progress:
        task = progress.add_task(description, total=None)
        engine.progress = lambda done, total: progress.update(task, completed=done, total=total)
        try:
            return func(*args, **kwargs)
        finally:
            engine.progress = None


@app.command()
def spaces(ctx: typer.Context):
    """List spaces accessible with the management token."""
    settings = _load_settings(ctx)
    client = _make_client(settings)
    try:
        items = client.list_spaces()
    except TranslatorError as e:
        console.print(f"[red]✗[/red] Failed to fetch spaces: {e}")
        raise typer.Exit(1)

    table = Table(title=f"Spaces ({len(items)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for item in items:
        table.add_row(item["id"], item["name"])
    console.print(table)


@app.command()
def environments(ctx: typer.Context, space: str = typer.Argument(..., help="Space ID")):
    """List environments (with aliases) of a space."""
    settings = _load_settings(ctx)
    client = _make_client(settings)
    try:
        items = client.list_environments(space)
    except TranslatorError as e:
        console.print(f"[red]✗[/red] Failed to fetch environments: {e}")
        raise typer.Exit(1)

    table = Table(title=f"Environments in {space}")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for item in items:
        table.add_row(item["id"], item["name"])
    console.print(table)


@app.command()
def locales(
    ctx: typer.Context,
    space: str = typer.Argument(..., help="Space ID"),
    environment: str = typer.Argument(..., help="Environment ID"),
):
    """List locales of an environment."""
    settings = _load_settings(ctx)
    client = _make_client(settings)
    try:
        items = client.list_locales(space, environment)
    except TranslatorError as e:
        console.print(f"[red]✗[/red] Failed to fetch locales: {e}")
        raise typer.Exit(1)

    table = Table(title=f"Locales in {space}/{environment}")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Default", justify="center")
    for item in items:
        table.add_row(item["code"], item["name"], "✓" if item["default"] else "")
    console.print(table)


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    space: str = typer.Argument(..., help="Space ID"),
    environment: str = typer.Argument(..., help="Environment ID"),
    ids_file: Optional[Path] = typer.Option(
        None, "--ids", "-i", help="Text file with one entry ID per line",
    ),
    locale: Optional[str] = typer.Option(
        None, "--locale", "-l", help="Locale to read content from",
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory for the export file",
    ),
):
    """Export translatable strings to a JSON dictionary file."""
    settings = _load_settings(ctx)
    client = _make_client(settings)
    engine = TranslationEngine(client, settings)
    try:
        entry_ids = read_entry_ids(str(ids_file)) if ids_file else None
        path = _run_engine(
            engine, "Exporting", engine.export_strings,
            space, environment,
            entry_ids=entry_ids,
            locale=locale,
            output_dir=str(output_dir) if output_dir else None,
        )
    except TranslatorError as e:
        console.print(f"[red]✗[/red] Export failed: {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Export completed successfully: {path}")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    space: str = typer.Argument(..., help="Space ID"),
    environment: str = typer.Argument(..., help="Environment ID"),
    translations_file: Path = typer.Argument(..., help="JSON file of translations"),
    locale: Optional[str] = typer.Option(
        None, "--locale", "-l", help="Locale to write translations to",
    ),
):
    """Import a translation dictionary into a target locale."""
    settings = _load_settings(ctx)
    locale = (locale or "").strip() or settings.target_locale
    try:
        text = translations_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]✗[/red] Could not read {translations_file}: {e}")
        raise typer.Exit(1)

    client = _make_client(settings)
    engine = TranslationEngine(client, settings)
    try:
        raw_translations, entry_ids = parse_import_payload(text)
        summary = _run_engine(
            engine, f"Importing into {locale}", engine.import_strings,
            space, environment, raw_translations,
            locale=locale,
            entry_ids=entry_ids,
        )
    except TranslatorError as e:
        console.print(f"[red]✗[/red] Import failed: {e}")
        raise typer.Exit(1)

    table = Table(title=f"Import completed successfully for locale {locale}")
    table.add_column("Entries processed", justify="right")
    table.add_column("Entries updated", justify="right")
    table.add_column("Replacements", justify="right")
    table.add_row(str(summary.entries_processed), str(summary.entries_updated),
                  str(summary.replacements))
    console.print(table)


if __name__ == "__main__":
    app()
