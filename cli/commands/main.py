"""Main CLI interface using Typer."""

import asyncio
import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn, TimeElapsedColumn
from rich.table import Table

from feedtrans.core.events import EventChannel, StatusEvent, StatsEvent, ProgressEvent, CompleteEvent, ErrorEvent
from feedtrans.core.exceptions import FeedTransError
from feedtrans.core.models import FeedTranslationJob, FieldKind
from feedtrans.core.pipeline import FeedTranslationPipeline, PipelineConfig
from feedtrans.extraction.feed_parser import FeedParser, deduplicate_items, count_products
from feedtrans.translation.glossary.industries import list_industries
from feedtrans.utils.config_loader import load_config
from feedtrans.utils.logger import setup_logger

app = typer.Typer(
    name="feedtrans",
    help="feedtrans: Product Feed Translation with LLMs",
    add_completion=False
)

console = Console()


@app.command()
def translate(
    input_file: Path = typer.Argument(..., help="Input XML feed"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Output file path"),
    source_lang: str = typer.Option("bg", "-s", "--source", help="Source language code"),
    target_lang: str = typer.Option("en", "-t", "--target", help="Target language code"),
    industry: str = typer.Option("luxury-watches-jewellery", "-i", "--industry", help="Industry profile id (see 'feedtrans industries')"),
    field: Optional[List[str]] = typer.Option(None, "-f", "--field", help="Field type to translate; repeat for several (default: standard set)"),
    context: Optional[str] = typer.Option(None, "--context", help="Prompt context for the 'custom' industry"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="Anthropic API key (default: ANTHROPIC_API_KEY)"),
    model: Optional[str] = typer.Option(None, "-m", "--model", help="Claude model name"),
    batch_size: Optional[int] = typer.Option(None, "--batch-size", help="Texts per API call"),
    config_file: Optional[Path] = typer.Option(None, "--config", help="YAML configuration file"),
    debug_mode: bool = typer.Option(False, "--debug/--no-debug", help="Enable debug logging"),
):
    """Translate an XML product feed."""

    if not input_file.exists():
        console.print(f"[red]Error: Input file not found: {input_file}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = input_file.with_name(f"{input_file.stem}_{target_lang}{input_file.suffix}")

    load_dotenv()
    try:
        config = load_config(str(config_file) if config_file else None)
        pipeline_config = PipelineConfig.from_dict(config)
    except (FeedTransError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if model:
        pipeline_config.model_name = model
    if batch_size:
        pipeline_config.batch_size = batch_size
    if debug_mode:
        pipeline_config.log_level = "DEBUG"

    setup_logger(level=pipeline_config.log_level, log_file=config.get("logging", {}).get("file"))

    job = FeedTranslationJob(
        document=input_file.read_text(encoding="utf-8"),
        source_lang=source_lang,
        target_lang=target_lang,
        industry_id=industry,
        api_key=api_key or config.get("api_keys", {}).get("anthropic") or os.getenv("ANTHROPIC_API_KEY", ""),
        custom_context=context,
        fields=field or None,
    )

    console.print(f"[bold blue]feedtrans Translation[/bold blue]")
    console.print(f"Input: {input_file}")
    console.print(f"Output: {output}")
    console.print(f"Translation: {source_lang} → {target_lang}")
    console.print(f"Industry: {industry}\n")

    try:
        pipeline = FeedTranslationPipeline(pipeline_config)
    except FeedTransError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    terminal = asyncio.run(_run_with_progress(pipeline, job))

    if isinstance(terminal, CompleteEvent):
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(terminal.translated_document, encoding="utf-8")
        console.print(f"\n[bold green]{terminal.message}[/bold green]")
        console.print(f"Output: {output}")
        return

    message = terminal.message if isinstance(terminal, ErrorEvent) else "Translation ended without a result"
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


async def _run_with_progress(pipeline: FeedTranslationPipeline, job: FeedTranslationJob):
    """Drive the pipeline and render its events; returns the terminal event."""
    channel = EventChannel()
    terminal = None

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=30),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False
    ) as progress:
        task = progress.add_task("[cyan]Starting...", total=None)
        runner = asyncio.create_task(pipeline.run(job, channel))

        async for event in channel:
            if isinstance(event, StatusEvent):
                progress.update(task, description=f"[cyan]{event.message}")
            elif isinstance(event, StatsEvent):
                console.print(
                    f"Products: {event.total_products}  "
                    f"Texts: {event.total_items}  Unique: {event.unique_items}"
                )
            elif isinstance(event, ProgressEvent):
                progress.update(
                    task,
                    total=event.total,
                    completed=event.completed,
                    description=f"[cyan]Translating {event.completed}/{event.total}"
                )
            elif isinstance(event, (CompleteEvent, ErrorEvent)):
                terminal = event
                style = "green" if isinstance(event, CompleteEvent) else "red"
                progress.update(task, description=f"[{style}]{'✓' if style == 'green' else '✗'} Done")

        await runner

    return terminal


@app.command()
def scan(
    input_file: Path = typer.Argument(..., help="Input XML feed"),
    source_lang: str = typer.Option("bg", "-s", "--source", help="Source language code"),
    field: Optional[List[str]] = typer.Option(None, "-f", "--field", help="Field type to include; repeat for several"),
    detailed: bool = typer.Option(False, "--detailed", "-d", help="List every unique text"),
):
    """Show what would be translated, without calling the API."""

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        parser = FeedParser(source_lang, field or None)
    except FeedTransError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    document = input_file.read_text(encoding="utf-8")
    items = parser.parse(document)
    unique = deduplicate_items(items)

    console.print(f"\n[bold]Feed Information[/bold]")
    console.print(f"File: {input_file}")
    console.print(f"Product records: {parser.count_products(document)}")
    console.print(f"Products with translatable text: {count_products(items)}")
    console.print(f"Texts: {len(items)}  Unique: {len(unique)}")

    if detailed and unique:
        table = Table(title="Unique Texts")
        table.add_column("#", justify="right")
        table.add_column("Fields", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Text")
        for i, entry in enumerate(unique, 1):
            preview = entry.text if len(entry.text) <= 60 else entry.text[:57] + "..."
            table.add_row(str(i), ", ".join(entry.field_ids), str(entry.count), preview)
        console.print(table)


@app.command()
def fields():
    """List translatable field types."""

    table = Table(title="Field Types")
    table.add_column("ID", style="cyan")
    table.add_column("Label")
    table.add_column("Group")
    table.add_column("Default", justify="center")

    for kind in FieldKind:
        table.add_row(kind.value, kind.label, kind.group, "✓" if kind.default_on else "")

    console.print(table)


@app.command()
def industries(detailed: bool = typer.Option(False, "--detailed", "-d", help="Show example terms")):
    """List available industry profiles."""

    table = Table(title="Industry Profiles")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Glossary", justify="right")
    if detailed:
        table.add_column("Examples")

    for profile in list_industries():
        row = [profile.id, f"{profile.icon} {profile.name}".strip(), str(len(profile.glossary))]
        if detailed:
            row.append(", ".join(profile.example_terms))
        table.add_row(*row)

    console.print(table)


def cli():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
