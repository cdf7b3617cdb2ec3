"""
CLI Main - Typer-based command-line interface.

Usage:
    docagent extract path/to/receipt.pdf
    docagent extract invoice.png --provider gemini --output invoice.json
    docagent list
    docagent mcp
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn
from rich.table import Table

from docagent.config import Settings, get_settings
from docagent.domains.extraction import (
    AIProvider,
    DocumentExtractor,
    ExtractedDocument,
    ExtractionConfig,
    LogEvent,
    PromptEvent,
    ResponseEvent,
    parse_provider,
)

app = typer.Typer(
    name="docagent",
    help="DocAgent - Extract structured data from receipts, invoices and statements",
    add_completion=False,
)
console = Console()


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for every command."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    _configure_logging(level, console)


def _configure_logging(level: str | int, target: Console) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=target, show_path=False)],
        force=True,
    )


class StreamStatus:
    """Renders extraction stream events into a progress line."""

    def __init__(self, progress: Progress, task: TaskID) -> None:
        self._progress = progress
        self._task = task
        self.last_prompt: str | None = None
        self.response_chars = 0

    def __call__(self, event: LogEvent | PromptEvent | ResponseEvent) -> None:
        if isinstance(event, LogEvent):
            if event.level != "debug":
                self._update(event.message)
        elif isinstance(event, PromptEvent):
            if event.content.startswith(("OCR", "Running OCR")):
                self._update(event.content)
            else:
                self.last_prompt = event.content
        else:
            self.response_chars += len(event.content)
            self._update(f"Receiving response... {self.response_chars} chars")

    def _update(self, description: str) -> None:
        self._progress.update(self._task, description=description)


def _build_extractor() -> DocumentExtractor:
    return DocumentExtractor()


def _open_repository(settings: Settings):
    from docagent.adapters.sqlite import DocumentRepository

    return DocumentRepository(settings.db_path)


@app.command()
def extract(
    file_path: Path = typer.Argument(..., help="Path to PDF or image file"),
    provider: AIProvider | None = typer.Option(None, "--provider", "-p", help="Model backend"),
    model: str | None = typer.Option(None, "--model", "-m", help="Model name override"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not save to the database"),
) -> None:
    """Extract structured data from a document."""
    if not file_path.exists():
        console.print(f"[red]Error:[/red] File not found: {file_path}")
        raise typer.Exit(1)

    asyncio.run(_extract_async(file_path, provider, model, output, dry_run))


def _build_config(settings: Settings, provider: AIProvider | None, model: str | None) -> ExtractionConfig:
    selected = provider or parse_provider(settings.ai_provider)
    overrides: dict[str, Any] = {"ai_provider": selected}
    if selected is AIProvider.GEMINI:
        overrides["gemini_model"] = model
    else:
        overrides["ollama_model"] = model
    return ExtractionConfig.from_settings(settings, **overrides)


async def _ensure_ollama(config: ExtractionConfig) -> None:
    """Check the daemon answers and the model is present, pulling it if not."""
    from docagent.adapters.ollama import OllamaClient

    async with OllamaClient(base_url=config.ollama_url) as client:
        if not await client.is_running():
            console.print(f"[red]Error:[/red] Ollama is not running at {config.ollama_url}")
            console.print("[dim]Start it with: ollama serve[/dim]")
            raise typer.Exit(1)

        if await client.model_exists(config.ollama_model):
            return

        console.print(f"[yellow]Model {config.ollama_model} not found, pulling...[/yellow]")
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
        ) as progress:
            task = progress.add_task(f"Pulling {config.ollama_model}", total=None)

            def on_progress(update: dict) -> None:
                total = update.get("total")
                progress.update(
                    task,
                    description=update.get("status", "pulling"),
                    total=total,
                    completed=update.get("completed", 0) if total else 0,
                )

            await client.pull_model(config.ollama_model, on_progress)

        console.print(f"[green]Pulled {config.ollama_model}[/green]")


def _summary_table(document: ExtractedDocument) -> Table:
    table = Table(title="Extraction Summary")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Type", document.type.value)
    table.add_row("Vendor", document.vendor or "-")
    table.add_row("Amount", f"{document.amount:.2f}" if document.amount is not None else "-")
    table.add_row("Date", document.date or document.date_raw or "-")
    table.add_row("Line Items", str(document.item_count))
    table.add_row("ID", document.id)
    return table


async def _extract_async(
    file_path: Path,
    provider: AIProvider | None,
    model: str | None,
    output: Path | None,
    dry_run: bool,
) -> None:
    """Async extraction implementation."""
    settings = get_settings()
    try:
        config = _build_config(settings, provider, model)
        if config.ai_provider is AIProvider.OLLAMA:
            await _ensure_ollama(config)
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    extractor = _build_extractor()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Initializing...", total=None)
        status = StreamStatus(progress, task)

        try:
            document = await extractor.extract(file_path, config, on_stream=status)
        except Exception as e:
            progress.stop()
            console.print(f"[red]Error:[/red] {e}")
            if status.last_prompt:
                console.print("[dim]Last prompt:[/dim]")
                console.print(status.last_prompt, markup=False)
            raise typer.Exit(1)

    console.print("\n[green]Extraction Complete[/green]\n")
    console.print(_summary_table(document))

    if output:
        output.write_text(json.dumps(document.to_record(), indent=2))
        console.print(f"\n[green]Saved to:[/green] {output}")

    if dry_run:
        console.print("[dim]Dry run, not saved to database[/dim]")
        return

    repo = _open_repository(settings)
    try:
        await repo.initialize()
        await repo.save_document(document, file_path)
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await repo.close()

    console.print(f"[green]Stored:[/green] {document.id}")


@app.command("list")
def list_documents() -> None:
    """List stored documents."""
    asyncio.run(_list_async())


async def _list_async() -> None:
    settings = get_settings()
    repo = _open_repository(settings)
    try:
        await repo.initialize()
        rows = await repo.list_documents()
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    finally:
        await repo.close()

    if not rows:
        console.print("[yellow]No documents stored yet[/yellow]")
        return

    table = Table(title=f"Documents ({len(rows)})")
    table.add_column("ID", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Type")
    table.add_column("Vendor")
    table.add_column("Amount", justify="right")
    table.add_column("Date")
    table.add_column("Status")

    for row in rows:
        data = row["data"]
        amount = data.get("amount")
        table.add_row(
            row["id"][:8],
            data.get("filename", "-"),
            data.get("type", "other"),
            data.get("vendor") or "-",
            f"{amount:.2f}" if amount is not None else "-",
            data.get("date") or data.get("dateRaw") or "-",
            row["status"],
        )

    console.print(table)


@app.command("mcp")
def mcp_server() -> None:
    """Start the MCP server on stdio."""
    from docagent.interfaces.mcp import serve

    # stdout carries the protocol
    _configure_logging(logging.getLogger().level, Console(stderr=True))
    asyncio.run(serve())


@app.command()
def version() -> None:
    """Show version information."""
    from docagent import __version__

    console.print(f"DocAgent v{__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
