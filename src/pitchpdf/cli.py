"""
pitchpdf Command Line Interface (CLI).

Terminal front-end for the proposal pipeline, built with `typer` and `rich`.

Features
--------
- **render**: Compose, paginate and render a fields file to a standalone HTML
  document; prints a per-page summary and optionally writes the stage trace.
- **inspect**: Show where every block landed (order, type, height, page, y).
- **validate**: Run the structural checks on a serialized document JSON.

Usage
-----
    $ pitchpdf render samples/proposal.json -o proposal.html --trace
    $ pitchpdf inspect samples/proposal.json --page-height 800
    $ pitchpdf validate artifacts/document.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pitchpdf.core.result import Result, err, ok
from pitchpdf.core.tracing import TraceWriter
from pitchpdf.engine.validation import validate_document
from pitchpdf.pipelines.proposal import PipelineResult, run_pipeline

load_dotenv()

app = typer.Typer(
    help="pitchpdf: turn proposal form fields into paginated, print-ready HTML.",
    rich_markup_mode="markdown",
)
console = Console()

T = TypeVar("T")


# --------------------------------------------------------------------------- #
# Helpers: I/O
# --------------------------------------------------------------------------- #


def _read_text(path: Path) -> Result[str, str]:
    try:
        return ok(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        return err(str(exc))


def _parse_object(text: str) -> Result[dict[str, Any], str]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        return err(f"is not valid JSON: {exc}")
    if not isinstance(data, dict):
        return err(f"must contain a JSON object, got {type(data).__name__}")
    return ok(data)


def _load_json_object(path: Path) -> Result[dict[str, Any], str]:
    """Read ``path`` as a JSON object; any other shape is an error."""
    return (
        _read_text(path)
        .map_err(lambda e: f"Cannot read {path}: {e}")
        .flat_map(lambda text: _parse_object(text).map_err(lambda e: f"{path} {e}"))
    )


def _unwrap_or_exit(result: Result[T, str]) -> T:
    if result.is_err():
        console.print(f"[bold red]Error:[/bold red] {result.unwrap_err()}")
        raise typer.Exit(code=1)
    return result.unwrap()


# --------------------------------------------------------------------------- #
# Helpers: Rendering
# --------------------------------------------------------------------------- #


def _page_table(result: PipelineResult) -> Table:
    table = Table(title="Pages", show_lines=False)
    table.add_column("Page", justify="right")
    table.add_column("Blocks")
    table.add_column("Used", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Overflow", justify="center")
    for page in result["pagination"].pages:
        table.add_row(
            str(page.number),
            ", ".join(b.type for b in page.blocks),
            f"{page.used_height:.0f}",
            f"{page.height:.0f}",
            "[red]yes[/red]" if page.overflow else "",
        )
    return table


def _block_table(result: PipelineResult) -> Table:
    table = Table(title="Blocks")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Id", style="dim")
    table.add_column("Height", justify="right")
    table.add_column("Page", justify="right")
    table.add_column("Y", justify="right")
    for block in result["document"].blocks:
        height = block.flow.height if block.flow else 0
        table.add_row(
            str(block.order),
            block.type,
            block.id,
            f"{height:.0f}",
            str(block.page_number or "-"),
            f"{block.page_y:.0f}" if block.page_y is not None else "-",
        )
    return table


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def render(
    fields_file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Proposal fields JSON."),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Where to write the HTML (default: <input>.html)."),
    ] = None,
    page_height: Annotated[
        float | None,
        typer.Option("--page-height", min=1, help="Override the page height in pixels."),
    ] = None,
    trace: Annotated[
        bool,
        typer.Option("--trace/--no-trace", help="Write one JSON snapshot per stage."),
    ] = False,
    trace_dir: Annotated[
        Path | None,
        typer.Option("--trace-dir", help="Directory for trace files (default: settings)."),
    ] = None,
) -> None:
    """Render a fields JSON file to a standalone HTML document."""
    fields = _unwrap_or_exit(_load_json_object(fields_file))
    result = run_pipeline(fields, page_height=page_height)

    target = output or fields_file.with_suffix(".html")
    try:
        target.write_text(result["html"], encoding="utf-8")
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot write {target}: {exc}")
        raise typer.Exit(code=1) from exc

    console.print(_page_table(result))
    pagination = result["pagination"]
    if pagination.overflow_pages:
        pages = ", ".join(str(n) for n in pagination.overflow_pages)
        console.print(f"[yellow]Content overflows page(s) {pages}.[/yellow]")

    if trace:
        paths = TraceWriter(trace_dir).write_all(result["trace"].snapshots())
        console.print(f"[dim]Wrote {len(paths)} trace file(s) to {paths[0].parent}[/dim]")

    console.print(
        Panel(
            f"{pagination.page_count} page(s) saved to [link=file://{target}]{target}[/link]",
            title="Rendered",
            border_style="green",
        )
    )


@app.command()  # type: ignore[misc]
def inspect(
    fields_file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Proposal fields JSON."),
    ],
    page_height: Annotated[
        float | None,
        typer.Option("--page-height", min=1, help="Override the page height in pixels."),
    ] = None,
) -> None:
    """Show block heights and page placements without writing any file."""
    result = run_pipeline(
        _unwrap_or_exit(_load_json_object(fields_file)), page_height=page_height
    )
    meta = result["document"].meta
    console.rule(f"[bold]{meta.project_title}[/bold]")
    console.print(_block_table(result))
    console.print(
        f"{meta.block_count} block(s), {meta.word_count} word(s), "
        f"{result['pagination'].page_count} page(s)"
    )


@app.command()  # type: ignore[misc]
def validate(
    document_file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Document JSON."),
    ],
) -> None:
    """Check a serialized document JSON for structural problems."""
    report = _unwrap_or_exit(_load_json_object(document_file).map(validate_document))

    for message in report.errors:
        console.print(f"[red]error[/red]   {message}")
    for message in report.warnings:
        console.print(f"[yellow]warning[/yellow] {message}")

    if not report.valid:
        console.print(f"[bold red]Invalid:[/bold red] {len(report.errors)} error(s)")
        raise typer.Exit(code=1)
    console.print("[bold green]Valid[/bold green]")


if __name__ == "__main__":
    app()
