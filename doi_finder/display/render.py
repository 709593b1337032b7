"""
Rich rendering of the result/error surface and the session history.

Everything here is a pure function of the view or entries it is given; the
console is passed in so tests can record output.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from doi_finder.models import HistoryEntry, ResolutionResult, SurfaceKind
from doi_finder.orchestration.surface import SurfaceView

EXAMPLE_CITATION = (
    "Martinez, E. M., Carr, D. T., Mullan, P. C., Rogers, L. E., Howlett-Holley, W. L., "
    "McGehee, C. A., ... & Godambe, S. A. (2021). Improving equity of care for patients "
    "with limited English proficiency using quality improvement methodology. "
    "Pediatric Quality & Safety, 6(6), e486."
)

_REFERENCE_PREVIEW_CHARS = 70


def _excerpt(text: str, limit: int = _REFERENCE_PREVIEW_CHARS) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= limit else flat[: limit - 3] + "..."


def format_result(result: ResolutionResult) -> Text:
    """Body of the result panel. DOI, title and sources are appended as plain text."""
    body = Text()
    body.append("DOI: ", style="yellow")
    if result.found:
        body.append(result.doi, style="bold green")
        body.append("\nLink: ", style="yellow")
        body.append(result.doi_url, style=Style(link=result.doi_url))
    else:
        body.append("No DOI found", style="bold")
    if result.title:
        body.append("\nTitle: ", style="yellow")
        body.append(result.title)
    if result.sources:
        body.append("\n\nSources:", style="yellow")
        for idx, source in enumerate(result.sources, start=1):
            body.append(f"\n  {idx}. {source.title}  ")
            body.append(source.uri, style="dim")
    return body


def render_view(console: Console, view: SurfaceView, *, show_raw: bool = False) -> None:
    """Print exactly one thing for the view: nothing, a status line, a result or an error."""
    if view.kind is SurfaceKind.EMPTY:
        return
    if view.kind is SurfaceKind.LOADING:
        console.print("[cyan]Searching and analysing...[/cyan]")
        return
    if view.kind is SurfaceKind.ERROR:
        console.print(
            Panel(escape(view.error or ""), title="[bold]Error[/bold]", border_style="red")
        )
        return

    result = view.result
    border = "green" if result.found else "yellow"
    console.print(Panel(format_result(result), title="[bold]Result[/bold]", border_style=border))
    if show_raw:
        console.print(Panel(escape(result.raw_text), title="Model answer", border_style="dim"))


def render_history(console: Console, entries: Sequence[HistoryEntry]) -> None:
    if not entries:
        console.print("[dim]No searches yet this session.[/dim]")
        return
    table = Table(title="History")
    table.add_column("#", style="cyan", no_wrap=True)
    table.add_column("Time", no_wrap=True)
    table.add_column("DOI", style="green")
    table.add_column("Reference", style="white")
    for idx, entry in enumerate(entries, start=1):
        when = datetime.fromtimestamp(entry.timestamp / 1000).strftime("%H:%M:%S")
        table.add_row(
            str(idx),
            when,
            escape(entry.doi) if entry.doi else "[dim]none[/dim]",
            escape(_excerpt(entry.reference)),
        )
    console.print(table)
