"""
CLI Output Formatting

Rich text formatting for verdicts, match results and review tables.
"""

from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.markup import escape

from ..evaluation.grader import Verdict
from ..evaluation.matcher import MatchResult

console = Console()


def format_table(data: List[Dict[str, Any]], title: str = "Results", headers: Optional[List[str]] = None) -> Table:
    """
    Format rows as a Rich table.

    Args:
        data: List of dictionaries with row data
        title: Table title
        headers: Column headers (keys of the first row if not provided)

    Returns:
        Rich Table object
    """
    if not data:
        table = Table(title=title)
        table.add_column("Message", style="dim")
        table.add_row("No data available")
        return table

    if headers is None:
        headers = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold blue")
    for header in headers:
        table.add_column(header, style="white", justify="left")

    for row in data:
        table.add_row(*[escape(str(row.get(header, "N/A"))) for header in headers])

    return table


def _mark(is_correct: Optional[bool]) -> str:
    if is_correct is None:
        return "[yellow]MANUAL[/yellow]"
    return "[green]CORRECT[/green]" if is_correct else "[red]INCORRECT[/red]"


def format_verdict(verdict: Verdict) -> str:
    """One-line verdict summary."""
    text = f"{_mark(verdict.is_correct)} ({verdict.points_awarded} pts)"
    if verdict.explanation:
        text += f" [dim]{escape(verdict.explanation)}[/dim]"
    return text


def format_match_result(result: MatchResult) -> str:
    """One-line match summary with the deciding stage."""
    return (
        f"{_mark(result.is_match)} decided at {result.stage.value} "
        f"(similarity {result.similarity:.3f})"
    )


def format_match_details(result: MatchResult) -> Table:
    """Table of the compared forms and every diagnostic the pipeline recorded."""
    table = Table(title="Match Details", show_header=True, header_style="bold blue")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("submitted", escape(result.normalized_answer))
    table.add_row("expected", escape(result.normalized_expected))
    table.add_row("stage", result.stage.value)
    for key, value in sorted(result.details.items()):
        if isinstance(value, float):
            value = f"{value:.3f}"
        table.add_row(key, escape(str(value)))

    return table


def display_error(message: str, error_type: str = "Error") -> None:
    """Display a formatted error message."""
    console.print(Panel(
        f"[red]{escape(message)}[/red]",
        title=error_type,
        border_style="red"
    ))
