"""
Display utilities for resumescorer.

This module renders analysis results and errors to a rich console.
"""

from typing import Iterable, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from resumescorer.constants import SCORE_RANGES
from resumescorer.exceptions import ApiRequestError, ResumeScorerError
from resumescorer.models import AnalysisResult, ModelInfo


def score_label(score: float) -> str:
    """Return a qualitative label for a 0-100 score."""
    if score >= SCORE_RANGES["EXCELLENT"]:
        return "Excellent"
    if score >= SCORE_RANGES["GOOD"]:
        return "Very Good"
    if score >= SCORE_RANGES["FAIR"]:
        return "Good"
    if score >= SCORE_RANGES["POOR"]:
        return "Fair"
    return "Poor"


def score_style(score: float) -> str:
    if score >= SCORE_RANGES["GOOD"]:
        return "green"
    if score >= SCORE_RANGES["FAIR"]:
        return "yellow"
    return "red"


def _bullets(items: Iterable[str]) -> str:
    lines: List[str] = [f"• {item}" for item in items]
    return "\n".join(lines) if lines else "[dim]None[/dim]"


def display_analysis_result(result: AnalysisResult, console: Console) -> None:
    """Display an analysis result.

    Args:
        result: The analysis to show.
        console: Rich console instance for output.
    """
    style = score_style(result.score)
    console.print(
        Panel(
            f"[bold {style}]{result.score:g}/100[/bold {style}] ({score_label(result.score)})\n"
            f"Requirements matched: [bold]{result.match_percentage:g}%[/bold]",
            title="Resume Score",
            expand=False,
        )
    )

    keywords = Table(show_header=True, show_lines=False)
    keywords.add_column("Matching Keywords", style="green")
    keywords.add_column("Missing Keywords", style="yellow")
    keywords.add_row(_bullets(result.keyword_matches), _bullets(result.missing_keywords))
    console.print(keywords)

    for item in result.feedback:
        console.print(f"\n[bold cyan]{item.title}[/bold cyan]")
        console.print(item.description or "[dim]None[/dim]")

    if result.suggestions:
        console.print("\n[bold]Suggestions[/bold]")
        console.print(_bullets(result.suggestions))


def display_models(models: List[ModelInfo], selected: str, console: Console) -> None:
    """Display the available models, marking the selected one."""
    table = Table(title="Available Models")
    table.add_column("", width=1)
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    for model in models:
        table.add_row("*" if model.id == selected else "", model.id, model.name)
    console.print(table)


def display_error(error: BaseException, console: Console, debug: bool = False) -> None:
    """Display one human-readable message for an error.

    Classification details (kind, HTTP status, raw payload) are only shown
    when ``debug`` is set.
    """
    if isinstance(error, ApiRequestError):
        message = error.describe(debug)
    elif isinstance(error, ResumeScorerError):
        message = error.user_message
    else:
        message = str(error) or error.__class__.__name__
    console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)
