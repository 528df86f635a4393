"""
Match Commands

Inspect how the fuzzy matcher and its building blocks treat a pair of
strings.
"""

import sys

import click
from rich.console import Console
from rich.table import Table
from rich.markup import escape

from ..cli.formatting import display_error, format_match_details, format_match_result
from ..core.exceptions import AnswerEngineException
from ..evaluation.matcher import FuzzyMatcher
from ..evaluation.normalizer import build_normalizer
from ..evaluation.similarity import jaro_winkler_similarity, levenshtein_distance, levenshtein_similarity
from ..utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


@click.command()
@click.argument('submitted')
@click.argument('correct')
@click.option('--explain', is_flag=True, help='Show stage details and fuzzy diagnostics')
@click.pass_context
def match(ctx, submitted, correct, explain):
    """Check whether SUBMITTED is accepted as CORRECT.

    \b
    EXAMPLES:

    answer-engine match "Amsterdm" "Amsterdam"
    answer-engine match "Newyork" "New York" --explain
    """
    try:
        matcher = FuzzyMatcher(config=ctx.obj.get('config'))
        if explain:
            result = matcher.explain(submitted, correct)
        else:
            result = matcher.match_result(submitted, correct)
    except AnswerEngineException as e:
        display_error(str(e), "Match Error")
        sys.exit(1)

    console.print(format_match_result(result))
    if explain:
        console.print(format_match_details(result))


@click.command()
@click.argument('first')
@click.argument('second')
def similarity(first, second):
    """Show Jaro-Winkler and Levenshtein scores for two strings."""
    table = Table(title="Similarity", show_header=True, header_style="bold blue")
    table.add_column("Metric", style="cyan")
    table.add_column("Score", style="green", justify="right")

    table.add_row("jaro_winkler", f"{jaro_winkler_similarity(first, second):.4f}")
    table.add_row("levenshtein_similarity", f"{levenshtein_similarity(first, second):.4f}")
    table.add_row("levenshtein_distance", str(levenshtein_distance(first, second)))

    console.print(table)


@click.command()
@click.argument('text')
@click.pass_context
def normalize(ctx, text):
    """Show the normalized, stemmed and tokenized forms of TEXT."""
    try:
        normalizer = build_normalizer(ctx.obj.get('config'))
    except AnswerEngineException as e:
        display_error(str(e), "Normalizer Error")
        sys.exit(1)

    normalized = normalizer.normalize(text)
    logger.debug(f"Normalized {text!r} as {normalized.language}")

    table = Table(title="Normalized Text", show_header=True, header_style="bold blue")
    table.add_column("Form", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("language", normalized.language)
    table.add_row("normalized", escape(normalized.normalized))
    table.add_row("stemmed", escape(normalized.stemmed))
    table.add_row("tokens", escape(", ".join(normalized.tokens)))

    console.print(table)
