"""
Review Command

Runs a batch of answer pairs through the fuzzy matcher so a host can
check near misses the matcher accepted or rejected.
"""

import sys
from pathlib import Path

import click
from rich.console import Console

from ..cli.formatting import display_error, format_table
from ..core.exceptions import AnswerEngineException, ValidationError
from ..evaluation.matcher import FuzzyMatcher
from ..utils.logging import get_logger, PerformanceTimer
from .evaluate import load_document

console = Console()
logger = get_logger(__name__)


def _read_pairs(path: Path):
    pairs = load_document(path)
    if not isinstance(pairs, list):
        raise ValidationError(f"{path.name} must contain a list of answer pairs", field_name='file')

    for index, pair in enumerate(pairs):
        if not isinstance(pair, dict) or 'submitted' not in pair or 'correct' not in pair:
            raise ValidationError(
                f"Entry {index} needs both 'submitted' and 'correct'",
                field_name='pairs', invalid_value=pair
            )
    return pairs


@click.command()
@click.argument('pairs_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def review(ctx, pairs_file):
    """Review fuzzy matching decisions for the pairs in PAIRS_FILE.

    \b
    PAIRS_FILE is a YAML list such as:

    - submitted: Amsterdm
      correct: Amsterdam
    - submitted: York
      correct: New York
    """
    try:
        pairs = _read_pairs(pairs_file)
        matcher = FuzzyMatcher(config=ctx.obj.get('config'))

        rows = []
        with PerformanceTimer(f"reviewing {len(pairs)} answer pairs", logger):
            for pair in pairs:
                result = matcher.match_result(str(pair['submitted']), str(pair['correct']))
                rows.append({
                    'Submitted': pair['submitted'],
                    'Correct': pair['correct'],
                    'Verdict': 'accept' if result.is_match else 'reject',
                    'Stage': result.stage.value,
                    'Similarity': f"{result.similarity:.3f}",
                })
    except AnswerEngineException as e:
        display_error(str(e), "Review Error")
        sys.exit(1)

    console.print(format_table(rows, title="Answer Review"))
    accepted = sum(1 for row in rows if row['Verdict'] == 'accept')
    console.print(f"[bold]{accepted}/{len(rows)} accepted[/bold]")
