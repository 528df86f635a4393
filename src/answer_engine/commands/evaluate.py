"""
Evaluate Command

Scores one submission against a question described in a YAML or JSON
file.
"""

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console

from ..cli.formatting import display_error, format_verdict
from ..core.exceptions import AnswerEngineException, ValidationError
from ..evaluation.grader import AnswerEvaluator, QuestionSpec, QuestionType
from ..utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def load_document(path: Path) -> Any:
    """Read a JSON file, or YAML for any other extension."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            if path.suffix.lower() == '.json':
                return json.load(f)
            return yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValidationError(f"Cannot parse {path.name}: {e}", field_name='file') from e


@click.command()
@click.argument('question_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('answers', nargs=-1, required=True)
@click.option('--json', 'as_json', is_flag=True, help='Print the verdict as JSON')
@click.pass_context
def evaluate(ctx, question_file, answers, as_json):
    """Score ANSWERS against the question in QUESTION_FILE.

    \b
    EXAMPLES:

    answer-engine evaluate capital.yaml "Amsterdm"
    answer-engine evaluate planets.yaml Mercury Venus Earth Mars
    answer-engine evaluate height.json "330,5" --json

    \b
    Several answers form an ordered submission for sequence questions.
    """
    try:
        data = load_document(question_file)
        if not isinstance(data, dict):
            raise ValidationError(f"{question_file.name} must contain a single question mapping",
                                  field_name='file')

        question = QuestionSpec.from_dict(data)
        if question.type == QuestionType.SEQUENCE or len(answers) > 1:
            submission = list(answers)
        else:
            submission = answers[0]

        verdict = AnswerEvaluator(config=ctx.obj.get('config')).evaluate(question, submission)
    except AnswerEngineException as e:
        logger.error(f"Evaluation failed: {e}")
        display_error(str(e), "Evaluation Error")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(asdict(verdict)))
    else:
        console.print(format_verdict(verdict))
