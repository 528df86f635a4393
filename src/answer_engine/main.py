"""
CLI Entry Point

Command-line interface for the Answer Evaluation Engine using the Click
framework with rich output formatting.
"""

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from .core.config import get_config, reload_config
from .core.exceptions import AnswerEngineException
from .utils.logging import setup_logging, get_logger
from .commands import match, similarity, normalize, evaluate, review

console = Console()
logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--config', '-c', type=click.Path(exists=True, dir_okay=False), help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, config, verbose, debug):
    """answer-engine - Quiz answer evaluation and fuzzy match review"""
    ctx.ensure_object(dict)

    try:
        if config:
            app_config = reload_config(Path(config))
        else:
            app_config = get_config()
    except AnswerEngineException as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)

    if debug:
        app_config.debug = True

    if verbose or debug:
        app_config.logging.level = 'DEBUG'
        app_config.logging.console_level = 'DEBUG' if debug else 'INFO'
    setup_logging(app_config)

    ctx.obj['config'] = app_config

    if ctx.invoked_subcommand is None:
        _display_banner()


def _display_banner():
    """Display application banner."""
    banner = Panel.fit(
        "[bold blue]answer-engine[/bold blue]\n"
        "[dim]Quiz Answer Evaluation Engine[/dim]\n\n"
        "Use --help for available commands",
        border_style="blue"
    )
    console.print(banner)


cli.add_command(match)
cli.add_command(similarity)
cli.add_command(normalize)
cli.add_command(evaluate)
cli.add_command(review)


def main():
    """Main entry point with top-level error handling."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(1)
    except AnswerEngineException as e:
        logger.error(f"Application error: {e}")
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
