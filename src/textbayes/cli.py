"""Command-line interface for textbayes.

Trains, untrains, and queries a classifier persisted in a snapshot file,
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    textbayes train spam "buy now, limited offer"
    echo "team meeting at noon" | textbayes train ham
    textbayes classify "limited offer now"
    textbayes score --output json "limited offer now"
    textbayes info
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .classifier import Classifier
from .config import Settings
from .errors import TextBayesError
from .tokenizer import StemmingTokenizer

console = Console()
logger = logging.getLogger("textbayes.cli")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/] {escape(str(error))}")
    sys.exit(1)


def _read_text(text: Optional[str]) -> str:
    if text is not None:
        return text
    return click.get_text_stream("stdin").read()


def _open_classifier(ctx: click.Context) -> Classifier:
    """Build a classifier and load the model file if it exists."""
    model: Path = ctx.obj["model"]
    tokenizer = StemmingTokenizer() if ctx.obj["stem"] else None
    classifier = Classifier(tokenizer=tokenizer)

    if model.exists():
        logger.debug("Loading model from %s", model)
        classifier.load_from_file(str(model))
    else:
        logger.debug("No model at %s, starting empty", model)
    return classifier


def _save_classifier(ctx: click.Context, classifier: Classifier) -> None:
    model: Path = ctx.obj["model"]
    logger.debug("Saving model to %s", model)
    classifier.save_to_file(str(model))


@click.group()
@click.version_option(package_name="textbayes")
@click.option("--model", "-m", type=click.Path(dir_okay=False, path_type=Path, resolve_path=True),
              default=None, help="Snapshot file (defaults to TEXTBAYES_MODEL_PATH).")
@click.option("--stem/--no-stem", default=None,
              help="Use the Snowball stemming tokenizer (defaults to TEXTBAYES_STEMMING).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, model: Optional[Path], stem: Optional[bool], verbose: bool) -> None:
    """Naive Bayes text classifier backed by a snapshot file."""
    _configure_logging(verbose)
    settings = Settings.from_env()

    ctx.ensure_object(dict)
    ctx.obj["model"] = model or Path(settings.model_path).resolve()
    ctx.obj["stem"] = settings.stemming if stem is None else stem


@main.command()
@click.argument("category")
@click.argument("text", required=False)
@click.pass_context
def train(ctx: click.Context, category: str, text: Optional[str]) -> None:
    """Train CATEGORY with TEXT (read from stdin if omitted)."""
    try:
        classifier = _open_classifier(ctx)
        classifier.train(category, _read_text(text))
        _save_classifier(ctx, classifier)
    except TextBayesError as e:
        _fail(e)

    _render_summaries(classifier)


@main.command()
@click.argument("category")
@click.argument("text", required=False)
@click.pass_context
def untrain(ctx: click.Context, category: str, text: Optional[str]) -> None:
    """Remove TEXT (read from stdin if omitted) from CATEGORY."""
    try:
        classifier = _open_classifier(ctx)
        classifier.untrain(category, _read_text(text))
        _save_classifier(ctx, classifier)
    except TextBayesError as e:
        _fail(e)

    _render_summaries(classifier)


@main.command()
@click.argument("text", required=False)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def classify(ctx: click.Context, text: Optional[str], output: str) -> None:
    """Print the best-matching category for TEXT."""
    try:
        result = _open_classifier(ctx).classify(_read_text(text))
    except TextBayesError as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(result.to_dict()))
    elif result.is_empty:
        console.print("[dim]No category matched.[/]")
    else:
        console.print(f"[bold cyan]{result.category}[/] (score {result.score:.4f})")


@main.command()
@click.argument("text", required=False)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def score(ctx: click.Context, text: Optional[str], output: str) -> None:
    """Print the score of TEXT against every matching category."""
    try:
        scores = _open_classifier(ctx).score(_read_text(text))
    except TextBayesError as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(scores, sort_keys=True))
        return

    if not scores:
        console.print("[dim]No category matched.[/]")
        return

    table = Table(title="Scores")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    for name, value in sorted(scores.items(), key=lambda x: (-x[1], x[0])):
        table.add_row(name, f"{value:.4f}")
    console.print(table)


@main.command()
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_context
def info(ctx: click.Context, output: str) -> None:
    """Show token tallies and priors for every category."""
    try:
        classifier = _open_classifier(ctx)
    except TextBayesError as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(
            {name: s.to_dict() for name, s in classifier.summaries().items()},
            sort_keys=True,
        ))
    else:
        _render_summaries(classifier)


@main.command()
@click.pass_context
def flush(ctx: click.Context) -> None:
    """Discard every trained category."""
    classifier = Classifier()
    try:
        classifier.flush()
        _save_classifier(ctx, classifier)
    except TextBayesError as e:
        _fail(e)

    console.print("[dim]Model flushed.[/]")


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_summaries(classifier: Classifier) -> None:
    """Render category summaries as a rich table."""
    summaries = classifier.summaries()
    if not summaries:
        console.print("[dim]No categories trained.[/]")
        return

    table = Table(title="Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Tokens", justify="right")
    table.add_column("P(in)", justify="right")
    table.add_column("P(not in)", justify="right")

    for name in sorted(summaries):
        s = summaries[name]
        table.add_row(
            name,
            str(s.token_tally),
            f"{s.prob_in_cat:.4f}",
            f"{s.prob_not_in_cat:.4f}",
        )

    console.print(table)


if __name__ == "__main__":
    main()
