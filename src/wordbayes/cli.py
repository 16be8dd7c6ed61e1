"""Command-line interface for wordbayes.

Every command trains a fresh classifier from a labeled corpus (a
``category/*.txt`` directory or a ``.jsonl`` file), since trained models are
not stored between runs.

Usage::

    wordbayes classify reviews/ "I love this film" "Dull and too long"
    wordbayes classify reviews.jsonl --file unlabeled.txt --output json
    wordbayes evaluate reviews/ -k 5
    wordbayes inspect reviews/
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
from rich.table import Table

from . import __version__
from .config import ClassifierConfig
from .corpus import LabeledExample, category_distribution, load_corpus
from .evaluation import cross_validate, mean_metrics

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/] {message}")
    sys.exit(1)


def _load(
    corpus: Path,
    config_path: Optional[Path],
    smoothing: Optional[float],
) -> tuple[list[LabeledExample], ClassifierConfig]:
    """Load the corpus and resolve settings, exiting on bad input."""
    try:
        config = ClassifierConfig.from_toml(config_path) if config_path else ClassifierConfig()
        config = config.with_overrides(smoothing=smoothing)
        examples = load_corpus(corpus)
    except (OSError, ValueError) as e:
        _fail(str(e))
    if not examples:
        _fail(f"No training examples found in {corpus}")
    return examples, config


corpus_argument = click.argument("corpus", type=click.Path(path_type=Path))
config_option = click.option(
    "--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None, help="TOML file with classifier settings.",
)
smoothing_option = click.option(
    "--smoothing", "-s", type=float, default=None,
    help="Additive smoothing constant (overrides the config file).",
)
output_option = click.option(
    "--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
    help="Output format.",
)


@click.group()
@click.version_option(version=__version__, prog_name="wordbayes")
@click.option("--verbose", "-v", count=True, help="Log progress (-v) or debug details (-vv).")
def main(verbose: int) -> None:
    """Naive Bayes text classification from labeled examples."""
    logging.basicConfig(
        level=_LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@main.command()
@corpus_argument
@click.argument("texts", nargs=-1)
@click.option("--file", "-f", "text_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="File with one text to classify per line.")
@config_option
@smoothing_option
@output_option
def classify(
    corpus: Path,
    texts: tuple[str, ...],
    text_file: Optional[Path],
    config_path: Optional[Path],
    smoothing: Optional[float],
    output: str,
) -> None:
    """Train on CORPUS, then print the category of each TEXT.

    Example: wordbayes classify reviews/ "What a wonderful film"
    """
    to_classify = list(texts)
    if text_file:
        try:
            lines = text_file.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            _fail(f"Cannot read {text_file}: {e}")
        to_classify.extend(line for line in lines if line.strip())
    if not to_classify:
        _fail("Nothing to classify. Pass TEXT arguments or --file.")

    examples, config = _load(corpus, config_path, smoothing)
    classifier = config.build_classifier()
    classifier.train_batch(examples)
    results = [(text, classifier.classify(text)) for text in to_classify]

    if output == "json":
        click.echo(json.dumps([{"text": t, "category": c} for t, c in results], indent=2))
        return

    table = Table(title=f"Predictions ({classifier.training_count} training examples)")
    table.add_column("#", justify="right", width=4)
    table.add_column("Text", style="white", max_width=60)
    table.add_column("Category", style="cyan")
    for i, (text, category) in enumerate(results, 1):
        excerpt = text[:120].replace("\n", " ") + ("..." if len(text) > 120 else "")
        table.add_row(str(i), excerpt, category)
    console.print(table)


@main.command()
@corpus_argument
@click.option("--folds", "-k", type=click.IntRange(min=2), default=5, show_default=True,
              help="Number of cross-validation folds.")
@click.option("--seed", type=int, default=42, show_default=True, help="Fold shuffle seed.")
@config_option
@smoothing_option
@output_option
def evaluate(
    corpus: Path,
    folds: int,
    seed: int,
    config_path: Optional[Path],
    smoothing: Optional[float],
    output: str,
) -> None:
    """Cross-validate the classifier on CORPUS.

    Example: wordbayes evaluate reviews/ -k 10
    """
    examples, config = _load(corpus, config_path, smoothing)

    with err_console.status("[bold blue]Cross-validating...", spinner="dots"):
        results = cross_validate(examples, k=folds, seed=seed, config=config)
    if not results:
        _fail("Not enough examples to evaluate any fold.")
    mean = mean_metrics(results)

    if output == "json":
        click.echo(json.dumps({
            "config": config.to_dict(),
            "folds": [m.to_dict() for m in results],
            "mean": {k: round(v, 4) for k, v in mean.items()},
        }, indent=2))
        return

    table = Table(title=f"{len(results)}-fold cross-validation ({len(examples)} examples)")
    table.add_column("Fold", justify="right")
    for name in ("Accuracy", "Macro P", "Macro R", "Macro F1", "Weighted F1"):
        table.add_column(name, justify="right")
    for i, m in enumerate(results, 1):
        table.add_row(
            str(i), f"{m.accuracy:.2%}", f"{m.macro_precision:.4f}", f"{m.macro_recall:.4f}",
            f"{m.macro_f1:.4f}", f"{m.weighted_f1:.4f}",
        )
    table.add_row(
        "[bold]Mean[/]", f"[bold]{mean['accuracy']:.2%}[/]", f"{mean['macro_precision']:.4f}",
        f"{mean['macro_recall']:.4f}", f"[bold]{mean['macro_f1']:.4f}[/]", f"{mean['weighted_f1']:.4f}",
    )
    console.print(table)


@main.command()
@corpus_argument
@config_option
@output_option
def inspect(corpus: Path, config_path: Optional[Path], output: str) -> None:
    """Train on CORPUS and show what the classifier learned.

    Example: wordbayes inspect reviews/
    """
    examples, config = _load(corpus, config_path, None)
    classifier = config.build_classifier()
    classifier.train_batch(examples)
    stats = classifier.stats()

    if output == "json":
        click.echo(json.dumps(stats.to_dict(), indent=2))
        return

    table = Table(title=f"Corpus: {corpus.name}")
    table.add_column("Category", style="cyan")
    table.add_column("Examples", justify="right")
    table.add_column("Prior", justify="right")
    priors = stats.priors
    for category, count in category_distribution(examples).items():
        table.add_row(category, str(count), f"{priors[category]:.4f}")
    console.print(table)
    console.print(
        f"Training examples: [bold]{stats.training_count}[/] | "
        f"Vocabulary: [bold]{stats.word_count}[/] distinct words | "
        f"Smoothing: {config.smoothing}"
    )


if __name__ == "__main__":
    main()
