"""Command-line interface for Reading Tracker."""

import sys
from pathlib import Path

import click
import orjson
from rich.console import Console
from rich.table import Table

from .analysis.analyzer import AnalysisResult, ContentAnalyzer
from .config import ConfigurationError, build_analyzer_config, get_settings, validate_config
from .digest import ScoredItem, section_title, select_for_digest
from .logging import PerformanceLogger, get_logger, setup_logging
from .rescore import SessionFormatError, load_sessions, needs_rescore, rescore_sessions, write_sessions

logger = get_logger(__name__)


def _echo_json(data) -> None:
    click.echo(orjson.dumps(data, option=orjson.OPT_INDENT_2).decode())


def _build_analyzer(min_score: int | None = None) -> ContentAnalyzer:
    try:
        config = build_analyzer_config(get_settings())
    except ConfigurationError as e:
        logger.error("Configuration invalid", error=str(e))
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    if min_score is not None:
        config = config.model_copy(update={"min_learning_score": min_score})
    return ContentAnalyzer(config)


def _render_result(result: AnalysisResult) -> None:
    console = Console()
    verdict = "[green]track[/green]" if result.should_track else "[red]skip[/red]"
    console.print(f"Decision: {verdict}  Learning score: {result.learning_score}/100")
    console.print(f"Category: {result.category}  Reason: {result.reason}")

    signals = result.signals
    if signals.is_gated:
        return

    table = Table(title="Signals")
    table.add_column("Signal")
    table.add_column("Score", justify="right")
    table.add_row("Content quality", str(signals.content_quality.quality_score))
    table.add_row("Learning indicators", str(signals.learning_indicators.learning_score))
    table.add_row("Language", str(signals.language_relevance.language_score))
    table.add_row("Topical relevance", str(signals.topical_relevance.topical_relevance_score))
    table.add_row("Source credibility", str(signals.source_credibility.credibility_score))
    table.add_row(
        f"Platform ({signals.platform_specific.platform.value})",
        str(signals.platform_specific.platform_score),
    )
    console.print(table)


@click.group()
@click.option("--log-level", default="WARNING", help="Log level")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON")
def cli(log_level, json_logs):
    """Reading Tracker - score pages for learning value."""
    setup_logging(log_level=log_level, json_logging=json_logs)


@cli.command()
@click.argument("url")
@click.option("--title", default="", help="Page title")
@click.option(
    "--file",
    "content_file",
    type=click.File("r", encoding="utf-8"),
    default="-",
    help="File holding the extracted page text (default: stdin)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--min-score", type=click.IntRange(0, 100), help="Override the tracking threshold")
def analyze(url, title, content_file, as_json, min_score):
    """Analyze one page and print the tracking decision."""
    analyzer = _build_analyzer(min_score)
    result = analyzer.analyze(url, title, content_file.read())

    if as_json:
        _echo_json(result.to_dict())
    else:
        _render_result(result)


@cli.command()
@click.argument("url")
@click.option("--title", default="", help="Item title")
def admit(url, title):
    """Queue an item for the newsletter with the fixed curated score."""
    analyzer = _build_analyzer()
    _echo_json(analyzer.manual_admit(url, title).to_dict())


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: overwrite input)",
)
@click.option("--all", "rescore_all", is_flag=True, help="Also re-score sessions that already have a score")
def rescore(input_path, output, rescore_all):
    """Fill in missing learning scores in a JSON-lines export."""
    analyzer = _build_analyzer()
    try:
        with PerformanceLogger("rescore", logger):
            sessions = load_sessions(input_path)
            rescored = rescore_sessions(sessions, analyzer, rescore_all)
            write_sessions(rescored, output or input_path)
    except SessionFormatError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    changed = [new for old, new in zip(sessions, rescored) if needs_rescore(old, rescore_all)]
    tracked = sum(1 for s in changed if s["should_track"])
    click.echo(f"Rescored {len(changed)} of {len(rescored)} sessions, {tracked} above threshold")


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--min-score", type=click.IntRange(0, 100), default=50, show_default=True)
@click.option("--category", "categories", multiple=True, help="Only include these categories")
@click.option("--include-professional", is_flag=True, help="Keep professional-network posts")
def digest(input_path, min_score, categories, include_professional):
    """Show which sessions a digest would include, by section."""
    try:
        sessions = load_sessions(input_path)
    except SessionFormatError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    sections = select_for_digest(
        (ScoredItem.from_dict(s) for s in sessions),
        min_score=min_score,
        categories=categories or None,
        include_professional=include_professional,
    )

    if not sections:
        click.echo("No sessions qualify for the digest.")
        return

    for name, items in sections.items():
        click.echo(f"## {section_title(name)}")
        for item in items:
            click.echo(f"- [{item.learning_score}] {item.title} <{item.url}>")
        click.echo("")


@cli.command("validate-config")
def validate_config_command():
    """Validate configuration and exit."""
    if validate_config(get_settings()):
        click.echo("✅ Configuration is valid")
    else:
        click.echo("❌ Configuration validation failed", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
