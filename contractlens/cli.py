"""CLI commands for contractlens.

Runs queries through the pipeline, or through a single stage, and prints the
result as rich tables or JSON.

Commands:
    contractlens parse QUERY      - Run the full pipeline
    contractlens correct TEXT     - Typo correction only
    contractlens grammar TEXT     - Grammar enforcement (or --formal, --concise, --analyze)
    contractlens normalize TEXT   - Query normalization only
    contractlens entities TEXT    - Entity resolution only
    contractlens stats            - Dictionary and stage statistics
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ContractLensConfig
from .core.lexicon import Lexicon
from .core.pipeline import QueryPipeline
from .log import setup_logging

console = Console()


def load_config(args: argparse.Namespace) -> ContractLensConfig:
    return ContractLensConfig.load(Path(args.config)) if args.config else ContractLensConfig()


def configure_logging(args: argparse.Namespace, log_dir: Path | None = None) -> None:
    """Send logs to the rotating file at the configured log_level.

    CONTRACTLENS_DEBUG still forces DEBUG.
    """
    config = load_config(args)
    level = "DEBUG" if os.environ.get("CONTRACTLENS_DEBUG") else config.log_level.upper()
    setup_logging(log_dir, level=level)


def build_pipeline(args: argparse.Namespace) -> QueryPipeline:
    """Build a pipeline from the --config and --lexicon options."""
    config = load_config(args)
    lexicon = Lexicon.from_yaml(Path(args.lexicon)) if args.lexicon else None
    return QueryPipeline(config, lexicon)


def _text(args: argparse.Namespace) -> str:
    return " ".join(args.text)


def parse_query(args: argparse.Namespace) -> int:
    """Run a query through every stage.

    Args:
        args: Parsed arguments (text, previous, json)

    Returns:
        Exit code (0 for success)
    """
    pipeline = build_pipeline(args)
    if args.previous:
        result = pipeline.process_with_context(_text(args), args.previous)
    else:
        result = pipeline.process(_text(args))

    if args.json:
        console.print_json(data=result.to_dict())
        return 0 if result.error is None else 1

    stages = Table(title="Stages")
    stages.add_column("Stage", style="cyan")
    stages.add_column("Text")
    stages.add_row("original", escape(result.original))
    stages.add_row("corrected", escape(result.corrected))
    stages.add_row("grammar", escape(result.grammar))
    stages.add_row("normalized", escape(result.normalized))
    if result.analyzed:
        stages.add_row("analyzed", escape(result.analyzed))
    console.print(stages)

    if result.entities:
        entities = Table(title="Entities")
        entities.add_column("Type", style="cyan")
        entities.add_column("Value")
        entities.add_column("Span", justify="right", style="dim")
        entities.add_column("Confidence", justify="right")
        for entity in result.entities:
            entities.add_row(
                entity.type.value,
                escape(entity.value),
                f"{entity.start}-{entity.end}",
                f"{entity.confidence:.2f}",
            )
        console.print(entities)

    parsed = result.parsed
    console.print(f"[bold]Intent:[/bold] {parsed.query_type.value}")
    console.print(f"[bold]Action:[/bold] {parsed.action_type.value}")
    if parsed.contract_number:
        console.print(f"[bold]Contract:[/bold] {escape(parsed.contract_number)}")
    if parsed.part_number:
        console.print(f"[bold]Part:[/bold] {escape(parsed.part_number)}")
    console.print(f"[bold]Confidence:[/bold] {result.confidence:.2f}")
    console.print(f"[dim]{escape(result.message)}[/dim]")

    if result.error is not None:
        console.print(f"[red]Error:[/red] {escape(result.error)}")
        return 1
    return 0


def correct_text(args: argparse.Namespace) -> int:
    """Typo-correct text and list each correction."""
    pipeline = build_pipeline(args)
    result = pipeline.typo.correct(_text(args))

    if args.json:
        console.print_json(data=result.to_dict())
        return 0

    console.print(escape(result.corrected))
    if not result.has_corrections:
        console.print("[dim]No corrections.[/dim]")
        return 0

    table = Table(title="Corrections")
    table.add_column("Original", style="yellow")
    table.add_column("Corrected", style="green")
    table.add_column("Strategy", style="dim")
    for record in result.corrections:
        table.add_row(escape(record.original), escape(record.corrected), record.strategy.value)
    console.print(table)
    return 0


def enforce_grammar(args: argparse.Namespace) -> int:
    """Apply grammar rules, or one of the alternate rewrites."""
    enforcer = build_pipeline(args).grammar
    text = _text(args)

    if args.analyze:
        analysis = enforcer.analyze(text)
        if args.json:
            console.print_json(data=analysis.to_dict())
            return 0
        console.print(escape(analysis.corrected))
        console.print(f"[bold]Score:[/bold] {analysis.score:.2f}")
        console.print(f"[dim]{escape(analysis.summary)}[/dim]")
        return 0

    if args.formal:
        rewritten = enforcer.to_formal_business_language(text)
    elif args.concise:
        rewritten = enforcer.make_concise(text)
    else:
        rewritten = enforcer.enforce_grammar(text)
    console.print(escape(rewritten))
    return 0


def normalize_text(args: argparse.Namespace) -> int:
    """Normalize text and report the stages that changed it."""
    result = build_pipeline(args).normalizer.normalize(_text(args))

    if args.json:
        console.print_json(data=result.to_dict())
        return 0 if result.succeeded else 1

    console.print(escape(result.normalized))
    if result.transformations:
        console.print(f"[dim]Stages: {', '.join(result.transformations)}[/dim]")
    console.print(f"[bold]Confidence:[/bold] {result.confidence:.2f}")
    console.print(f"[dim]{escape(result.message)}[/dim]")
    return 0 if result.succeeded else 1


def resolve_entities(args: argparse.Namespace) -> int:
    """Extract entities from text."""
    result = build_pipeline(args).resolver.resolve(_text(args))

    if args.json:
        console.print_json(data=result.to_dict())
        return 0

    if not result.entities:
        console.print(f"[dim]{escape(result.summary)}[/dim]")
        return 0

    table = Table(title="Entities")
    table.add_column("Type", style="cyan")
    table.add_column("Value")
    table.add_column("Text", style="dim")
    table.add_column("Confidence", justify="right")
    for entity in result.entities:
        table.add_row(entity.type.value, escape(entity.value), escape(entity.original_text), f"{entity.confidence:.2f}")
    console.print(table)
    console.print(f"[dim]{escape(result.summary)}[/dim]")
    return 0


def show_stats(args: argparse.Namespace) -> int:
    """Show dictionary sizes and stage settings."""
    stats = build_pipeline(args).stats()

    if args.json:
        console.print_json(data=stats)
        return 0

    table = Table(title="Lexicon")
    table.add_column("Table", style="cyan")
    table.add_column("Entries", justify="right")
    for name, size in stats["lexicon"].items():
        table.add_row(name.replace("_", " "), f"{size:,}")
    console.print(table)

    intent = stats["intent"]
    console.print(
        f"[bold]Intent:[/bold] {intent['intents']} intents, "
        f"{intent['context_patterns']} context patterns, {intent['action_rules']} action rules"
    )
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="contractlens",
        description="contractlens: typo-tolerant parsing of contract and part queries",
    )
    parser.add_argument(
        "--config",
        "-c",
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--lexicon",
        "-l",
        help="Path to a YAML lexicon overlay",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def add_text_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "text",
            nargs="+",
            help="Query text (quoting optional)",
        )
        p.add_argument(
            "--json",
            action="store_true",
            help="Print the result as JSON",
        )

    # =========================================================================
    # parse command
    # =========================================================================
    parse_parser = subparsers.add_parser("parse", help="Run a query through the full pipeline")
    add_text_args(parse_parser)
    parse_parser.add_argument(
        "--previous",
        "-p",
        help="Previous query, used to fill missing fields of a vague follow-up",
    )
    parse_parser.set_defaults(func=parse_query)

    # =========================================================================
    # single-stage commands
    # =========================================================================
    correct_parser = subparsers.add_parser("correct", help="Correct typos")
    add_text_args(correct_parser)
    correct_parser.set_defaults(func=correct_text)

    grammar_parser = subparsers.add_parser("grammar", help="Enforce grammar")
    add_text_args(grammar_parser)
    mode = grammar_parser.add_mutually_exclusive_group()
    mode.add_argument("--formal", action="store_true", help="Rewrite in formal business language")
    mode.add_argument("--concise", action="store_true", help="Remove wordy phrases and filler")
    mode.add_argument("--analyze", action="store_true", help="Report grammar issues and a score")
    grammar_parser.set_defaults(func=enforce_grammar)

    normalize_parser = subparsers.add_parser("normalize", help="Normalize a query")
    add_text_args(normalize_parser)
    normalize_parser.set_defaults(func=normalize_text)

    entities_parser = subparsers.add_parser("entities", help="Extract entities")
    add_text_args(entities_parser)
    entities_parser.set_defaults(func=resolve_entities)

    # =========================================================================
    # stats command
    # =========================================================================
    stats_parser = subparsers.add_parser("stats", help="Show dictionary and stage statistics")
    stats_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the statistics as JSON",
    )
    stats_parser.set_defaults(func=show_stats)

    return parser


def run_cli(args: list[str] | None = None, log: bool = False) -> int:
    """Run the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])
        log: Set up file logging from the loaded config first

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not hasattr(parsed, "func"):
        parser.print_help()
        return 0

    try:
        if log:
            configure_logging(parsed)
        return parsed.func(parsed)
    except KeyboardInterrupt:
        console.print("\n[dim]Cancelled.[/dim]")
        return 130
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1


def main() -> None:
    """Entry point for the contractlens console script."""
    sys.exit(run_cli(log=True))


__all__ = [
    "build_pipeline",
    "configure_logging",
    "correct_text",
    "create_parser",
    "enforce_grammar",
    "load_config",
    "main",
    "normalize_text",
    "parse_query",
    "resolve_entities",
    "run_cli",
    "show_stats",
]
