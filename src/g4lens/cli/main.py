"""CLI entry point for g4lens.

Invoked as::

    g4lens [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m g4lens.cli.main

Commands
--------
analyze     Analyse an ANTLR4 grammar and report findings
rules       List the rules discovered in a grammar
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from g4lens.errors import InvalidOptionsError

if TYPE_CHECKING:
    from g4lens.analysis.options import AnalysisOptions
    from g4lens.models import AnalysisResult

console = Console()
err_console = Console(stderr=True)


def _read_source(path: str) -> str:
    """Read a grammar file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {escape(path)}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {escape(path)}: {escape(str(exc))}")
        sys.exit(1)


def _options_or_exit(config: str | None, overrides: dict[str, Any]) -> "AnalysisOptions":
    """Build analysis options from a config file and flags, exiting on error."""
    from g4lens.analysis.options import AnalysisOptions, load_options

    try:
        options = load_options(config) if config else AnalysisOptions()
        return options.merged(overrides)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] Config file not found: {escape(str(config))}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {escape(str(config))}: {escape(str(exc))}")
        sys.exit(1)
    except InvalidOptionsError as exc:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
        sys.exit(1)


def _severity_color(severity: str) -> str:
    """Map a severity value to a Rich color string."""
    colors = {
        "critical": "bold red",
        "error": "red",
        "warning": "yellow",
        "info": "blue",
    }
    return colors.get(severity, "white")


def _emit(text: str, lang: str, output: str | None, what: str) -> None:
    """Write ``text`` to ``output``, or to stdout (highlighted on a terminal)."""
    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]{what} written to[/green] {escape(output)}")
    elif console.is_terminal:
        console.print(Syntax(text, lang, line_numbers=True))
    else:
        click.echo(text)


def _print_report(result: "AnalysisResult", file: str) -> None:
    from g4lens.models import Severity

    summary = result.summary
    overview = Table(title=f"Grammar: {escape(file)}", show_header=False)
    overview.add_row("Rules", str(summary.total_rules))
    overview.add_row(
        "  parser / lexer / fragment",
        f"{summary.parser_rules} / {summary.lexer_rules} / {summary.fragment_rules}",
    )
    overview.add_row("Unused rules", str(summary.unused_rules))
    overview.add_row("High complexity rules", str(summary.high_complexity_rules))
    overview.add_row("Performance issues", str(summary.performance_issues))
    overview.add_row("Ambiguity hints", str(summary.ambiguity_hints))
    overview.add_row("Hash", result.grammar_hash)
    console.print(overview)

    findings: list[tuple[str, str, str, str]] = []
    for unused in result.unused_rules:
        findings.append((Severity.WARNING.value, unused.name, f"{unused.line}:{unused.column}",
                         escape(unused.suggestion)))
    for issue in result.performance_issues:
        findings.append((
            issue.severity.value,
            issue.rule,
            f"{issue.line}:{issue.column}",
            f"{escape(issue.issue)}: {escape(issue.description)}\n"
            f"[dim]hint: {escape(issue.suggestion)}[/dim]",
        ))
    for hint in result.ambiguity_hints:
        rule = result.rule(hint.rule)
        column = rule.column if rule is not None else 0
        findings.append((Severity.INFO.value, hint.rule, f"{hint.line}:{column}", escape(hint.description)))
    for ref in result.unresolved_references:
        findings.append((Severity.INFO.value, ref.rule, f"{ref.line}:{ref.column}",
                         escape(f"Reference to undefined rule '{ref.name}'")))

    if not findings:
        console.print(f"[green]OK[/green] {escape(file)}: no issues found")
    else:
        table = Table(title="Findings", show_lines=True)
        table.add_column("Severity", style="bold", min_width=10)
        table.add_column("Rule", min_width=10)
        table.add_column("Location", min_width=10)
        table.add_column("Message")
        for severity, rule_name, loc, message in findings:
            color = _severity_color(severity)
            table.add_row(f"[{color}]{severity.upper()}[/{color}]", rule_name, loc, message)
        console.print(table)

    if result.complexity:
        metrics_table = Table(title="Complexity")
        metrics_table.add_column("Rule")
        metrics_table.add_column("Score")
        metrics_table.add_column("Value", justify="right")
        metrics_table.add_column("Depth", justify="right")
        metrics_table.add_column("Alts", justify="right")
        metrics_table.add_column("Refs", justify="right")
        metrics_table.add_column("Lookahead", justify="right")
        metrics_table.add_column("Recursion")
        for m in result.complexity:
            recursion = "direct" if m.directly_recursive else "indirect" if m.indirectly_recursive else ""
            metrics_table.add_row(
                m.name,
                m.score.value,
                str(m.complexity_value),
                str(m.depth),
                str(m.alternatives),
                str(m.reference_count),
                str(m.lookahead),
                recursion,
            )
        console.print(metrics_table)

    tally = summary.issues_by_severity
    console.print(
        f"\n[bold]Summary:[/bold] {tally['critical']} critical, {tally['error']} error(s), "
        f"{tally['warning']} warning(s), {tally['info']} info"
    )


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="g4lens")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Static analysis for ANTLR4 grammars: unused rules, complexity, performance, ambiguity."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from g4lens import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]g4lens[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# analyze command
# ---------------------------------------------------------------------------


@cli.command(name="analyze")
@click.argument("file", type=click.Path(exists=False))
@click.option("--start-rule", default=None, help="Entry rule, exempt from unused-rule reporting")
@click.option("--config", "config", default=None, help="YAML file with analysis options")
@click.option("--no-unused", is_flag=True, default=False, help="Skip unused-rule detection")
@click.option("--no-complexity", is_flag=True, default=False, help="Omit complexity metrics")
@click.option("--no-performance", is_flag=True, default=False, help="Skip performance checks")
@click.option("--no-ambiguity", is_flag=True, default=False, help="Skip ambiguity hints")
@click.option("--unresolved", is_flag=True, default=False, help="Report references to undefined rules")
@click.option("--high-threshold", type=float, default=None, help="Complexity value scored as high")
@click.option("--critical-threshold", type=float, default=None, help="Complexity value scored as critical")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Report format",
)
@click.option("--output", "-o", default=None, help="Output file path for json/yaml (defaults to stdout)")
def analyze_command(
    file: str,
    start_rule: str | None,
    config: str | None,
    no_unused: bool,
    no_complexity: bool,
    no_performance: bool,
    no_ambiguity: bool,
    unresolved: bool,
    high_threshold: float | None,
    critical_threshold: float | None,
    output_format: str,
    output: str | None,
) -> None:
    """Analyse an ANTLR4 grammar.

    FILE is the path to the .g4 file to analyse.  Exits with status 1 if
    any error or critical finding is reported.
    """
    from g4lens.analysis.analyzer import GrammarAnalyzer
    from g4lens.report.serializer import ReportSerializer

    source = _read_source(file)

    # Flags override the config file only when given.
    overrides: dict[str, Any] = {}
    if start_rule is not None:
        overrides["start_rule"] = start_rule
    if no_unused:
        overrides["detect_unused_rules"] = False
    if no_complexity:
        overrides["analyze_complexity"] = False
    if no_performance:
        overrides["detect_performance_issues"] = False
    if no_ambiguity:
        overrides["detect_ambiguity"] = False
    if unresolved:
        overrides["detect_unresolved_references"] = True
    if high_threshold is not None:
        overrides["high_complexity_threshold"] = high_threshold
    if critical_threshold is not None:
        overrides["critical_complexity_threshold"] = critical_threshold

    options = _options_or_exit(config, overrides)
    result = GrammarAnalyzer().analyze(source, options)

    output_format = output_format.lower()
    if output_format == "table":
        _print_report(result, file)
    else:
        serializer = ReportSerializer()
        text = serializer.to_json(result) if output_format == "json" else serializer.to_yaml(result)
        _emit(text, output_format, output, "Report")

    if result.has_errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# rules command
# ---------------------------------------------------------------------------


@cli.command(name="rules")
@click.argument("file", type=click.Path(exists=False))
def rules_command(file: str) -> None:
    """List the rules discovered in an ANTLR4 grammar.

    FILE is the path to the .g4 file to inspect.
    """
    from g4lens.grammar.rules import extract_rules
    from g4lens.grammar.stripper import strip
    from g4lens.graph.reference_graph import attach_references, build_reference_graph

    source = _read_source(file)
    rules = extract_rules(source, strip(source))
    if not rules:
        console.print(f"[yellow]No rules found[/yellow] in {escape(file)}")
        return
    rules = attach_references(rules, build_reference_graph(rules))

    table = Table(title=f"Rules: {escape(file)}")
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Span")
    table.add_column("Alts", justify="right")
    table.add_column("References")
    table.add_column("Referenced by")
    for rule in rules:
        table.add_row(
            rule.name,
            rule.type.value,
            f"{rule.line}:{rule.column}-{rule.end_line}:{rule.end_column}",
            str(rule.alternative_count),
            ", ".join(rule.references),
            ", ".join(rule.referenced_by),
        )
    console.print(table)
    console.print(f"\n[bold]{len(rules)}[/bold] rule(s)")


if __name__ == "__main__":
    cli()
