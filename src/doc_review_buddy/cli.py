"""Command-line interface for Doc Review Buddy.

Provides ``review``, ``clauses``, and ``export`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    doc-review-buddy review contract.pdf
    doc-review-buddy clauses --output json contract.txt
    doc-review-buddy export --format markdown --out report.md contract.docx
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import report
from .config import OUTPUT_FORMATS, Settings
from .models import Severity
from .parsers import ParsedDocument, parse_document
from .session import DocumentSession

console = Console()
logger = logging.getLogger(__name__)


def _get_severity_style(severity: str) -> str:
    """Return a rich style string for a finding severity."""
    return {
        Severity.HIGH.value: "bold red",
        Severity.MEDIUM.value: "bold yellow",
        Severity.LOW.value: "dim green",
    }.get(severity, "")


def _get_status_style(status: str) -> str:
    return {"High": "bold red", "Moderate": "bold yellow"}.get(status, "bold green")


def _configure_logging(level: str) -> None:
    """Send package log records to stderr through a rich handler."""
    package_logger = logging.getLogger("doc_review_buddy")
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))


def _load(file: Path) -> tuple[ParsedDocument, DocumentSession]:
    """Parse a file and store its text in a fresh session."""
    parsed = parse_document(file)
    session = DocumentSession(parsed.filename)
    session.upsert_text(parsed.full_text)
    return parsed, session


def _review(file: Path) -> tuple[ParsedDocument, list[dict], dict]:
    """Parse, segment and score a file; return clauses located on pages."""
    parsed, session = _load(file)
    outcome = session.review()
    logger.info(
        "Reviewed %s: %d findings, risk score %d",
        parsed.filename,
        outcome["findingsCount"],
        outcome["riskScore"],
    )
    clauses = session.get_clauses()
    parsed.locate_clauses(clauses)
    return parsed, clauses, session.get_results()


def _fail(exc: Exception) -> None:
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="doc-review-buddy")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """📄 Doc Review Buddy: clause-level contract risk review.

    Splits a document into clauses, checks each clause against a fixed
    set of risk rules, and reports findings with an overall risk score.
    """
    try:
        settings = Settings.from_env()
    except ValueError as e:
        _fail(e)
    _configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format.")
@click.option("--save", "-s", type=click.Path(path_type=Path), default=None,
              help="Save results to a JSON file.")
@click.pass_obj
def review(settings: Settings, file: Path, output: str | None, save: Path | None) -> None:
    """Run clause segmentation and compliance scoring on a document.

    Example: doc-review-buddy review contract.pdf
    """
    output = output or settings.output

    with console.status("[bold blue]Reviewing document...", spinner="dots"):
        try:
            parsed, clauses, results = _review(file)
        except Exception as e:
            _fail(e)

    payload = {"documentName": parsed.filename, "clauses": clauses, **results}
    if output == "json":
        click.echo(json.dumps(payload, indent=2))
    else:
        _render_review(parsed, clauses, results, settings.excerpt_length)

    if save:
        save.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        console.print(f"\n[dim]Results saved to {save}[/]")


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format.")
@click.pass_obj
def clauses(settings: Settings, file: Path, output: str | None) -> None:
    """Split a document into clauses without scoring them.

    Example: doc-review-buddy clauses contract.txt
    """
    output = output or settings.output

    try:
        parsed, session = _load(file)
        session.extract_clauses()
        items = session.get_clauses()
        parsed.locate_clauses(items)
    except Exception as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps(items, indent=2))
    else:
        _render_clauses(items, parsed.filename, settings.excerpt_length)


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option("--format", "fmt", type=click.Choice(["json", "markdown", "csv"]),
              default="json", help="Export format.")
@click.option("--out", type=click.Path(path_type=Path), default=None,
              help="Write the export to this file instead of stdout.")
@click.pass_obj
def export(settings: Settings, file: Path, fmt: str, out: Path | None) -> None:
    """Export a review report as JSON, Markdown, or CSV.

    Example: doc-review-buddy export --format markdown contract.pdf
    """
    try:
        parsed, clause_items, results = _review(file)
    except Exception as e:
        _fail(e)

    limit = settings.excerpt_length
    if fmt == "markdown":
        content = report.to_markdown(parsed.filename, results, clause_items, limit=limit)
    elif fmt == "csv":
        content = report.to_csv(results, clause_items, limit=limit)
    else:
        content = report.to_json(parsed.filename, results, clause_items, limit=limit)

    if out:
        out.write_text(content, encoding="utf-8")
        console.print(f"[dim]Report written to {out}[/]")
    else:
        click.echo(content)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_review(parsed: ParsedDocument, clauses: list[dict], results: dict, limit: int) -> None:
    """Render a finished review with rich formatting."""
    summary = report.RiskSummary.from_results(results)
    counts = summary.findings_by_severity

    console.print()
    console.print(Panel(
        f"[bold]{parsed.filename}[/]\n"
        f"Pages: {parsed.page_count} | "
        f"Clauses: {len(clauses)} | "
        f"Findings: {summary.total_findings} "
        f"(high {counts['high']}, medium {counts['medium']}, low {counts['low']})",
        title="📄 Document Review",
        border_style="blue",
    ))

    findings = report.annotate_findings(results["findings"], clauses, limit)
    if findings:
        table = Table(title="Findings", show_lines=True)
        table.add_column("#", justify="right", width=4)
        table.add_column("Severity", justify="center", width=8)
        table.add_column("Title", style="cyan", width=26)
        table.add_column("Clause (excerpt)", style="white", max_width=60)
        table.add_column("Pts", justify="right", width=4)
        table.add_column("Page", justify="center", width=6)

        for i, finding in enumerate(findings, 1):
            severity = finding["severity"]
            table.add_row(
                str(i),
                Text(severity.upper(), style=_get_severity_style(severity)),
                finding["title"],
                Text(finding["excerpt"]) if finding["excerpt"] else Text("(clause not found)", style="dim"),
                str(finding["riskScore"]),
                str(finding["page"] or "-"),
            )
        console.print(table)

        console.print("[bold]Remediation[/]")
        seen: set[str] = set()
        for finding in findings:
            if finding["title"] in seen:
                continue
            seen.add(finding["title"])
            console.print(f"  💡 [bold]{finding['title']}:[/] {finding['explanation']}")
        console.print()
    else:
        console.print("No findings: none of the clauses matched a risk rule.")
        console.print()

    style = _get_status_style(summary.status)
    console.print(f"Overall Risk Score: [{style}]{summary.overall_score}/100 ({summary.status})[/]")
    console.print()


def _render_clauses(clauses: list[dict], filename: str, limit: int) -> None:
    """Render clauses as a rich table."""
    table = Table(title=f"Clauses: {filename}", show_lines=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Text (excerpt)", style="white", max_width=80)
    table.add_column("Page", justify="center", width=6)

    for i, clause in enumerate(clauses, 1):
        table.add_row(str(i), Text(report.excerpt(clause["text"], limit)), str(clause.get("page") or "-"))

    console.print(table)
    console.print(f"[dim]{len(clauses)} clause(s)[/]")
    console.print()


if __name__ == "__main__":
    main()
