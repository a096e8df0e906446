"""CLI entry point for ledgerdrop."""

import logging
import sys
from pathlib import Path

import click

from .config import load_settings
from .domain.models import FinalReport, ProcessingOutcome
from .watcher import create_ingestion_service, run_watcher


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_outcome(outcome: ProcessingOutcome) -> str:
    """One-line summary of a document outcome."""
    mark = "✓" if outcome.success else "✗"
    line = (
        f"{mark} {outcome.document_name}: "
        f"{len(outcome.created_invoice_ids)} invoice(s), "
        f"{len(outcome.created_credit_ids)} credit memo(s) -> {outcome.location or '?'}"
    )
    if outcome.errors:
        line += f" {outcome.errors}"
    return line


def format_summary(report: FinalReport) -> str:
    failed = len(report.failed)
    return (
        f"Processed: {report.files_processed} files, "
        f"{report.files_processed - failed} success, {failed} errors"
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Ledgerdrop - create invoices and credit memos from JSON batch files."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command()
@click.option("-w", "--workers", type=click.IntRange(min=1), help="Parallel documents")
@click.option("--strict", is_flag=True, help="Exit 1 if any document had errors")
@click.pass_context
def run(ctx: click.Context, workers: int | None, strict: bool) -> None:
    """Process every pending document and write the run report."""
    settings = load_settings(ctx.obj["config_path"])
    if workers:
        settings.run.workers = workers

    service = create_ingestion_service(settings)
    try:
        report, report_id = service.run()
    except Exception as e:
        click.echo(f"Error: cannot list pending documents: {e}", err=True)
        sys.exit(1)
    finally:
        service.close()

    for outcome in report.results:
        click.echo(format_outcome(outcome), err=not outcome.success)
    if report_id:
        click.echo(f"report: {report_id}")
    else:
        click.echo("report: not written", err=True)
    click.echo(f"\n{format_summary(report)}")

    if strict and report.failed:
        sys.exit(1)


@cli.command()
@click.argument("name")
@click.pass_context
def process(ctx: click.Context, name: str) -> None:
    """Process a single pending document by file name."""
    settings = load_settings(ctx.obj["config_path"])
    service = create_ingestion_service(settings)

    try:
        outcome = service.process_document(name)
    except (LookupError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        service.close()

    if outcome.success:
        click.echo(format_outcome(outcome))
        for record_id in outcome.created_invoice_ids:
            click.echo(f"invoice: {record_id}")
        for record_id in outcome.created_credit_ids:
            click.echo(f"credit memo: {record_id}")
    else:
        click.echo(format_outcome(outcome), err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def watch(ctx: click.Context) -> None:
    """Run the input folder watcher daemon."""
    settings = load_settings(ctx.obj["config_path"])
    run_watcher(settings)


if __name__ == "__main__":
    cli()
