"""Command-line interface for shelfmerge.

Provides CLI commands for finding and merging duplicate catalog entities.
"""

import importlib.metadata
import sys
import time
from pathlib import Path

import click

from shelfmerge.clustering import DEFAULT_THRESHOLD
from shelfmerge.engine import DEFAULT_MIN_FREQUENCY
from shelfmerge.models import DeduplicationResult, EntityKind

__all__ = ["cli", "ClickReporter", "KIND_CHOICES"]

try:
    __version__ = importlib.metadata.version("shelfmerge")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.1.0"  # Fallback for development

# CLI names are the table names users see in the library.
KIND_CHOICES: dict[str, EntityKind] = {
    "people": EntityKind.PERSON,
    "publishers": EntityKind.PUBLISHER,
    "series": EntityKind.SERIES,
    "tags": EntityKind.TAG,
    "roles": EntityKind.ROLE,
}


class ClickReporter:
    """Reporter that echoes to stderr through click.

    Parameters
    ----------
    verbose : bool
        Echo status and progress; errors are always shown.
    """

    def __init__(self, verbose: bool = False) -> None:
        """Initialize reporter."""
        self.verbose = verbose

    def status(self, message: str) -> None:
        """Echo status in verbose mode."""
        if self.verbose:
            click.echo(message, err=True)

    def progress(self, current: int, total: int) -> None:
        """Echo progress in verbose mode."""
        if self.verbose:
            click.echo(f"  [{current}/{total}]", err=True)

    def error(self, message: str) -> None:
        """Echo a warning."""
        click.secho(f"Warning: {message}", fg="yellow", err=True)


def _print_result(result: DeduplicationResult) -> None:
    """Summarize one kind's result on stdout."""
    click.secho(f"\n{result.kind}: {result.total_entities_considered} entities", bold=True)

    if not result.duplicate_groups:
        click.echo("  No duplicate groups found")
    for group in result.duplicate_groups:
        click.echo(
            f"  [{group.confidence:.2f}] #{group.primary_id} {group.primary_display_text!r}"
        )
        for dup_id, dup_text in zip(
            group.duplicate_ids, group.duplicate_display_texts, strict=True
        ):
            click.echo(f"      <- #{dup_id} {dup_text!r}")

    skipped = result.skipped_low_confidence_count + result.skipped_low_frequency_count
    if skipped:
        click.echo(
            f"  Skipped {result.skipped_low_confidence_count} low-confidence and "
            f"{result.skipped_low_frequency_count} low-frequency clusters"
        )
    if result.excluded_entity_ids:
        click.echo(f"  Excluded (empty names): {result.excluded_entity_ids}")

    if result.merge_stats is not None:
        click.secho(f"  ✓ Merged {result.merged_count} groups", fg="green")
    for failed in result.failed_groups:
        click.secho(
            f"  ✗ #{failed.group.primary_id}: {failed.error_type}: {failed.reason}",
            fg="red",
        )


@click.group()
@click.version_option(version=__version__, prog_name="shelfmerge")
def cli() -> None:
    """Find and merge duplicate people, publishers, series, tags and roles.

    Use 'shelfmerge COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("kind", type=click.Choice([*KIND_CHOICES, "all"]))
@click.option(
    "--library",
    "-l",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Catalog database file",
)
@click.option(
    "--threshold",
    type=float,
    default=None,
    help="Minimum cluster confidence (default: 0.90 for people, 0.85 otherwise)",
)
@click.option(
    "--similarity",
    type=float,
    default=DEFAULT_THRESHOLD,
    help=f"Similarity threshold for clustering (default: {DEFAULT_THRESHOLD})",
)
@click.option(
    "--min-frequency",
    type=int,
    default=DEFAULT_MIN_FREQUENCY,
    help=f"Minimum similarity edges per cluster (default: {DEFAULT_MIN_FREQUENCY})",
)
@click.option(
    "--auto-merge",
    is_flag=True,
    help="Merge accepted groups (requires --no-dry-run)",
)
@click.option(
    "--dry-run/--no-dry-run",
    default=True,
    help="Only report, never write (default: dry run)",
)
@click.option(
    "--report",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write a JSON report to this file",
)
@click.option(
    "--audit-log",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append JSONL audit events to this file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def deduplicate(
    kind: str,
    library: str,
    threshold: float | None,
    similarity: float,
    min_frequency: int,
    auto_merge: bool,
    dry_run: bool,
    report: str | None,
    audit_log: str | None,
    verbose: bool,
) -> None:
    """Find duplicate KIND entities and optionally merge them.

    KIND is one of people, publishers, series, tags, roles or all.
    Nothing is written unless both --auto-merge and --no-dry-run are given.

    Examples
    --------
        shelfmerge deduplicate people -l library.db
        shelfmerge deduplicate all -l library.db --report dedup.json
        shelfmerge deduplicate tags -l library.db --auto-merge --no-dry-run
    """
    from shelfmerge.api import deduplicate as run_deduplicate
    from shelfmerge.api import write_report
    from shelfmerge.audit import AuditLogger, generate_run_id
    from shelfmerge.engine import DeduplicationConfig
    from shelfmerge.reporting import AuditReporter, CompositeReporter, Reporter
    from shelfmerge.store import open_library

    kinds = list(KIND_CHOICES.values()) if kind == "all" else [KIND_CHOICES[kind]]
    run_id = generate_run_id()
    logger = AuditLogger(run_id, Path(audit_log)) if audit_log else None
    reporter: Reporter = ClickReporter(verbose)
    if logger:
        reporter = CompositeReporter([reporter, AuditReporter(logger)])

    if auto_merge and dry_run:
        click.echo("Dry run: pass --no-dry-run to merge.", err=True)

    start_time = time.perf_counter()
    results: list[DeduplicationResult] = []
    status = "failed"

    try:
        overrides = {
            "min_confidence": threshold,
            "min_frequency": min_frequency,
            "auto_merge": auto_merge,
            "dry_run": dry_run,
            "threshold": similarity,
        }
        if logger:
            logger.run_started(
                sys.argv,
                {"kinds": [str(k) for k in kinds], "library": library, **overrides},
            )

        conn = open_library(library)
        try:
            for entity_kind in kinds:
                config = DeduplicationConfig.for_kind(entity_kind, **overrides)
                if verbose:
                    click.echo(f"Deduplicating {entity_kind}: {config.to_dict()}", err=True)
                result = run_deduplicate(
                    conn, entity_kind, config, reporter=reporter, logger=logger
                )
                results.append(result)
                _print_result(result)
        finally:
            conn.close()

        if report:
            write_report(results, report, run_id=run_id)
            click.echo(f"\nReport written to {report}")

        status = "partial" if any(r.failed_groups for r in results) else "success"

    except Exception as e:
        if logger:
            logger.error(type(e).__name__, str(e))
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)

    finally:
        if logger:
            logger.run_finished(
                status,
                time.perf_counter() - start_time,
                entities_processed=sum(r.total_entities_considered for r in results),
            )
            logger.close()


@cli.command()
@click.argument("kind", type=click.Choice(list(KIND_CHOICES)))
@click.argument("primary_id", type=int)
@click.argument("duplicate_ids", type=int, nargs=-1, required=True)
@click.option(
    "--library",
    "-l",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="Catalog database file",
)
def merge(kind: str, primary_id: int, duplicate_ids: tuple[int, ...], library: str) -> None:
    """Merge DUPLICATE_IDS into PRIMARY_ID in one transaction.

    Every reference to a duplicate is moved to the primary, then the
    duplicates are deleted.

    Examples
    --------
        shelfmerge merge people 2 1 3 -l library.db
    """
    from shelfmerge.api import merge_entities
    from shelfmerge.store import open_library

    try:
        conn = open_library(library)
        try:
            stats = merge_entities(conn, KIND_CHOICES[kind], primary_id, duplicate_ids)
        finally:
            conn.close()
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    click.secho(
        f"✓ Merged {list(stats.merged_ids)} into #{stats.primary_id} "
        f"({stats.total_rows_updated} references updated)",
        fg="green",
    )
    for table, count in sorted(stats.rows_updated_by_table.items()):
        collapsed = stats.rows_collapsed_by_table.get(table, 0)
        click.echo(f"  {table}: {count} updated, {collapsed} collapsed")


if __name__ == "__main__":
    cli()
