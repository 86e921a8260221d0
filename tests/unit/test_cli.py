"""Tests for CLI module."""

import json
import sqlite3
from pathlib import Path

import pytest
from click.testing import CliRunner

from shelfmerge.cli.main import cli


@pytest.fixture
def runner() -> CliRunner:
    """Provide Click test CLI runner."""
    return CliRunner()


def _ids(path: Path, table: str) -> list[int]:
    conn = sqlite3.connect(path)
    try:
        return [row[0] for row in conn.execute(f'SELECT id FROM "{table}" ORDER BY id')]
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Top-level CLI
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cli_version_flag(runner: CliRunner) -> None:
    """Test --version flag outputs version string."""
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "shelfmerge" in result.output


@pytest.mark.unit
def test_cli_help(runner: CliRunner) -> None:
    """Test --help output lists commands."""
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "deduplicate" in result.output
    assert "merge" in result.output


@pytest.mark.unit
def test_cli_invalid_command(runner: CliRunner) -> None:
    """Test invalid command returns non-zero exit code."""
    result = runner.invoke(cli, ["invalid-command"])

    assert result.exit_code != 0


# ---------------------------------------------------------------------------
# deduplicate command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_deduplicate_help(runner: CliRunner) -> None:
    """Test deduplicate command help."""
    result = runner.invoke(cli, ["deduplicate", "--help"])

    assert result.exit_code == 0
    assert "--library" in result.output
    assert "--no-dry-run" in result.output


@pytest.mark.unit
def test_deduplicate_nonexistent_library(runner: CliRunner, tmp_path: Path) -> None:
    """Test deduplicate with a library file that does not exist."""
    result = runner.invoke(cli, ["deduplicate", "people", "-l", str(tmp_path / "none.db")])

    assert result.exit_code != 0


@pytest.mark.unit
def test_deduplicate_unknown_kind(runner: CliRunner, library_path: Path) -> None:
    """Test only known kinds are accepted."""
    result = runner.invoke(cli, ["deduplicate", "books", "-l", str(library_path)])

    assert result.exit_code != 0


@pytest.mark.unit
def test_deduplicate_people_dry_run(runner: CliRunner, library_path: Path) -> None:
    """Test the default run reports groups and leaves the library alone."""
    result = runner.invoke(cli, ["deduplicate", "people", "-l", str(library_path)])

    assert result.exit_code == 0
    assert "#6 'Margaret Atwood'" in result.output
    assert "<- #7 'Margaret Atwod'" in result.output
    assert "Skipped 1 low-confidence" in result.output
    assert _ids(library_path, "people") == [1, 2, 3, 4, 5, 6, 7]


@pytest.mark.unit
def test_deduplicate_threshold_option(runner: CliRunner, library_path: Path) -> None:
    """Test a lower confidence threshold accepts the weaker group."""
    result = runner.invoke(
        cli, ["deduplicate", "people", "-l", str(library_path), "--threshold", "0.85"]
    )

    assert result.exit_code == 0
    assert "#2 'Stephen Edwin King'" in result.output
    assert "<- #3 'King, Stephen'" in result.output


@pytest.mark.unit
def test_auto_merge_alone_stays_dry(runner: CliRunner, library_path: Path) -> None:
    """Test --auto-merge without --no-dry-run warns and writes nothing."""
    result = runner.invoke(
        cli, ["deduplicate", "tags", "-l", str(library_path), "--auto-merge"]
    )

    assert result.exit_code == 0
    assert "pass --no-dry-run to merge" in result.output
    assert _ids(library_path, "tags") == [1, 2, 3, 4, 5, 6]


@pytest.mark.unit
def test_deduplicate_merges_with_no_dry_run(runner: CliRunner, library_path: Path) -> None:
    """Test groups are merged when both flags are given."""
    result = runner.invoke(
        cli,
        ["deduplicate", "tags", "-l", str(library_path), "--auto-merge", "--no-dry-run"],
    )

    assert result.exit_code == 0
    assert "Merged 2 groups" in result.output
    assert _ids(library_path, "tags") == [1, 3, 5]


@pytest.mark.unit
def test_deduplicate_all_writes_report(
    runner: CliRunner, library_path: Path, tmp_path: Path
) -> None:
    """Test the report covers every kind in processing order."""
    report_path = tmp_path / "out" / "report.json"

    result = runner.invoke(
        cli, ["deduplicate", "all", "-l", str(library_path), "--report", str(report_path)]
    )

    assert result.exit_code == 0
    assert "Report written" in result.output
    report = json.loads(report_path.read_text())
    assert [entry["kind"] for entry in report["results"]] == [
        "person",
        "publisher",
        "series",
        "tag",
        "role",
    ]
    assert report["run_id"]


@pytest.mark.unit
def test_deduplicate_audit_log(runner: CliRunner, library_path: Path, tmp_path: Path) -> None:
    """Test the audit log brackets the run with start and finish events."""
    log_path = tmp_path / "events.jsonl"

    result = runner.invoke(
        cli, ["deduplicate", "tags", "-l", str(library_path), "--audit-log", str(log_path)]
    )

    assert result.exit_code == 0
    events = [json.loads(line) for line in log_path.read_text().splitlines() if line.strip()]
    assert events[0]["event"] == "run_started"
    assert events[-1]["event"] == "run_finished"
    assert events[-1]["data"]["status"] == "success"
    assert events[-1]["data"]["entities_processed"] == 6
    assert [e["entity_id"] for e in events if e["event"] == "group_found"] == [1, 3]


@pytest.mark.unit
def test_deduplicate_invalid_threshold(runner: CliRunner, library_path: Path) -> None:
    """Test an out-of-range threshold is reported as an error."""
    result = runner.invoke(
        cli, ["deduplicate", "tags", "-l", str(library_path), "--threshold", "1.5"]
    )

    assert result.exit_code == 1
    assert "Error" in result.output


@pytest.mark.unit
def test_deduplicate_verbose_flag(runner: CliRunner, library_path: Path) -> None:
    """Test verbose flag produces extra output."""
    result = runner.invoke(cli, ["deduplicate", "roles", "-l", str(library_path), "--verbose"])

    assert result.exit_code == 0
    assert "Deduplicating role" in result.output


# ---------------------------------------------------------------------------
# merge command
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_merge_command(runner: CliRunner, library_path: Path) -> None:
    """Test a hand-picked merge reports per-table counts."""
    result = runner.invoke(cli, ["merge", "people", "2", "1", "3", "-l", str(library_path)])

    assert result.exit_code == 0
    assert "Merged [1, 3] into #2 (2 references updated)" in result.output
    assert "x_books_people_roles: 2 updated, 1 collapsed" in result.output
    assert "x_contents_people_roles: 0 updated, 1 collapsed" in result.output
    assert _ids(library_path, "people") == [2, 4, 5, 6, 7]


@pytest.mark.unit
def test_merge_missing_id_fails(runner: CliRunner, library_path: Path) -> None:
    """Test a merge naming a missing id exits with an error and changes nothing."""
    result = runner.invoke(cli, ["merge", "tags", "1", "99", "-l", str(library_path)])

    assert result.exit_code == 1
    assert "not found" in result.output
    assert _ids(library_path, "tags") == [1, 2, 3, 4, 5, 6]


@pytest.mark.unit
def test_merge_requires_duplicates(runner: CliRunner, library_path: Path) -> None:
    """Test at least one duplicate id is required."""
    result = runner.invoke(cli, ["merge", "tags", "1", "-l", str(library_path)])

    assert result.exit_code != 0
