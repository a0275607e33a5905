# tests/test_cli.py
"""
CLI tests via Typer's CliRunner.

Each test points CHRONOLOGICON_DATABASE_URL at a temporary SQLite file and
reads the ``--json`` output so assertions do not depend on Rich rendering.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from factories import record_line, uid
from typer.testing import CliRunner

from chronologicon.cli import app
from chronologicon.core.settings import load_settings

runner = CliRunner()


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _database(monkeypatch: pytest.MonkeyPatch, database_url: str) -> None:
    monkeypatch.setenv("CHRONOLOGICON_DATABASE_URL", database_url)
    load_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def events_file(tmp_path: Path) -> Path:
    path = tmp_path / "events.txt"
    lines = [
        record_line(1, "2023-01-01T10:00:00Z", "2023-01-01T12:00:00Z", name="Council"),
        record_line(
            2, "2023-01-01T11:00:00Z", "2023-01-01T11:30:00Z", name="Vote", parent=uid(1)
        ),
        record_line(3, "2023-01-05T09:00:00Z", "2023-01-05T10:00:00Z", name="Feast"),
        "this line is broken",
    ]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def _ingest(path: Path) -> dict[str, Any]:
    result = runner.invoke(app, ["ingest", str(path), "--json", "--poll-interval", "0.01"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("ingest", "overlaps", "gaps", "path", "timeline", "search"):
        assert command in result.stdout


def test_init_db() -> None:
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0
    assert "Schema ready" in result.stdout


def test_ingest_reports_the_finished_job(events_file: Path) -> None:
    job = _ingest(events_file)
    assert job["status"] == "COMPLETED"
    assert job["processed_count"] == 3
    assert job["error_count"] == 1
    assert job["total_lines"] == 4
    assert job["errors"][0].startswith("Line 4: Malformed entry")
    assert job["end_time"].endswith("Z")


def test_ingest_rejects_a_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["ingest", str(tmp_path / "missing.txt")])
    assert result.exit_code != 0


def test_overlaps(events_file: Path) -> None:
    _ingest(events_file)
    result = runner.invoke(app, ["overlaps", "2023-01-01", "2023-01-02", "--json"])
    assert result.exit_code == 0, result.output
    pairs = json.loads(result.stdout)
    assert len(pairs) == 1
    assert [e["event_id"] for e in pairs[0]["overlapping_event_pairs"]] == [uid(1), uid(2)]
    assert pairs[0]["overlap_duration_minutes"] == 30


def test_gaps(events_file: Path) -> None:
    _ingest(events_file)
    result = runner.invoke(
        app, ["gaps", "2023-01-01T10:00:00Z", "2023-01-05T10:00:00Z", "--json"]
    )
    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["message"] == "Largest temporal gap identified."
    assert report["largest_gap"]["start_of_gap"] == "2023-01-01T12:00:00.000Z"
    assert report["largest_gap"]["end_of_gap"] == "2023-01-05T09:00:00.000Z"


def test_gaps_rejects_bad_bounds() -> None:
    result = runner.invoke(app, ["gaps", "someday", "2023-01-02"])
    assert result.exit_code != 0


def test_path(events_file: Path) -> None:
    _ingest(events_file)
    result = runner.invoke(app, ["path", uid(2), uid(1), "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert [n["event_id"] for n in payload["shortest_path"]] == [uid(2), uid(1)]
    assert payload["total_duration_minutes"] == 150


def test_path_between_unrelated_events(events_file: Path) -> None:
    _ingest(events_file)
    result = runner.invoke(app, ["path", uid(1), uid(3), "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["message"] == (
        "No temporal path found from source to target event."
    )


def test_timeline(events_file: Path) -> None:
    _ingest(events_file)
    result = runner.invoke(app, ["timeline", uid(2), "--json"])
    assert result.exit_code == 0, result.output
    root = json.loads(result.stdout)
    assert root["event_id"] == uid(1)
    assert [c["event_id"] for c in root["children"]] == [uid(2)]


def test_timeline_unknown_event() -> None:
    result = runner.invoke(app, ["timeline", uid(404)])
    assert result.exit_code == 1


def test_search(events_file: Path) -> None:
    _ingest(events_file)
    result = runner.invoke(app, ["search", "--name", "feast", "--json"])
    assert result.exit_code == 0, result.output
    page = json.loads(result.stdout)
    assert page["total_events"] == 1
    assert page["events"][0]["event_name"] == "Feast"
