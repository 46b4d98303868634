"""Tests for CSV export of job-match history."""

import csv
import io
from datetime import timedelta

import pytest

from job_match_analysis.application.export import EXPORT_COLUMNS, format_score
from job_match_analysis.domain.weights import WeightSet
from job_match_analysis.exceptions import NoJobIdsError, NotFoundError
from tests.support.builders import FIXED_NOW, USER_ID, job_match_record
from tests.support.harness import EngineHarness


def _rows(csv_text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(csv_text)))


def test_header_and_one_row_per_analysis(harness: EngineHarness) -> None:
    harness.store.insert(
        job_match_record("job-1", 70, analysis_date=FIXED_NOW - timedelta(days=1))
    )
    harness.store.insert(job_match_record("job-1", 82.5, weights=WeightSet(skills=2.0)))

    csv_text = harness.engine().export_csv(USER_ID, ["job-1"])
    rows = _rows(csv_text)

    assert rows[0] == list(EXPORT_COLUMNS)
    assert len(rows) == 3
    latest = dict(zip(EXPORT_COLUMNS, rows[1], strict=True))
    assert latest["Job Title"] == "Backend Engineer"
    assert latest["Analysis Date"] == "2026-03-02T12:00:00.000Z"
    assert latest["Overall Score"] == "82.5"
    assert latest["Skills Score"] == "80"
    assert latest["Top Strength"] == "Strong Python background"
    assert latest["Top Gap"] == "No Kubernetes"
    assert latest["Weights"] == (
        '{"skills":2.0,"experience":1.0,"education":1.0,"requirements":1.0}'
    )


def test_quotes_and_commas_are_escaped_and_round_trip(harness: EngineHarness) -> None:
    description = 'He said, "great fit"'
    harness.store.insert(job_match_record("job-1", 70, strength=description))

    csv_text = harness.engine().export_csv(USER_ID, ["job-1"])

    assert '"He said, ""great fit"""' in csv_text
    assert _rows(csv_text)[1][EXPORT_COLUMNS.index("Top Strength")] == description


@pytest.mark.parametrize("description", ["line1\rline2", "line1\nline2", "line1\r\nline2"])
def test_line_breaks_inside_fields_are_quoted(harness: EngineHarness, description: str) -> None:
    harness.store.insert(job_match_record("job-1", 70, strength=description))

    csv_text = harness.engine().export_csv(USER_ID, ["job-1"])

    assert f'"{description}"' in csv_text
    rows = _rows(csv_text)
    assert len(rows) == 2
    assert rows[1][EXPORT_COLUMNS.index("Top Strength")] == description


def test_ids_are_trimmed_and_deduplicated(harness: EngineHarness) -> None:
    harness.store.insert(job_match_record("job-1", 70))
    harness.store.insert(job_match_record("job-2", 60))

    rows = _rows(harness.engine().export_csv(USER_ID, [" job-2 ", "job-1", "job-2", ""]))

    assert [row[0] for row in rows[1:]] == ["job-2", "job-1"]


def test_unowned_ids_are_skipped(harness: EngineHarness) -> None:
    harness.add_job("job-9", user_id="someone-else")
    harness.store.insert(job_match_record("job-9", 99, user_id="someone-else"))
    harness.store.insert(job_match_record("job-1", 70))

    rows = _rows(harness.engine().export_csv(USER_ID, ["job-9", "job-1"]))

    assert [row[0] for row in rows[1:]] == ["job-1"]


def test_owned_job_without_analyses_exports_header_only(harness: EngineHarness) -> None:
    csv_text = harness.engine().export_csv(USER_ID, ["job-2"])

    assert csv_text == ",".join(EXPORT_COLUMNS) + "\r\n"


def test_no_usable_ids_is_rejected(harness: EngineHarness) -> None:
    with pytest.raises(NoJobIdsError):
        harness.engine().export_csv(USER_ID, ["", "   "])


def test_only_unowned_ids_is_not_found(harness: EngineHarness) -> None:
    with pytest.raises(NotFoundError, match="job-404"):
        harness.engine().export_csv(USER_ID, ["job-404"])


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, ""), (80.0, "80"), (80, "80"), (82.5, "82.5")],
)
def test_format_score(value: float | None, expected: str) -> None:
    assert format_score(value) == expected
