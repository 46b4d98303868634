"""CSV export of job-match analysis history.

One row per stored job-match analysis (every historical record, not only the
latest) for the caller's selected jobs. Rendering goes through pandas with
standard CSV quoting: fields holding a delimiter, quote or newline are
double-quoted with inner quotes doubled.
"""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable

import pandas as pd

from ..domain.analysis import JOB_MATCH, AnalysisRecord, JobMatchResult, JobPosting
from ..domain.weights import WeightSet
from ..exceptions import NoJobIdsError, NotFoundError
from ..observability import get_logger
from ..protocols import AnalysisStore, JobDirectory
from .inputs import clean_job_ids, require_identifier
from .views import format_timestamp

logger = get_logger("job_match_analysis.application.export")

EXPORT_COLUMNS: tuple[str, ...] = (
    "Job ID",
    "Job Title",
    "Company",
    "Analysis Date",
    "Overall Score",
    "Skills Score",
    "Experience Score",
    "Education Score",
    "Requirements Score",
    "Top Strength",
    "Top Gap",
    "Weights",
)


def format_score(value: float | None) -> str:
    """Render a score without a trailing ``.0`` for whole numbers."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_weights(weights: WeightSet | None) -> str:
    if weights is None:
        return ""
    return json.dumps(weights.to_payload(), separators=(",", ":"))


def _export_row(posting: JobPosting, record: AnalysisRecord) -> list[str]:
    result = record.result
    if not isinstance(result, JobMatchResult):
        raise TypeError(f"Expected a job-match record, got {record.kind}")
    scores = result.category_scores
    strength = result.top_strength()
    gap = result.top_gap()
    return [
        posting.id,
        posting.title,
        posting.company,
        format_timestamp(record.analysis_date),
        format_score(result.overall_score),
        format_score(scores.skills),
        format_score(scores.experience),
        format_score(scores.education),
        format_score(scores.requirements),
        strength.description if strength else "",
        gap.description if gap else "",
        format_weights(record.weights_used),
    ]


def export_csv(
    *,
    store: AnalysisStore,
    jobs: JobDirectory,
    user_id: object,
    job_ids: Iterable[object],
) -> str:
    """Render the caller's job-match history for ``job_ids`` as CSV text.

    Ids are trimmed and de-duplicated; ids the caller does not own are skipped.

    Raises:
        NoJobIdsError: If no usable id remains after cleaning.
        NotFoundError: If none of the ids belongs to the caller.
    """
    user_key = require_identifier("user_id", user_id)
    selected = clean_job_ids(job_ids)
    if not selected:
        raise NoJobIdsError()

    owned: list[JobPosting] = []
    for job_id in selected:
        posting = jobs.get_job(job_id, user_key)
        if posting is None:
            logger.info("Skipping job %s in export: not found for user %s", job_id, user_key)
            continue
        owned.append(posting)
    if not owned:
        raise NotFoundError("Job", ", ".join(selected))

    rows: list[list[str]] = []
    for posting in owned:
        history = store.list_history(JOB_MATCH, posting.id, user_key)
        rows.extend(_export_row(posting, record) for record in history)

    logger.info("Exporting %s analyses across %s jobs", len(rows), len(owned))
    frame = pd.DataFrame(rows, columns=list(EXPORT_COLUMNS), dtype=str)
    # CRLF rows so fields holding a bare \r or \n are quoted as well.
    return frame.to_csv(index=False, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)
