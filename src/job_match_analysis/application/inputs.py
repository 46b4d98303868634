"""Request-level input checks shared by the application services."""

from __future__ import annotations

from collections.abc import Iterable

from ..domain.analysis import ANALYSIS_KINDS, AnalysisKind, JobPosting
from ..exceptions import MissingIdentifierError, NotFoundError, UnknownAnalysisKindError
from ..protocols import JobDirectory

MAX_LIMIT = 100


def require_identifier(name: str, value: object) -> str:
    """Return the trimmed identifier or raise ``MissingIdentifierError``."""
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise MissingIdentifierError(name)
    return text


def require_owned_job(jobs: JobDirectory, job_id: object, user_id: object) -> JobPosting:
    """Return the caller's job; missing and foreign jobs are both NotFoundError."""
    job_key = require_identifier("job_id", job_id)
    user_key = require_identifier("user_id", user_id)
    posting = jobs.get_job(job_key, user_key)
    if posting is None:
        raise NotFoundError("Job", job_key)
    return posting


def require_kind(kind: str) -> AnalysisKind:
    for known in ANALYSIS_KINDS:
        if kind == known:
            return known
    raise UnknownAnalysisKindError(kind)


def clamp_limit(limit: int | None, *, default: int) -> int:
    """Clamp a caller-supplied page size into ``[1, MAX_LIMIT]``."""
    if limit is None:
        return default
    return max(1, min(MAX_LIMIT, limit))


def clean_job_ids(job_ids: Iterable[object]) -> list[str]:
    """Trim, drop empties and de-duplicate, keeping first-seen order."""
    seen: dict[str, None] = {}
    for raw in job_ids:
        if not isinstance(raw, str):
            continue
        job_id = raw.strip()
        if job_id:
            seen.setdefault(job_id, None)
    return list(seen)
