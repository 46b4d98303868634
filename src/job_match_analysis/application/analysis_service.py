"""Get-or-compute orchestration for analyses, and saved weight preferences.

One request flows: resolve weights, read the store's latest record, decide
HIT or MISS, and on MISS call the scoring gateway and persist the new record.
Nothing is locked between the read and the write; two concurrent misses for
the same pair both call the oracle (job-match keeps both rows, skills-gap and
interview insights keep the last write).

Usage example:
    from job_match_analysis.application.analysis_service import AnalysisService

    service = AnalysisService(
        store=store,
        jobs=jobs,
        profiles=profiles,
        preferences=preferences,
        gateway=gateway,
    )
    outcome = service.get_or_compute("job-match", job_id, user_id, {"skills": 2})
    if outcome.cached:
        ...
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..domain.analysis import (
    JOB_MATCH,
    AnalysisKind,
    AnalysisRecord,
    CandidateProfile,
    JobPosting,
)
from ..domain.freshness import FreshnessWindows, decide_cache
from ..domain.weights import WeightModel, WeightSet, weights_equal
from ..exceptions import NoUsableWeightsError
from ..observability import get_logger
from ..protocols import AnalysisStore, JobDirectory, PreferenceStore, ProfileSource
from .inputs import require_identifier, require_kind, require_owned_job
from .scoring_gateway import ScoringGateway
from .views import AnalysisOutcome, PreferencesView

logger = get_logger("job_match_analysis.application.analysis_service")


@dataclass
class AnalysisService:
    store: AnalysisStore
    jobs: JobDirectory
    profiles: ProfileSource
    preferences: PreferenceStore
    gateway: ScoringGateway
    weight_model: WeightModel = field(default_factory=WeightModel)
    windows: FreshnessWindows = field(default_factory=FreshnessWindows)
    now_fn: Callable[[], datetime] | None = None

    def _now(self) -> datetime:
        clock = self.now_fn or (lambda: datetime.now(UTC))
        return clock()

    # -- weights ------------------------------------------------------------

    def resolve_weights(self, user_id: str, override: object = None) -> WeightSet:
        """Resolve default, then saved preference, then the request override."""
        return self.weight_model.resolve(self.preferences.get_weights(user_id), override)

    def get_preferences(self, user_id: object) -> PreferencesView:
        user_key = require_identifier("user_id", user_id)
        saved = self.preferences.get_weights(user_key)
        weights = self.weight_model.merge(saved)
        defaults = self.weight_model.defaults
        return PreferencesView(
            weights=weights,
            default_weights=defaults,
            is_custom=saved is not None and not weights_equal(weights, defaults),
        )

    def update_preferences(self, user_id: object, partial: object) -> PreferencesView:
        """Apply a partial update over the current preference and save it.

        Raises:
            NoUsableWeightsError: If ``partial`` carries no valid weight.
        """
        user_key = require_identifier("user_id", user_id)
        current = self.weight_model.merge(self.preferences.get_weights(user_key))
        update = self.weight_model.sanitize(partial, fallback=current)
        if update is None:
            raise NoUsableWeightsError()
        merged = self.weight_model.merge(current, update)
        self.preferences.save_weights(user_key, merged)
        logger.info("Updated job-match weights for user %s", user_key)
        return self.get_preferences(user_key)

    # -- get or compute -----------------------------------------------------

    def get_or_compute(
        self,
        kind: str,
        job_id: object,
        user_id: object,
        override_weights: object = None,
        force_refresh: bool = False,
    ) -> AnalysisOutcome:
        """Serve the stored analysis when still valid, otherwise recompute it.

        Raises:
            ValidationError: For missing identifiers or an unknown kind.
            NotFoundError: If the job does not exist or is not the caller's.
            ScoringUnavailable: If a recompute was needed and the oracle failed.
            StoreError: If the store could not be read or written.
        """
        analysis_kind = require_kind(kind)
        posting = require_owned_job(self.jobs, job_id, user_id)
        user_key = posting.user_id

        requested: WeightSet | None = None
        if analysis_kind == JOB_MATCH:
            requested = self.resolve_weights(user_key, override_weights)

        latest = self.store.get_latest(analysis_kind, posting.id, user_key)
        decision = decide_cache(
            kind=analysis_kind,
            latest=latest,
            requested_weights=requested,
            force_refresh=force_refresh,
            now=self._now(),
            windows=self.windows,
        )
        if decision.is_hit and latest is not None:
            logger.info(
                "Cache hit for %s analysis of job %s (age %s)",
                analysis_kind,
                posting.id,
                decision.age,
            )
            return AnalysisOutcome(
                record_id=latest.id,
                kind=analysis_kind,
                job_id=posting.id,
                result=latest.result,
                cached=True,
                analysis_date=latest.analysis_date,
                weights_used=latest.weights_used,
            )

        logger.info(
            "Cache miss (%s) for %s analysis of job %s",
            decision.reason,
            analysis_kind,
            posting.id,
        )
        record = self._compute(analysis_kind, posting, requested)
        return AnalysisOutcome(
            record_id=record.id,
            kind=analysis_kind,
            job_id=posting.id,
            result=record.result,
            cached=False,
            analysis_date=record.analysis_date,
            weights_used=record.weights_used,
        )

    def _compute(
        self, kind: AnalysisKind, posting: JobPosting, weights: WeightSet | None
    ) -> AnalysisRecord:
        profile = self.profiles.get_profile(posting.user_id)
        if profile is None:
            profile = CandidateProfile(user_id=posting.user_id)

        result = self.gateway.score(kind, profile, posting, weights)
        record = AnalysisRecord(
            id=uuid.uuid4().hex,
            kind=kind,
            job_id=posting.id,
            user_id=posting.user_id,
            analysis_date=self._now(),
            result=result,
            weights_used=weights if kind == JOB_MATCH else None,
        )
        if kind == JOB_MATCH:
            self.store.insert(record)
        else:
            self.store.upsert_current(record)
        return record
