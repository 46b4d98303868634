"""Produced interface of the match analysis engine.

``MatchAnalysisEngine`` is what an HTTP layer or the CLI talks to. It owns no
state of its own; every call is recomputed from the store.

Usage example:
    from job_match_analysis.application.engine import MatchAnalysisEngine

    engine = MatchAnalysisEngine.build(
        store=store,
        jobs=jobs,
        profiles=profiles,
        preferences=preferences,
        oracle=oracle,
        config=EngineConfig.from_env(),
    )
    outcome = engine.get_or_compute("job-match", job_id, user_id, force_refresh=True)
    csv_text = engine.export_csv(user_id, [job_id])
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from ..config import EngineConfig
from ..protocols import AnalysisStore, JobDirectory, PreferenceStore, ProfileSource, ScoringOracle
from .aggregation import (
    build_comparison,
    build_history_view,
    build_progress_view,
    build_trends_view,
)
from .analysis_service import AnalysisService
from .export import export_csv
from .scoring_gateway import ScoringGateway
from .views import (
    AnalysisOutcome,
    ComparisonRow,
    HistoryView,
    PreferencesView,
    ProgressView,
    TrendsView,
)


@dataclass
class MatchAnalysisEngine:
    service: AnalysisService

    @classmethod
    def build(
        cls,
        *,
        store: AnalysisStore,
        jobs: JobDirectory,
        profiles: ProfileSource,
        preferences: PreferenceStore,
        oracle: ScoringOracle,
        config: EngineConfig | None = None,
        now_fn: Callable[[], datetime] | None = None,
    ) -> MatchAnalysisEngine:
        settings = config or EngineConfig()
        return cls(
            service=AnalysisService(
                store=store,
                jobs=jobs,
                profiles=profiles,
                preferences=preferences,
                gateway=ScoringGateway(oracle=oracle),
                weight_model=settings.weight_model(),
                windows=settings.freshness_windows(),
                now_fn=now_fn,
            )
        )

    @property
    def store(self) -> AnalysisStore:
        return self.service.store

    @property
    def jobs(self) -> JobDirectory:
        return self.service.jobs

    def get_or_compute(
        self,
        kind: str,
        job_id: object,
        user_id: object,
        override_weights: object = None,
        force_refresh: bool = False,
    ) -> AnalysisOutcome:
        return self.service.get_or_compute(
            kind, job_id, user_id, override_weights=override_weights, force_refresh=force_refresh
        )

    def get_history(self, job_id: object, user_id: object, limit: int | None = None) -> HistoryView:
        return build_history_view(
            store=self.store, jobs=self.jobs, job_id=job_id, user_id=user_id, limit=limit
        )

    def get_comparison(
        self,
        user_id: object,
        status: str | None = None,
        limit: int | None = None,
        min_score: float | None = None,
    ) -> list[ComparisonRow]:
        return build_comparison(
            store=self.store,
            jobs=self.jobs,
            user_id=user_id,
            status=status,
            limit=limit,
            min_score=min_score,
        )

    def get_progress(self, job_id: object, user_id: object) -> ProgressView:
        return build_progress_view(store=self.store, jobs=self.jobs, job_id=job_id, user_id=user_id)

    def get_trends(self, user_id: object) -> TrendsView:
        return build_trends_view(store=self.store, jobs=self.jobs, user_id=user_id)

    def export_csv(self, user_id: object, job_ids: Iterable[object]) -> str:
        return export_csv(store=self.store, jobs=self.jobs, user_id=user_id, job_ids=job_ids)

    def get_preferences(self, user_id: object) -> PreferencesView:
        return self.service.get_preferences(user_id)

    def update_preferences(self, user_id: object, partial: object) -> PreferencesView:
        return self.service.update_preferences(user_id, partial)
