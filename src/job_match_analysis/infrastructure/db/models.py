"""SQLAlchemy models for stored analyses and the read-only CRUD tables they join."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ═══════════════════════════════════════════════════════════════════
# ANALYSES
# ═══════════════════════════════════════════════════════════════════


class JobMatchAnalysisRow(Base):
    """Append-only job-match history. The newest row per pair is current."""

    __tablename__ = "job_match_analyses"
    __table_args__ = (
        Index("ix_job_match_pair_date", "job_id", "user_id", "analysis_date"),
    )

    # Insertion order breaks ties between rows with equal timestamps.
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    job_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    analysis_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    result: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)
    weights_used: Mapped[dict[str, object] | None] = mapped_column(JSON, nullable=True)


class SkillsGapAnalysisRow(Base):
    """Current skills-gap analysis, one row per pair."""

    __tablename__ = "skills_gap_analyses"
    __table_args__ = (UniqueConstraint("job_id", "user_id", name="uq_skills_gap_pair"),)

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    job_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    analysis_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    result: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)


class SkillsGapSnapshotRow(Base):
    """Immutable skills-gap history, written alongside every current-row upsert."""

    __tablename__ = "skills_gap_snapshots"
    __table_args__ = (
        Index("ix_skills_gap_snapshot_pair_date", "job_id", "user_id", "snapshot_date"),
    )

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    job_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    snapshot_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    result: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)


class InterviewInsightsRow(Base):
    """Current interview insights, one row per pair, no history."""

    __tablename__ = "interview_insights"
    __table_args__ = (UniqueConstraint("job_id", "user_id", name="uq_interview_insights_pair"),)

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    job_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    analysis_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    result: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)


# ═══════════════════════════════════════════════════════════════════
# CRUD-OWNED TABLES (read here, written elsewhere)
# ═══════════════════════════════════════════════════════════════════


class JobOpportunityRow(Base):
    __tablename__ = "job_opportunities"
    __table_args__ = (Index("ix_job_opportunities_user", "user_id"),)

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class CandidateProfileRow(Base):
    __tablename__ = "candidate_profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    profile: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)


class JobMatchPreferenceRow(Base):
    __tablename__ = "job_match_preferences"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    weights: Mapped[dict[str, object]] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
