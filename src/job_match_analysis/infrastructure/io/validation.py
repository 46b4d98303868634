"""Pydantic-based validation for analysis payloads.

Two entry points per payload family:

- ``parse_oracle_result`` is strict. Oracle output that does not match the
  kind's schema raises ``IncomingDataError`` so it can never be cached.
- ``parse_stored_result`` / ``parse_stored_weights`` are lenient. Stored JSON
  written by older versions (or damaged) degrades to empty/zero values or
  None instead of failing a read.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ...domain.analysis import (
    INTERVIEW_INSIGHTS,
    JOB_MATCH,
    SKILLS_GAP,
    AnalysisKind,
    AnalysisResult,
    CandidateProfile,
    CategoryScores,
    Gap,
    ImprovementSuggestion,
    InterviewInsightsResult,
    JobMatchResult,
    LearningStep,
    MatchedSkill,
    MissingSkill,
    ProfileEducation,
    ProfileExperience,
    ProfileSkill,
    SkillMatch,
    SkillShortfall,
    SkillsGapResult,
    Strength,
    WeakSkill,
)
from ...domain.weights import WeightSet, sanitize_weight_input


class IncomingDataError(ValueError):
    """Raised when inbound data fails validation."""


# Strict numbers: JSON booleans and numeric strings are not scores.
Score = Annotated[float, Field(ge=0, le=100, strict=True)]


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)


class _CategoryScoresModel(_PayloadModel):
    skills: Score
    experience: Score
    education: Score
    requirements: Score


class _StrengthModel(_PayloadModel):
    category: str
    description: str
    evidence: list[str] = Field(default_factory=list)


class _GapModel(_PayloadModel):
    category: str
    description: str
    impact: str
    suggestions: list[str] = Field(default_factory=list)


class _SuggestionModel(_PayloadModel):
    type: str
    title: str
    description: str
    priority: str


class _MatchedSkillModel(_PayloadModel):
    skill_name: str = Field(alias="skillName")
    relevance: Score


class _MissingSkillModel(_PayloadModel):
    skill_name: str = Field(alias="skillName")
    importance: Score


class _JobMatchModel(_PayloadModel):
    overall_match_score: Score = Field(alias="overallMatchScore")
    category_scores: _CategoryScoresModel = Field(alias="categoryScores")
    strengths: list[_StrengthModel]
    gaps: list[_GapModel]
    improvement_suggestions: list[_SuggestionModel] = Field(alias="improvementSuggestions")
    matched_skills: list[_MatchedSkillModel] = Field(alias="matchedSkills")
    missing_skills: list[_MissingSkillModel] = Field(alias="missingSkills")


class _SkillMatchModel(_PayloadModel):
    skill_name: str = Field(alias="skillName")
    user_proficiency: str = Field(alias="userProficiency")
    job_requirement: str = Field(alias="jobRequirement")
    match_strength: str = Field(alias="matchStrength")


class _SkillShortfallModel(_PayloadModel):
    skill_name: str = Field(alias="skillName")
    importance: str
    impact: Score
    estimated_learning_time: str = Field(alias="estimatedLearningTime")


class _WeakSkillModel(_PayloadModel):
    skill_name: str = Field(alias="skillName")
    current_proficiency: str = Field(alias="currentProficiency")
    recommended_proficiency: str = Field(alias="recommendedProficiency")
    improvement_priority: str = Field(alias="improvementPriority")


class _LearningStepModel(_PayloadModel):
    skill_name: str = Field(alias="skillName")
    priority: int = Field(ge=1, strict=True)
    reason: str
    estimated_time: str = Field(alias="estimatedTime")


class _SkillsGapModel(_PayloadModel):
    overall_gap_score: Score = Field(alias="overallGapScore")
    matched_skills: list[_SkillMatchModel] = Field(alias="matchedSkills")
    missing_skills: list[_SkillShortfallModel] = Field(alias="missingSkills")
    weak_skills: list[_WeakSkillModel] = Field(alias="weakSkills")
    learning_resources: list[dict[str, object]] = Field(alias="learningResources")
    prioritized_learning_path: list[_LearningStepModel] = Field(alias="prioritizedLearningPath")


def validate_as[SchemaT](schema: type[SchemaT], payload: object) -> SchemaT:
    try:
        return TypeAdapter(schema).validate_python(payload)
    except PydanticValidationError as exc:
        message = f"Invalid payload for {schema}."
        raise IncomingDataError(message) from exc


def _first_error(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


# ---------------------------------------------------------------------------
# Lenient field helpers
# ---------------------------------------------------------------------------


def _as_str(value: object) -> str:
    return value if isinstance(value, str) else ""


def _has_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _as_float(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 0.0
    return 0.0


def _as_int(value: object, default: int = 0) -> int:
    number = _as_float(value)
    return int(number) if number else default


def _as_str_tuple(value: object) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    return tuple(item for item in value if _has_text(item))


def _as_mappings(value: object) -> list[Mapping[str, object]]:
    """Return the mapping items of a list, skipping anything else."""
    if not isinstance(value, list | tuple):
        return []
    return [item for item in value if isinstance(item, Mapping)]


def _as_mapping(value: object) -> Mapping[str, object]:
    return value if isinstance(value, Mapping) else {}


# ---------------------------------------------------------------------------
# Strict builders (oracle output, from validated models)
# ---------------------------------------------------------------------------


def _job_match_from_model(model: _JobMatchModel) -> JobMatchResult:
    categories = model.category_scores
    return JobMatchResult(
        overall_score=model.overall_match_score,
        category_scores=CategoryScores(
            skills=categories.skills,
            experience=categories.experience,
            education=categories.education,
            requirements=categories.requirements,
        ),
        strengths=tuple(
            Strength(
                category=item.category,
                description=item.description,
                evidence=tuple(item.evidence),
            )
            for item in model.strengths
        ),
        gaps=tuple(
            Gap(
                category=item.category,
                description=item.description,
                impact=item.impact,
                suggestions=tuple(item.suggestions),
            )
            for item in model.gaps
        ),
        improvement_suggestions=tuple(
            ImprovementSuggestion(
                type=item.type,
                title=item.title,
                description=item.description,
                priority=item.priority,
            )
            for item in model.improvement_suggestions
        ),
        matched_skills=tuple(
            MatchedSkill(skill_name=item.skill_name, relevance=item.relevance)
            for item in model.matched_skills
        ),
        missing_skills=tuple(
            MissingSkill(skill_name=item.skill_name, importance=item.importance)
            for item in model.missing_skills
        ),
    )


def _skills_gap_from_model(model: _SkillsGapModel) -> SkillsGapResult:
    return SkillsGapResult(
        overall_gap_score=model.overall_gap_score,
        matched_skills=tuple(
            SkillMatch(
                skill_name=item.skill_name,
                user_proficiency=item.user_proficiency,
                job_requirement=item.job_requirement,
                match_strength=item.match_strength,
            )
            for item in model.matched_skills
        ),
        missing_skills=tuple(
            SkillShortfall(
                skill_name=item.skill_name,
                importance=item.importance,
                impact=item.impact,
                estimated_learning_time=item.estimated_learning_time,
            )
            for item in model.missing_skills
        ),
        weak_skills=tuple(
            WeakSkill(
                skill_name=item.skill_name,
                current_proficiency=item.current_proficiency,
                recommended_proficiency=item.recommended_proficiency,
                improvement_priority=item.improvement_priority,
            )
            for item in model.weak_skills
        ),
        learning_resources=tuple(
            MappingProxyType(dict(item)) for item in model.learning_resources
        ),
        prioritized_learning_path=tuple(
            LearningStep(
                skill_name=item.skill_name,
                priority=item.priority,
                reason=item.reason,
                estimated_time=item.estimated_time,
            )
            for item in model.prioritized_learning_path
        ),
    )


# ---------------------------------------------------------------------------
# Lenient builders (stored data)
# ---------------------------------------------------------------------------


def _build_job_match(payload: Mapping[str, object]) -> JobMatchResult:
    categories = _as_mapping(payload.get("categoryScores"))
    return JobMatchResult(
        overall_score=_as_float(payload.get("overallMatchScore")),
        category_scores=CategoryScores(
            skills=_as_float(categories.get("skills")),
            experience=_as_float(categories.get("experience")),
            education=_as_float(categories.get("education")),
            requirements=_as_float(categories.get("requirements")),
        ),
        strengths=tuple(
            Strength(
                category=_as_str(item.get("category")),
                description=_as_str(item.get("description")),
                evidence=_as_str_tuple(item.get("evidence")),
            )
            for item in _as_mappings(payload.get("strengths"))
        ),
        gaps=tuple(
            Gap(
                category=_as_str(item.get("category")),
                description=_as_str(item.get("description")),
                impact=_as_str(item.get("impact")),
                suggestions=_as_str_tuple(item.get("suggestions")),
            )
            for item in _as_mappings(payload.get("gaps"))
        ),
        improvement_suggestions=tuple(
            ImprovementSuggestion(
                type=_as_str(item.get("type")),
                title=_as_str(item.get("title")),
                description=_as_str(item.get("description")),
                priority=_as_str(item.get("priority")),
            )
            for item in _as_mappings(payload.get("improvementSuggestions"))
        ),
        matched_skills=tuple(
            MatchedSkill(
                skill_name=_as_str(item.get("skillName")),
                relevance=_as_float(item.get("relevance")),
            )
            for item in _as_mappings(payload.get("matchedSkills"))
            if _has_text(item.get("skillName"))
        ),
        missing_skills=tuple(
            MissingSkill(
                skill_name=_as_str(item.get("skillName")),
                importance=_as_float(item.get("importance")),
            )
            for item in _as_mappings(payload.get("missingSkills"))
            if _has_text(item.get("skillName"))
        ),
    )


def _build_skills_gap(payload: Mapping[str, object]) -> SkillsGapResult:
    return SkillsGapResult(
        overall_gap_score=_as_float(payload.get("overallGapScore")),
        matched_skills=tuple(
            SkillMatch(
                skill_name=_as_str(item.get("skillName")),
                user_proficiency=_as_str(item.get("userProficiency")),
                job_requirement=_as_str(item.get("jobRequirement")),
                match_strength=_as_str(item.get("matchStrength")),
            )
            for item in _as_mappings(payload.get("matchedSkills"))
            if _has_text(item.get("skillName"))
        ),
        missing_skills=tuple(
            SkillShortfall(
                skill_name=_as_str(item.get("skillName")),
                importance=_as_str(item.get("importance")),
                impact=_as_float(item.get("impact")),
                estimated_learning_time=_as_str(item.get("estimatedLearningTime")),
            )
            for item in _as_mappings(payload.get("missingSkills"))
            if _has_text(item.get("skillName"))
        ),
        weak_skills=tuple(
            WeakSkill(
                skill_name=_as_str(item.get("skillName")),
                current_proficiency=_as_str(item.get("currentProficiency")),
                recommended_proficiency=_as_str(item.get("recommendedProficiency")),
                improvement_priority=_as_str(item.get("improvementPriority")),
            )
            for item in _as_mappings(payload.get("weakSkills"))
            if _has_text(item.get("skillName"))
        ),
        learning_resources=tuple(
            MappingProxyType(dict(item)) for item in _as_mappings(payload.get("learningResources"))
        ),
        prioritized_learning_path=tuple(
            LearningStep(
                skill_name=_as_str(item.get("skillName")),
                priority=_as_int(item.get("priority"), default=1),
                reason=_as_str(item.get("reason")),
                estimated_time=_as_str(item.get("estimatedTime")),
            )
            for item in _as_mappings(payload.get("prioritizedLearningPath"))
            if _has_text(item.get("skillName"))
        ),
    )


def _build_interview_insights(payload: Mapping[str, object]) -> InterviewInsightsResult:
    return InterviewInsightsResult(payload=MappingProxyType(dict(payload)))


# ---------------------------------------------------------------------------
# Public parsers
# ---------------------------------------------------------------------------


def parse_oracle_result(kind: AnalysisKind, payload: object) -> AnalysisResult:
    """Validate oracle output against the kind's schema.

    Raises:
        IncomingDataError: If a required field is missing or out of range.
    """
    if not isinstance(payload, Mapping):
        raise IncomingDataError(f"Oracle returned {type(payload).__name__}, expected an object.")
    try:
        if kind == JOB_MATCH:
            return _job_match_from_model(_JobMatchModel.model_validate(payload))
        if kind == SKILLS_GAP:
            return _skills_gap_from_model(_SkillsGapModel.model_validate(payload))
    except PydanticValidationError as exc:
        raise IncomingDataError(_first_error(exc)) from exc
    if kind == INTERVIEW_INSIGHTS:
        if not payload:
            raise IncomingDataError("Oracle returned an empty interview insights payload.")
        return _build_interview_insights(payload)
    raise IncomingDataError(f"Unknown analysis kind: {kind}")


def parse_stored_result(kind: AnalysisKind, payload: object) -> AnalysisResult:
    """Rebuild a stored result, tolerating missing or malformed fields."""
    mapping = _as_mapping(payload)
    if kind == JOB_MATCH:
        return _build_job_match(mapping)
    if kind == SKILLS_GAP:
        return _build_skills_gap(mapping)
    return _build_interview_insights(mapping)


def parse_stored_weights(payload: object, *, fallback: WeightSet) -> WeightSet | None:
    """Rebuild a stored weights blob; None when nothing usable remains."""
    return sanitize_weight_input(payload, defaults=fallback)


def parse_profile_payload(user_id: str, payload: object) -> CandidateProfile:
    """Rebuild a candidate profile from its stored JSON shape."""
    mapping = _as_mapping(payload)
    return CandidateProfile(
        user_id=user_id,
        skills=tuple(
            ProfileSkill(
                skill_name=_as_str(item.get("skillName")),
                proficiency_level=_as_str(item.get("proficiencyLevel")),
            )
            for item in _as_mappings(mapping.get("skills"))
            if _has_text(item.get("skillName"))
        ),
        experience=tuple(
            ProfileExperience(
                position_title=_as_str(item.get("positionTitle")),
                company_name=_as_str(item.get("companyName")),
                description=_as_str(item.get("description")),
            )
            for item in _as_mappings(mapping.get("experience"))
            if _has_text(item.get("positionTitle"))
        ),
        education=tuple(
            ProfileEducation(
                degree_type=_as_str(item.get("degreeType")),
                major=_as_str(item.get("major")),
            )
            for item in _as_mappings(mapping.get("education"))
            if _has_text(item.get("degreeType"))
        ),
    )
