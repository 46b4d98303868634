"""JSON-ready renderings of domain objects.

The shapes mirror what the oracle returns (camelCase keys), so a stored
result read back through ``parse_stored_result`` yields an equal object.
"""

from __future__ import annotations

from ...domain.analysis import (
    AnalysisResult,
    CandidateProfile,
    InterviewInsightsResult,
    JobMatchResult,
    JobPosting,
    ScoringRequest,
    SkillsGapResult,
)
from ...domain.weights import weight_percentages


def _job_match_payload(result: JobMatchResult) -> dict[str, object]:
    categories = result.category_scores
    return {
        "overallMatchScore": result.overall_score,
        "categoryScores": {
            "skills": categories.skills,
            "experience": categories.experience,
            "education": categories.education,
            "requirements": categories.requirements,
        },
        "strengths": [
            {
                "category": strength.category,
                "description": strength.description,
                "evidence": list(strength.evidence),
            }
            for strength in result.strengths
        ],
        "gaps": [
            {
                "category": gap.category,
                "description": gap.description,
                "impact": gap.impact,
                "suggestions": list(gap.suggestions),
            }
            for gap in result.gaps
        ],
        "improvementSuggestions": [
            {
                "type": suggestion.type,
                "title": suggestion.title,
                "description": suggestion.description,
                "priority": suggestion.priority,
            }
            for suggestion in result.improvement_suggestions
        ],
        "matchedSkills": [
            {"skillName": skill.skill_name, "relevance": skill.relevance}
            for skill in result.matched_skills
        ],
        "missingSkills": [
            {"skillName": skill.skill_name, "importance": skill.importance}
            for skill in result.missing_skills
        ],
    }


def _skills_gap_payload(result: SkillsGapResult) -> dict[str, object]:
    return {
        "overallGapScore": result.overall_gap_score,
        "matchedSkills": [
            {
                "skillName": skill.skill_name,
                "userProficiency": skill.user_proficiency,
                "jobRequirement": skill.job_requirement,
                "matchStrength": skill.match_strength,
            }
            for skill in result.matched_skills
        ],
        "missingSkills": [
            {
                "skillName": skill.skill_name,
                "importance": skill.importance,
                "impact": skill.impact,
                "estimatedLearningTime": skill.estimated_learning_time,
            }
            for skill in result.missing_skills
        ],
        "weakSkills": [
            {
                "skillName": skill.skill_name,
                "currentProficiency": skill.current_proficiency,
                "recommendedProficiency": skill.recommended_proficiency,
                "improvementPriority": skill.improvement_priority,
            }
            for skill in result.weak_skills
        ],
        "learningResources": [dict(group) for group in result.learning_resources],
        "prioritizedLearningPath": [
            {
                "skillName": step.skill_name,
                "priority": step.priority,
                "reason": step.reason,
                "estimatedTime": step.estimated_time,
            }
            for step in result.prioritized_learning_path
        ],
    }


def result_to_payload(result: AnalysisResult) -> dict[str, object]:
    """Render an analysis result as a JSON-ready mapping."""
    if isinstance(result, JobMatchResult):
        return _job_match_payload(result)
    if isinstance(result, SkillsGapResult):
        return _skills_gap_payload(result)
    if isinstance(result, InterviewInsightsResult):
        return dict(result.payload)
    raise TypeError(f"Unsupported analysis result: {type(result).__name__}")


def profile_to_payload(profile: CandidateProfile) -> dict[str, object]:
    return {
        "skills": [
            {"skillName": skill.skill_name, "proficiencyLevel": skill.proficiency_level}
            for skill in profile.skills
        ],
        "experience": [
            {
                "positionTitle": entry.position_title,
                "companyName": entry.company_name,
                "description": entry.description,
            }
            for entry in profile.experience
        ],
        "education": [
            {"degreeType": entry.degree_type, "major": entry.major} for entry in profile.education
        ],
    }


def posting_to_payload(posting: JobPosting) -> dict[str, object]:
    return {
        "jobId": posting.id,
        "jobTitle": posting.title,
        "companyName": posting.company,
        "industry": posting.industry,
        "jobDescription": posting.description,
    }


def scoring_request_to_payload(request: ScoringRequest) -> dict[str, object]:
    """Render the oracle request body.

    Job-match requests carry the weights plus their percentage split so the
    oracle can weigh categories without re-normalising.
    """
    payload: dict[str, object] = {
        "kind": request.kind,
        "profile": profile_to_payload(request.profile),
        "posting": posting_to_payload(request.posting),
    }
    if request.weights is not None:
        payload["weights"] = request.weights.to_payload()
        payload["weightPercentages"] = weight_percentages(request.weights)
    return payload
