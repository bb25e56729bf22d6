from __future__ import annotations

import re

from ats_engine.core.scoring_config import get_scoring_value
from ats_engine.schemas.analysis import Issue, JobRoleAnalysis, KeywordSet, Suggestion

_PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}

_EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7F]")
_IMAGE_MARKERS = ("image", "graphic", "photo")
_BOX_DRAWING_CHARS = ("│", "└", "├")
_MIN_TEXT_CHARS = 500


def _limit(path: str, default: int) -> int:
    return int(get_scoring_value(path, default))


def sort_by_priority(suggestions: list[Suggestion]) -> list[Suggestion]:
    return sorted(suggestions, key=lambda item: _PRIORITY_RANK.get(item.priority, len(_PRIORITY_RANK)))


def generic_suggestions(text: str, missing_keywords: list[str]) -> list[Suggestion]:
    lowered = (text or "").lower()
    suggestions: list[Suggestion] = []

    if missing_keywords:
        suggestions.append(
            Suggestion(
                type="keywords",
                title="Add Missing Keywords",
                description=(
                    f"Your resume is missing {len(missing_keywords)} important keywords that ATS systems look for."
                ),
                priority="high",
                keywords=missing_keywords[: _limit("suggestions.max_missing_keywords", 10)],
            )
        )

    if "experience" not in lowered and "work history" not in lowered:
        suggestions.append(
            Suggestion(
                type="format",
                title="Add Experience Section",
                description="ATS systems expect to find a clear 'Experience' or 'Work History' section.",
                priority="medium",
                keywords=["Experience", "Work History", "Professional Experience"],
            )
        )

    if "education" not in lowered and "degree" not in lowered:
        suggestions.append(
            Suggestion(
                type="format",
                title="Add Education Section",
                description="Include an 'Education' section to improve ATS compatibility.",
                priority="medium",
                keywords=["Education", "Degree", "Certification"],
            )
        )

    if "skills" not in lowered and "technical" not in lowered:
        suggestions.append(
            Suggestion(
                type="format",
                title="Add Skills Section",
                description="A dedicated 'Skills' section helps ATS systems identify your capabilities.",
                priority="low",
                keywords=["Skills", "Technical Skills", "Core Competencies"],
            )
        )

    return sort_by_priority(suggestions)


def job_specific_suggestion(missing_job_keywords: list[str]) -> Suggestion | None:
    if not missing_job_keywords:
        return None
    return Suggestion(
        type="job-specific",
        title="Add Job-Specific Keywords",
        description=f"Your resume is missing {len(missing_job_keywords)} keywords from the job description.",
        priority="high",
        keywords=missing_job_keywords[: _limit("suggestions.max_job_keywords", 15)],
    )


def role_selection_suggestions(keyword_set: KeywordSet, missing_keywords: list[str]) -> list[Suggestion]:
    suggestions: list[Suggestion] = []
    if missing_keywords:
        top_missing = missing_keywords[: _limit("suggestions.max_missing_keywords", 10)]
        suggestions.append(
            Suggestion(
                type="keywords",
                title=f"Add Missing {keyword_set.display_name} Keywords",
                description=(
                    f"Your resume is missing {len(missing_keywords)} relevant keywords for "
                    f"{keyword_set.display_name} roles. Consider adding: {', '.join(top_missing[:5])}"
                ),
                priority="high",
                keywords=top_missing,
            )
        )
    suggestions.append(
        Suggestion(
            type="optimization",
            title="Optimize Your Resume",
            description=(
                "Use our optimization feature to automatically add missing keywords "
                "while preserving your resume's format."
            ),
            priority="medium",
        )
    )
    return sort_by_priority(suggestions)


def role_analysis_suggestions(analysis: JobRoleAnalysis) -> list[Suggestion]:
    """Suggestions derived from a detected job role; both are low priority."""
    suggestions: list[Suggestion] = []
    threshold = float(get_scoring_value("suggestions.role_confidence_threshold", 0.7))

    if analysis.confidence >= threshold:
        suggestions.append(
            Suggestion(
                type="role-specific",
                title=f"Optimize for {analysis.primary_role} Role",
                description=(
                    f"We detected you're a {analysis.primary_role} with {analysis.confidence:.0%} confidence. "
                    "Consider adding role-specific keywords."
                ),
                priority="low",
                keywords=[
                    value
                    for value in (analysis.primary_role, analysis.seniority_level, analysis.industry)
                    if value
                ],
            )
        )

    if analysis.recommended_categories:
        suggestions.append(
            Suggestion(
                type="category-recommendation",
                title="Focus on Relevant Keyword Categories",
                description=(
                    f"Based on your {analysis.primary_role} role, we recommend focusing on these keyword "
                    f"categories: {', '.join(analysis.recommended_categories)}."
                ),
                priority="low",
                keywords=list(analysis.recommended_categories),
            )
        )

    return suggestions


def detect_issues(text: str) -> list[Issue]:
    text = text or ""
    lowered = text.lower()
    issues: list[Issue] = []

    if any(marker in lowered for marker in _IMAGE_MARKERS):
        issues.append(
            Issue(
                type="format",
                description="Images and graphics may not be readable by ATS systems",
                severity="medium",
                location="document",
            )
        )
    if any(char in text for char in _BOX_DRAWING_CHARS):
        issues.append(
            Issue(
                type="formatting",
                description="Your resume contains special characters that may not be ATS-friendly.",
                severity="medium",
                location="document",
            )
        )
    if _NON_ASCII_RE.search(text):
        issues.append(
            Issue(
                type="encoding",
                description="Special characters may cause parsing issues",
                severity="low",
                location="text",
            )
        )
    if len(text) < _MIN_TEXT_CHARS:
        issues.append(
            Issue(
                type="content",
                description=(
                    "Your resume appears to be quite short. "
                    "Consider adding more details about your experience and skills."
                ),
                severity="medium",
                location="document",
            )
        )
    if not _EMAIL_RE.search(text):
        issues.append(
            Issue(
                type="contact",
                description="No email address found",
                severity="high",
                location="header",
            )
        )

    return issues
