"""Turns free-form model output into typed results.

The ladder is: strip markdown fences, slice the outermost ``{...}`` span,
decode it leniently (trailing commas, any key casing), then map the payload
onto the result schema. Any step that fails drops to a canned fallback so the
caller always receives something usable.
"""

from __future__ import annotations

import enum
import json
import logging
import math
import re
from typing import Any

from ats_engine.schemas.analysis import (
    ExtractionResult,
    JobRoleAnalysis,
    JobRoleAnalysisResult,
    RoleConfidenceScore,
)

logger = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_LOG_PREVIEW_CHARS = 200

_EXTRACTION_LIST_FIELDS = (
    "suggested_keywords",
    "required_skills",
    "technical_skills",
    "soft_skills",
    "experience_requirements",
    "industries",
    "job_titles",
    "certifications",
)
_EXTRACTION_FIELDS = (
    *_EXTRACTION_LIST_FIELDS,
    "job_level",
    "job_type",
    "relevance_score",
    "keyword_frequency",
)
_ROLE_FIELDS = (
    "primary_role",
    "secondary_roles",
    "industry",
    "seniority_level",
    "confidence",
    "role_confidence_scores",
    "recommended_categories",
    "reasoning",
)

FALLBACK_KEYWORDS = (
    "Communication",
    "Leadership",
    "Problem Solving",
    "Team Work",
    "Project Management",
    "Time Management",
    "Analytical Skills",
    "Microsoft Office",
    "Data Analysis",
    "Customer Service",
)
FALLBACK_RELEVANCE_SCORE = 60


class ParseFailure(str, enum.Enum):
    NOT_JSON = "not_json"
    MALFORMED_JSON = "malformed_json"
    MISSING_FIELDS = "missing_fields"


class ResponseParseError(ValueError):
    def __init__(self, kind: ParseFailure, message: str) -> None:
        super().__init__(message)
        self.kind = kind


def strip_code_fences(raw: str) -> str:
    cleaned = (raw or "").strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json") :]
    elif cleaned.startswith("```"):
        cleaned = cleaned[len("```") :]
    if cleaned.endswith("```"):
        cleaned = cleaned[: -len("```")]
    return cleaned.strip()


def slice_json_object(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return text[start : end + 1]
    return text


def _normalize_key(key: str) -> str:
    return str(key).replace("_", "").replace("-", "").lower()


def decode_json_object(text: str) -> dict[str, Any]:
    """Decode ``text`` into a mapping keyed by normalized field names.

    ``suggestedKeywords``, ``SuggestedKeywords`` and ``suggested_keywords`` all
    land on ``suggestedkeywords``.
    """
    candidate = text.strip()
    if not (candidate.startswith("{") and candidate.endswith("}")):
        raise ResponseParseError(ParseFailure.NOT_JSON, "No JSON object found in response")
    try:
        payload = json.loads(candidate)
    except json.JSONDecodeError:
        # retry once with trailing commas removed
        try:
            payload = json.loads(_TRAILING_COMMA_RE.sub(r"\1", candidate))
        except json.JSONDecodeError as exc:
            raise ResponseParseError(ParseFailure.MALFORMED_JSON, f"Invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ResponseParseError(ParseFailure.MALFORMED_JSON, "JSON payload is not an object")
    return {_normalize_key(key): value for key, value in payload.items()}


def _field(payload: dict[str, Any], name: str) -> Any:
    return payload.get(_normalize_key(name))


def _has_any(payload: dict[str, Any], names: tuple[str, ...]) -> bool:
    return any(_normalize_key(name) in payload for name in names)


def _as_str(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _as_str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    items: list[str] = []
    for item in value:
        text = _as_str(item)
        if text:
            items.append(text)
    return items


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return int(round(number))


def _as_confidence(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    if number > 1.0 and number <= 100.0:
        number = number / 100.0
    return max(0.0, min(1.0, number))


def _as_frequency(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        return {}
    frequency: dict[str, int] = {}
    for key, count in value.items():
        number = _as_int(count)
        if number is not None and str(key).strip():
            frequency[str(key).strip()] = number
    return frequency


def _relevance(value: Any) -> int | None:
    # fractions (0.6) and percentages (60) both occur in the wild
    if isinstance(value, float) and math.isfinite(value) and 0.0 < value < 1.0:
        value = value * 100
    number = _as_int(value)
    if number is None:
        return None
    return max(0, min(100, number))


def _decode(raw: str) -> dict[str, Any]:
    return decode_json_object(slice_json_object(strip_code_fences(raw)))


def _log_failure(kind: str, failure: ResponseParseError, raw: str) -> None:
    logger.warning(
        "llm_response_parse_failed kind=%s failure=%s detail=%s preview=%r",
        kind,
        failure.kind.value,
        failure,
        (raw or "")[:_LOG_PREVIEW_CHARS],
    )


def fallback_extraction() -> ExtractionResult:
    return ExtractionResult(
        success=True,
        suggested_keywords=list(FALLBACK_KEYWORDS),
        required_skills=["Communication", "Problem Solving"],
        technical_skills=["Microsoft Office", "Data Analysis"],
        soft_skills=["Leadership", "Team Work"],
        industries=["Technology"],
        job_level="Mid",
        job_type="Full-time",
        relevance_score=FALLBACK_RELEVANCE_SCORE,
        used_fallback=True,
    )


def fallback_role_analysis() -> JobRoleAnalysisResult:
    return JobRoleAnalysisResult(success=True, analysis=JobRoleAnalysis(), used_fallback=True)


def parse_extraction(raw: str) -> ExtractionResult:
    try:
        payload = _decode(raw)
        if not _has_any(payload, _EXTRACTION_FIELDS):
            raise ResponseParseError(ParseFailure.MISSING_FIELDS, "No extraction fields in response")
    except ResponseParseError as failure:
        _log_failure("extraction", failure, raw)
        return fallback_extraction()

    lists = {name: _as_str_list(_field(payload, name)) for name in _EXTRACTION_LIST_FIELDS}
    return ExtractionResult(
        success=True,
        **lists,
        job_level=_as_str(_field(payload, "job_level")),
        job_type=_as_str(_field(payload, "job_type")),
        relevance_score=_relevance(_field(payload, "relevance_score")),
        keyword_frequency=_as_frequency(_field(payload, "keyword_frequency")),
    )


def _role_scores(value: Any) -> list[RoleConfidenceScore]:
    if not isinstance(value, list):
        return []
    scores: list[RoleConfidenceScore] = []
    for item in value:
        if not isinstance(item, dict):
            continue
        entry = {_normalize_key(key): val for key, val in item.items()}
        scores.append(
            RoleConfidenceScore(
                role=_as_str(entry.get("role")) or "Unknown",
                confidence=_as_confidence(entry.get("confidence")),
                reasoning=_as_str(entry.get("reasoning")) or "",
            )
        )
    return scores


def parse_role_analysis(raw: str) -> JobRoleAnalysisResult:
    try:
        payload = _decode(raw)
        if not _has_any(payload, _ROLE_FIELDS):
            raise ResponseParseError(ParseFailure.MISSING_FIELDS, "No role analysis fields in response")
    except ResponseParseError as failure:
        _log_failure("role_analysis", failure, raw)
        return fallback_role_analysis()

    analysis = JobRoleAnalysis(
        primary_role=_as_str(_field(payload, "primary_role")) or "Unknown",
        secondary_roles=_as_str_list(_field(payload, "secondary_roles")),
        industry=_as_str(_field(payload, "industry")) or "Unknown",
        seniority_level=_as_str(_field(payload, "seniority_level")) or "Unknown",
        confidence=_as_confidence(_field(payload, "confidence")),
        role_confidence_scores=_role_scores(_field(payload, "role_confidence_scores")),
        recommended_categories=[item.lower() for item in _as_str_list(_field(payload, "recommended_categories"))],
        reasoning=_as_str(_field(payload, "reasoning")) or "",
    )
    return JobRoleAnalysisResult(success=True, analysis=analysis)
