from __future__ import annotations

import re
from typing import Any, Literal

from ats_engine.core.scoring_config import get_scoring_value
from ats_engine.schemas.analysis import ATSScore, Grade

from .text_matcher import contains_any

ScoringMode = Literal["generic", "job_aware", "role_aware"]

YEAR_RE = re.compile(r"\b\d{4}\b")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]")

EXPERIENCE_MARKERS = ("experience", "work history")
EDUCATION_MARKERS = ("education",)
SKILLS_MARKERS = ("skills",)
CONTACT_MARKERS = ("contact", "email", "phone")
BULLET_MARKERS = ("•", "-", "*")
ACTION_VERBS = ("managed", "led", "developed", "created", "implemented", "achieved", "improved")

_DEFAULT_WEIGHTS: dict[str, dict[str, float]] = {
    "job_aware": {"keyword": 0.5, "formatting": 0.3, "readability": 0.2},
    "role_aware": {"keyword": 0.6, "formatting": 0.2, "readability": 0.2},
}
_DEFAULT_GRADES: list[dict[str, Any]] = [
    {"min": 90, "grade": "A+", "description": "Excellent ATS compatibility! Your resume should pass most ATS filters."},
    {"min": 80, "grade": "A", "description": "Very good ATS compatibility with minor room for improvement."},
    {"min": 70, "grade": "B", "description": "Good ATS compatibility, but could benefit from optimization."},
    {"min": 60, "grade": "C", "description": "Fair ATS compatibility. Consider adding more relevant keywords."},
    {"min": 50, "grade": "D", "description": "Poor ATS compatibility. Significant improvements needed."},
    {"min": 0, "grade": "F", "description": "Very poor ATS compatibility. Major restructuring recommended."},
]


def _cfg_int(path: str, default: int) -> int:
    return int(get_scoring_value(path, default))


def _cfg_float(path: str, default: float) -> float:
    return float(get_scoring_value(path, default))


def _words(text: str) -> list[str]:
    return (text or "").split()


def _grade_bands() -> list[dict[str, Any]]:
    bands = get_scoring_value("grades", None) or _DEFAULT_GRADES
    return sorted(bands, key=lambda band: int(band["min"]), reverse=True)


def keyword_score(found_count: int, total_keywords: int) -> int:
    if total_keywords <= 0:
        return 0
    return min(100, (max(found_count, 0) * 100) // total_keywords)


def format_score(text: str) -> int:
    text = text or ""
    lowered = text.lower()
    score = 0

    if any(marker in lowered for marker in EXPERIENCE_MARKERS):
        score += _cfg_int("formatting.experience", 20)
    if any(marker in lowered for marker in EDUCATION_MARKERS):
        score += _cfg_int("formatting.education", 15)
    if any(marker in lowered for marker in SKILLS_MARKERS):
        score += _cfg_int("formatting.skills", 15)
    if any(marker in lowered for marker in CONTACT_MARKERS):
        score += _cfg_int("formatting.contact", 10)
    if YEAR_RE.search(text):
        score += _cfg_int("formatting.year", 10)
    if any(marker in text for marker in BULLET_MARKERS):
        score += _cfg_int("formatting.bullets", 10)

    word_count = len(_words(text))
    if _cfg_int("formatting.min_words", 200) <= word_count <= _cfg_int("formatting.max_words", 800):
        score += _cfg_int("formatting.length", 20)

    return min(100, score)


def readability_score(text: str) -> int:
    words = _words(text)
    if not words:
        return 0

    score = _cfg_int("readability.base", 100)

    sentences = [chunk for chunk in SENTENCE_SPLIT_RE.split(text) if chunk.split()]
    avg_words_per_sentence = len(words) / max(len(sentences), 1)
    if avg_words_per_sentence > _cfg_float("readability.long_sentence_words", 25):
        score -= _cfg_int("readability.long_sentence_penalty", 20)

    complex_chars = _cfg_int("readability.complex_word_chars", 10)
    complex_words = sum(1 for word in words if len(word) > complex_chars)
    if complex_words > len(words) * _cfg_float("readability.complex_word_ratio", 0.1):
        score -= _cfg_int("readability.complex_word_penalty", 15)

    if contains_any(text, ACTION_VERBS):
        score += _cfg_int("readability.action_verb_bonus", 10)

    return max(0, min(100, score))


def _weights_percent(mode: str) -> tuple[int, int, int]:
    defaults = _DEFAULT_WEIGHTS[mode]
    return (
        int(round(_cfg_float(f"weights.{mode}.keyword", defaults["keyword"]) * 100)),
        int(round(_cfg_float(f"weights.{mode}.formatting", defaults["formatting"]) * 100)),
        int(round(_cfg_float(f"weights.{mode}.readability", defaults["readability"]) * 100)),
    )


def compose_overall(keyword: int, formatting: int, readability: int, mode: ScoringMode = "generic") -> int:
    """Combine sub-scores; integer arithmetic keeps each mode exact and deterministic."""
    if mode == "generic":
        overall = (keyword + formatting + readability) // 3
    elif mode == "job_aware":
        wk, wf, wr = _weights_percent("job_aware")
        overall = (keyword * wk + formatting * wf + readability * wr) // 100
    elif mode == "role_aware":
        wk, wf, wr = _weights_percent("role_aware")
        # round half up
        overall = (keyword * wk + formatting * wf + readability * wr + 50) // 100
    else:
        raise ValueError(f"Unknown scoring mode '{mode}'")
    return max(0, min(100, overall))


def grade_for(overall: int) -> Grade:
    for band in _grade_bands():
        if overall >= int(band["min"]):
            return band["grade"]
    return "F"


def description_for(overall: int) -> str:
    for band in _grade_bands():
        if overall >= int(band["min"]):
            return str(band["description"])
    return _DEFAULT_GRADES[-1]["description"]


def build_score(keyword: int, formatting: int, readability: int, mode: ScoringMode = "generic") -> ATSScore:
    overall = compose_overall(keyword, formatting, readability, mode)
    return ATSScore(
        overall=overall,
        keyword_match=keyword,
        formatting=formatting,
        readability=readability,
        grade=grade_for(overall),
        description=description_for(overall),
    )
