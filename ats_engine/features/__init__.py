from .category_recommender import CategoryRecommender, recommended_category_ids
from .job_keywords import extract_job_keywords
from .scoring import ScoringMode, build_score, format_score, keyword_score, readability_score
from .suggestions import (
    detect_issues,
    generic_suggestions,
    job_specific_suggestion,
    role_analysis_suggestions,
    role_selection_suggestions,
    sort_by_priority,
)
from .text_matcher import contains_any, contains_keyword, found, missing, partition

__all__ = [
    "CategoryRecommender",
    "recommended_category_ids",
    "extract_job_keywords",
    "ScoringMode",
    "build_score",
    "format_score",
    "keyword_score",
    "readability_score",
    "detect_issues",
    "generic_suggestions",
    "job_specific_suggestion",
    "role_analysis_suggestions",
    "role_selection_suggestions",
    "sort_by_priority",
    "contains_any",
    "contains_keyword",
    "found",
    "missing",
    "partition",
]
