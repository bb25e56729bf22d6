from __future__ import annotations

import logging
from typing import Iterable

from ats_engine.core.scoring_config import get_scoring_value
from ats_engine.schemas.analysis import JobCategory, JobRoleAnalysis
from ats_engine.taxonomy import TaxonomyError, TaxonomyProvider

logger = logging.getLogger(__name__)

_CATEGORY_TRIGGERS: dict[str, tuple[str, ...]] = {
    "software-development": (
        "software",
        "developer",
        "engineer",
        "programmer",
        "full stack",
        "backend",
        "frontend",
        "web developer",
    ),
    "qa-testing": ("qa", "quality", "test", "automation", "sdet", "quality assurance"),
    "data-science": (
        "data",
        "scientist",
        "analyst",
        "machine learning",
        "ai",
        "analytics",
        "business intelligence",
    ),
    "digital-marketing": ("marketing", "seo", "digital", "social media", "campaign", "content"),
    "ux-ui-design": ("design", "ux", "ui", "user experience", "product design", "visual"),
    "project-management": ("project", "manager", "scrum", "agile", "product owner", "program"),
    "sales": ("sales", "business development", "account", "revenue", "lead generation", "b2b"),
    "finance-accounting": ("finance", "accounting", "financial", "audit", "cpa", "budget"),
    "hr-recruiting": ("hr", "human resources", "recruiting", "talent", "people", "recruitment"),
    "cybersecurity": (
        "security",
        "cyber",
        "information security",
        "infosec",
        "penetration",
        "vulnerability",
    ),
}


def recommended_category_ids(primary_role: str, secondary_roles: Iterable[str] = ()) -> list[str]:
    """Map role strings to category ids via the trigger table.

    Every role is tested against every category; the result is the
    de-duplicated union in table order.
    """
    roles = [role.lower() for role in [primary_role, *secondary_roles] if role and role.strip()]
    if not roles:
        return []
    return [
        category_id
        for category_id, triggers in _CATEGORY_TRIGGERS.items()
        if any(trigger in role for role in roles for trigger in triggers)
    ]


def _low_confidence_threshold() -> float:
    return float(get_scoring_value("categories.low_confidence_threshold", 0.7))


class CategoryRecommender:
    def __init__(self, taxonomy: TaxonomyProvider) -> None:
        unknown = [category_id for category_id in _CATEGORY_TRIGGERS if taxonomy.get_category(category_id) is None]
        if unknown:
            logger.error("category_triggers_unknown ids=%s", ",".join(unknown))
            raise TaxonomyError(f"Category triggers reference unknown categories: {', '.join(unknown)}")
        self._taxonomy = taxonomy

    def _resolve(self, category_ids: Iterable[str]) -> list[JobCategory]:
        resolved: list[JobCategory] = []
        seen: set[str] = set()
        for category_id in category_ids:
            if category_id in seen:
                continue
            category = self._taxonomy.get_category(category_id)
            if category is not None:
                seen.add(category_id)
                resolved.append(category)
        return resolved

    def _with_popular_fallback(self, categories: list[JobCategory], count: int) -> list[JobCategory]:
        chosen = {category.id for category in categories}
        extras = [category for category in self._taxonomy.all_categories() if category.id not in chosen][:count]
        return [*categories, *extras]

    @staticmethod
    def _by_popularity(categories: list[JobCategory]) -> list[JobCategory]:
        return sorted(categories, key=lambda category: category.popularity_score, reverse=True)

    def categories_for_job_role(self, role: str, confidence: float = 0.0) -> list[JobCategory]:
        categories = self._resolve(recommended_category_ids(role))
        if confidence < _low_confidence_threshold():
            count = int(get_scoring_value("categories.fallback_count_role", 3))
            categories = self._with_popular_fallback(categories, count)
        return self._by_popularity(categories)

    def smart_categories_for_role(self, analysis: JobRoleAnalysis) -> list[JobCategory]:
        categories = self._resolve(analysis.recommended_categories)
        if not categories:
            categories = self._resolve(recommended_category_ids(analysis.primary_role, analysis.secondary_roles))
        if analysis.confidence < _low_confidence_threshold():
            count = int(get_scoring_value("categories.fallback_count_smart", 2))
            categories = self._with_popular_fallback(categories, count)
        logger.debug(
            "smart_categories role=%s confidence=%.2f ids=%s",
            analysis.primary_role,
            analysis.confidence,
            ",".join(category.id for category in categories),
        )
        return self._by_popularity(categories)

    def search_categories(self, term: str) -> list[JobCategory]:
        needle = (term or "").strip().lower()
        categories = self._taxonomy.all_categories()
        if not needle:
            return categories
        return [
            category
            for category in categories
            if needle in category.name.lower()
            or needle in category.description.lower()
            or any(needle in tag.lower() for tag in category.tags)
            or any(needle in keyword.lower() for keyword in category.keywords)
        ]
