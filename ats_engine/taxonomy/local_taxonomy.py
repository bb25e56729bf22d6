from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ats_engine.schemas.analysis import (
    JobCategory,
    KeywordSet,
    KeywordSubgroup,
    KeywordSubgroups,
    RoleOption,
)

from .provider import TaxonomyError

logger = logging.getLogger(__name__)

_SUBGROUPS: tuple[KeywordSubgroup, ...] = ("primary", "technical", "process", "tools")


class LocalTaxonomy:
    def __init__(
        self,
        roles_path: str | Path | None = None,
        categories_path: str | Path | None = None,
    ) -> None:
        roles_file = Path(roles_path) if roles_path else Path(__file__).with_name("role_keywords.json")
        categories_file = Path(categories_path) if categories_path else Path(__file__).with_name("categories.json")
        self._default_keywords, self._keyword_sets = self._load_roles(roles_file)
        self._categories = self._load_categories(categories_file)
        logger.info(
            "taxonomy_loaded roles=%s categories=%s default_keywords=%s",
            len(self._keyword_sets),
            len(self._categories),
            len(self._default_keywords),
        )

    @staticmethod
    def _read_json(path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise TaxonomyError(f"Unable to load taxonomy file '{path}': {exc}") from exc

    @classmethod
    def _load_roles(cls, path: Path) -> tuple[tuple[str, ...], dict[str, KeywordSet]]:
        raw = cls._read_json(path)
        if not isinstance(raw, dict) or not isinstance(raw.get("roles"), dict):
            raise TaxonomyError(f"Invalid role keywords file '{path}': expected a 'roles' mapping.")

        default_keywords = tuple(str(raw.get("default_keywords") or "").split())
        keyword_sets: dict[str, KeywordSet] = {}
        for key, entry in raw["roles"].items():
            try:
                keyword_sets[key] = KeywordSet(
                    id=key,
                    display_name=entry.get("display_name", key),
                    description=entry.get("description", ""),
                    subgroups=KeywordSubgroups(**{name: entry.get(name, []) for name in _SUBGROUPS}),
                )
            except (AttributeError, ValidationError) as exc:
                raise TaxonomyError(f"Invalid keyword set '{key}' in '{path}': {exc}") from exc
        return default_keywords, keyword_sets

    @classmethod
    def _load_categories(cls, path: Path) -> dict[str, JobCategory]:
        raw = cls._read_json(path)
        if not isinstance(raw, list):
            raise TaxonomyError(f"Invalid categories file '{path}': expected a list.")

        categories: dict[str, JobCategory] = {}
        for entry in raw:
            try:
                category = JobCategory(**entry)
            except (TypeError, ValidationError) as exc:
                raise TaxonomyError(f"Invalid job category in '{path}': {exc}") from exc
            if category.id in categories:
                raise TaxonomyError(f"Duplicate job category id '{category.id}' in '{path}'.")
            categories[category.id] = category
        return categories

    def default_keywords(self) -> list[str]:
        return list(self._default_keywords)

    def keyword_sets(self) -> list[KeywordSet]:
        return list(self._keyword_sets.values())

    def get_keyword_set(self, role_key: str) -> KeywordSet | None:
        return self._keyword_sets.get(role_key)

    def available_roles(self) -> list[RoleOption]:
        return [
            RoleOption(key=item.id, display_name=item.display_name, description=item.description)
            for item in self._keyword_sets.values()
        ]

    def keywords_for_role(self, role_key: str) -> list[str]:
        keyword_set = self._keyword_sets.get(role_key)
        return keyword_set.all_keywords() if keyword_set else []

    def keywords_for_role_subgroup(self, role_key: str, subgroup: str) -> list[str]:
        keyword_set = self._keyword_sets.get(role_key)
        name = subgroup.strip().lower()
        if keyword_set is None or name not in _SUBGROUPS:
            return []
        return list(getattr(keyword_set.subgroups, name))

    def all_categories(self) -> list[JobCategory]:
        return sorted(self._categories.values(), key=lambda item: item.popularity_score, reverse=True)

    def get_category(self, category_id: str) -> JobCategory | None:
        return self._categories.get(category_id)

    def category_exists(self, category_id: str) -> bool:
        return category_id in self._categories

    def keywords_for_category(self, category_id: str) -> list[str]:
        category = self._categories.get(category_id)
        return list(category.keywords) if category else []

    def combined_keywords(self, category_ids: list[str]) -> list[str]:
        seen: set[str] = set()
        combined: list[str] = []
        for category_id in category_ids:
            for keyword in self.keywords_for_category(category_id):
                if keyword not in seen:
                    seen.add(keyword)
                    combined.append(keyword)
        return combined
