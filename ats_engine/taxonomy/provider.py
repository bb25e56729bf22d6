from __future__ import annotations

from typing import Protocol

from ats_engine.schemas.analysis import JobCategory, KeywordSet


class TaxonomyError(RuntimeError):
    """Raised when the static taxonomy data breaks a catalog invariant."""


class TaxonomyProvider(Protocol):
    def default_keywords(self) -> list[str]:
        """Return the flat keyword list used by the generic analysis."""

    def get_keyword_set(self, role_key: str) -> KeywordSet | None: ...

    def keyword_sets(self) -> list[KeywordSet]: ...

    def all_categories(self) -> list[JobCategory]:
        """Return every job category, most popular first."""

    def get_category(self, category_id: str) -> JobCategory | None: ...
