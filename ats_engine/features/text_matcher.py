from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable

_WHITESPACE_RE = re.compile(r"\s+")


@lru_cache(maxsize=4096)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Whole-word / whole-phrase pattern: no letter or digit may touch either end."""
    parts = [re.escape(part) for part in _WHITESPACE_RE.split(keyword.strip()) if part]
    body = r"\s+".join(parts)
    return re.compile(rf"(?<![A-Za-z0-9]){body}(?![A-Za-z0-9])", re.IGNORECASE)


def _unique(keywords: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for keyword in keywords:
        cleaned = (keyword or "").strip()
        if not cleaned:
            continue
        lowered = cleaned.lower()
        if lowered in seen:
            continue
        seen.add(lowered)
        output.append(cleaned)
    return output


def contains_keyword(text: str, keyword: str) -> bool:
    if not text or not keyword or not keyword.strip():
        return False
    return _keyword_pattern(keyword.strip()).search(text) is not None


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(contains_keyword(text, keyword) for keyword in keywords)


def partition(text: str, keywords: Iterable[str]) -> tuple[list[str], list[str]]:
    found: list[str] = []
    missing: list[str] = []
    for keyword in _unique(keywords):
        if contains_keyword(text or "", keyword):
            found.append(keyword)
        else:
            missing.append(keyword)
    return found, missing


def found(text: str, keywords: Iterable[str]) -> list[str]:
    return partition(text, keywords)[0]


def missing(text: str, keywords: Iterable[str]) -> list[str]:
    return partition(text, keywords)[1]
