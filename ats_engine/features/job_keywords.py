from __future__ import annotations

import re

_TECH_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\b(javascript|js|typescript|ts|react|angular|vue|node\.?js|python|java|c#|\.net|php|ruby|go|rust|swift|kotlin)\b",
        r"\b(html|css|scss|sass|less|bootstrap|tailwind)\b",
        r"\b(sql|mysql|postgresql|mongodb|redis|elasticsearch)\b",
        r"\b(aws|azure|gcp|docker|kubernetes|jenkins|ci/cd|devops)\b",
        r"\b(git|github|gitlab|bitbucket|svn)\b",
        r"\b(agile|scrum|kanban|jira|confluence)\b",
        r"\b(api|rest|graphql|microservices|serverless)\b",
        r"\b(testing|unit\s+testing|integration\s+testing|e2e|selenium|cypress)\b",
    )
)

_EXPERIENCE_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"\d+\+?\s*years?\s*(?:of\s*)?(?:experience|exp)",
        r"\b(?:junior|senior|lead|principal|staff|entry\s*level)\b",
        r"\b(?:bachelor|master|phd|degree)\b",
        r"\b(?:internship|entry\s*level|graduate)\b",
    )
)

SOFT_SKILLS = (
    "communication",
    "leadership",
    "teamwork",
    "problem solving",
    "analytical",
    "creative",
    "detail oriented",
    "self motivated",
    "adaptable",
    "collaborative",
)

_MIN_KEYWORD_LEN = 3


def extract_job_keywords(job_description: str) -> list[str]:
    """Pull technology names, experience phrases and soft skills out of a job description.

    Matches are lower-cased and returned in discovery order without duplicates;
    anything shorter than three characters ("js", "ts", "go") is dropped.
    """
    text = (job_description or "").lower()
    if not text.strip():
        return []

    keywords: list[str] = []
    seen: set[str] = set()

    def add(value: str) -> None:
        cleaned = re.sub(r"\s+", " ", value).strip()
        if len(cleaned) < _MIN_KEYWORD_LEN or cleaned in seen:
            return
        seen.add(cleaned)
        keywords.append(cleaned)

    for pattern in (*_TECH_PATTERNS, *_EXPERIENCE_PATTERNS):
        for match in pattern.finditer(text):
            add(match.group(0))

    for skill in SOFT_SKILLS:
        if skill in text:
            add(skill)

    return keywords
