from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import BinaryIO

from ats_engine.ai.client import ExtractionClient
from ats_engine.features.category_recommender import CategoryRecommender
from ats_engine.features.job_keywords import extract_job_keywords
from ats_engine.features.scoring import build_score, format_score, keyword_score, readability_score
from ats_engine.features.suggestions import (
    detect_issues,
    generic_suggestions,
    job_specific_suggestion,
    role_analysis_suggestions,
    role_selection_suggestions,
    sort_by_priority,
)
from ats_engine.features.text_matcher import found, partition
from ats_engine.parsing import PdfTextExtractor, TextExtractor
from ats_engine.schemas.analysis import (
    AnalysisResult,
    ATSScore,
    ExtractionResult,
    ResumeImprovementReport,
    ResumeImprovements,
    SmartCategoryAnalysis,
)
from ats_engine.taxonomy import LocalTaxonomy, get_default_taxonomy

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _sub_scores(text: str, matched: int, total: int) -> tuple[int, int, int]:
    return keyword_score(matched, total), format_score(text), readability_score(text)


class AnalysisService:
    """Runs the resume analysis variants over one taxonomy.

    Holds no per-request state; every call builds a fresh ``AnalysisResult``.
    """

    def __init__(
        self,
        taxonomy: LocalTaxonomy | None = None,
        recommender: CategoryRecommender | None = None,
        extractor: TextExtractor | None = None,
    ) -> None:
        self._taxonomy = taxonomy or get_default_taxonomy()
        self._recommender = recommender or CategoryRecommender(self._taxonomy)
        self._extractor = extractor or PdfTextExtractor()

    @property
    def taxonomy(self) -> LocalTaxonomy:
        return self._taxonomy

    @property
    def recommender(self) -> CategoryRecommender:
        return self._recommender

    def extract_text(self, stream: BinaryIO) -> str:
        return self._extractor.extract_text(stream)

    def _generic_score(self, text: str) -> tuple[ATSScore, list[str], list[str]]:
        found_keywords, missing_keywords = partition(text, self._taxonomy.default_keywords())
        total = len(found_keywords) + len(missing_keywords)
        score = build_score(*_sub_scores(text, len(found_keywords), total), mode="generic")
        return score, found_keywords, missing_keywords

    def analyze_generic(self, text: str) -> AnalysisResult:
        text = text or ""
        score, found_keywords, missing_keywords = self._generic_score(text)
        logger.info("analysis_generic overall=%s found=%s", score.overall, len(found_keywords))
        return AnalysisResult(
            score=score,
            found_keywords=found_keywords,
            missing_keywords=missing_keywords,
            suggestions=generic_suggestions(text, missing_keywords),
            issues=detect_issues(text),
            analyzed_at=_utc_now(),
            analysis_type="generic",
        )

    def analyze_with_job_description(self, text: str, job_description: str) -> AnalysisResult:
        text = text or ""
        job_keywords = extract_job_keywords(job_description)
        matched_job, missing_job = partition(text, job_keywords)
        score = build_score(
            *_sub_scores(text, len(matched_job), len(matched_job) + len(missing_job)),
            mode="job_aware",
        )
        _, _, missing_default = self._generic_score(text)

        suggestions = generic_suggestions(text, missing_default)
        job_suggestion = job_specific_suggestion(missing_job)
        if job_suggestion is not None:
            suggestions = sort_by_priority([job_suggestion, *suggestions])

        logger.info(
            "analysis_job_description overall=%s job_keywords=%s missing=%s",
            score.overall,
            len(job_keywords),
            len(missing_job),
        )
        return AnalysisResult(
            score=score,
            found_keywords=found(text, [*self._taxonomy.default_keywords(), *job_keywords]),
            missing_keywords=missing_job,
            suggestions=suggestions,
            issues=detect_issues(text),
            analyzed_at=_utc_now(),
            analysis_type="job-description",
        )

    def analyze_by_role(self, text: str, role_key: str) -> AnalysisResult | None:
        keyword_set = self._taxonomy.get_keyword_set(role_key)
        if keyword_set is None:
            return None

        text = text or ""
        found_keywords, missing_keywords = partition(text, keyword_set.all_keywords())
        total = len(found_keywords) + len(missing_keywords)
        score = build_score(*_sub_scores(text, len(found_keywords), total), mode="role_aware")
        logger.info("analysis_role role=%s overall=%s", role_key, score.overall)
        return AnalysisResult(
            score=score,
            found_keywords=found_keywords,
            missing_keywords=missing_keywords,
            suggestions=role_selection_suggestions(keyword_set, missing_keywords),
            issues=detect_issues(text),
            analyzed_at=_utc_now(),
            analysis_type="role-based",
            selected_role=role_key,
            role_display_name=keyword_set.display_name,
        )

    def analyze_with_job_role(self, text: str, client: ExtractionClient) -> AnalysisResult:
        result = self.analyze_generic(text)
        role_result = client.analyze_job_role(text or "")
        if not role_result.success or role_result.analysis is None:
            logger.warning("analysis_job_role_unavailable error=%s", role_result.error_message)
            return result.model_copy(update={"analysis_type": "job-role"})

        analysis = role_result.analysis
        # role suggestions are all low priority, so appending keeps the ordering
        suggestions = [*result.suggestions, *role_analysis_suggestions(analysis)]
        categories = self._recommender.smart_categories_for_role(analysis)
        logger.info(
            "analysis_job_role role=%s confidence=%.2f fallback=%s categories=%s",
            analysis.primary_role,
            analysis.confidence,
            role_result.used_fallback,
            len(categories),
        )
        return result.model_copy(
            update={
                "suggestions": suggestions,
                "analysis_type": "job-role",
                "job_role_analysis": analysis,
                "recommended_categories": categories,
            }
        )

    def analyze_resume_with_ai(
        self,
        text: str,
        client: ExtractionClient,
        job_description: str | None = None,
    ) -> ResumeImprovementReport:
        ats_analysis = self.analyze_generic(text)
        if job_description and job_description.strip():
            extraction = client.extract_keywords(job_description, text or "")
        else:
            extraction = client.suggest_resume_improvements(text or "")

        if not extraction.success:
            logger.warning("resume_ai_suggestions_failed error=%s", extraction.error_message)
            return ResumeImprovementReport(
                ats_analysis=ats_analysis,
                ai_error=extraction.error_message,
                generated_at=_utc_now(),
            )

        return ResumeImprovementReport(
            ats_analysis=ats_analysis,
            ai_suggestions=extraction,
            improvements=_improvements_from(extraction),
            generated_at=_utc_now(),
        )

    def smart_category_analysis(self, text: str, client: ExtractionClient) -> SmartCategoryAnalysis:
        role_result = client.analyze_job_role(text or "")
        if not role_result.success or role_result.analysis is None:
            return SmartCategoryAnalysis(
                categories=self._taxonomy.all_categories(),
                ai_error=role_result.error_message or "Failed to analyze job role",
            )
        return SmartCategoryAnalysis(
            job_role_analysis=role_result.analysis,
            categories=self._recommender.smart_categories_for_role(role_result.analysis),
        )


def _improvements_from(extraction: ExtractionResult) -> ResumeImprovements:
    return ResumeImprovements(
        missing_keywords=list(extraction.suggested_keywords),
        skills_to_add=list(extraction.technical_skills),
        recommended_certifications=list(extraction.certifications),
        experience_gaps=list(extraction.experience_requirements),
    )
