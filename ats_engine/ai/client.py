from __future__ import annotations

import logging

from ats_engine.ai.availability import AvailabilityCache
from ats_engine.ai.config import AIConfig
from ats_engine.ai.prompts import (
    EXTRACTION_SYSTEM_INSTRUCTION,
    HEALTH_PROBE_PROMPT,
    ROLE_ANALYSIS_SYSTEM_INSTRUCTION,
    build_extraction_prompt,
    build_job_role_prompt,
    build_personalized_extraction_prompt,
    build_resume_improvement_prompt,
    harden_system_instruction,
)
from ats_engine.ai.response_parser import parse_extraction, parse_role_analysis
from ats_engine.ai.types import GenerationResult, TextGenerator
from ats_engine.schemas.analysis import ExtractionResult, JobRoleAnalysisResult

logger = logging.getLogger(__name__)

API_KEY_MISSING_MESSAGE = "API key is not configured"


class LLMNotConfiguredError(RuntimeError):
    pass


class ExtractionClient:
    """Keyword extraction and job-role inference against a text-generation backend.

    The generator is the only network boundary. Upstream failures come back as
    ``success=False`` results; malformed content is handled by the response
    parser's fallback ladder.
    """

    def __init__(
        self,
        config: AIConfig,
        generator: TextGenerator | None = None,
        availability: AvailabilityCache | None = None,
    ) -> None:
        self._config = config
        self._generator = generator
        self._availability = availability or AvailabilityCache(
            success_ttl_s=config.health_cache_success_s,
            failure_ttl_s=config.health_cache_failure_s,
        )

    @property
    def configured(self) -> bool:
        return self._config.configured

    @property
    def availability(self) -> AvailabilityCache:
        return self._availability

    def _require_generator(self) -> TextGenerator:
        if not self._config.configured:
            raise LLMNotConfiguredError(API_KEY_MISSING_MESSAGE)
        if self._generator is None:
            from ats_engine.ai.providers.openai_provider import OpenAICompatibleGenerator

            self._generator = OpenAICompatibleGenerator(self._config)
        return self._generator

    def _call(self, prompt: str, system_instruction: str) -> GenerationResult:
        generator = self._require_generator()
        return generator.generate(prompt, harden_system_instruction(system_instruction), "json")

    def _truncate(self, result: ExtractionResult) -> ExtractionResult:
        limit = max(self._config.max_keywords, 0)
        if len(result.suggested_keywords) <= limit:
            return result
        return result.model_copy(update={"suggested_keywords": result.suggested_keywords[:limit]})

    def _extract(self, prompt: str, operation: str) -> ExtractionResult:
        try:
            response = self._call(prompt, EXTRACTION_SYSTEM_INSTRUCTION)
        except LLMNotConfiguredError as exc:
            return ExtractionResult(success=False, error_message=str(exc))
        if not response.success or not response.content:
            logger.warning("llm_extraction_failed operation=%s status=%s", operation, response.status_code)
            return ExtractionResult(
                success=False,
                error_message=response.error_message or "Failed to extract keywords",
            )
        return self._truncate(parse_extraction(response.content))

    def extract_keywords(self, job_description: str, resume_text: str | None = None) -> ExtractionResult:
        if resume_text is None:
            return self._extract(build_extraction_prompt(job_description), "extract_keywords")
        return self._extract(
            build_personalized_extraction_prompt(job_description, resume_text),
            "extract_keywords_personalized",
        )

    def suggest_resume_improvements(self, resume_text: str) -> ExtractionResult:
        return self._extract(build_resume_improvement_prompt(resume_text), "resume_improvements")

    def analyze_job_role(self, resume_text: str) -> JobRoleAnalysisResult:
        try:
            response = self._call(build_job_role_prompt(resume_text), ROLE_ANALYSIS_SYSTEM_INSTRUCTION)
        except LLMNotConfiguredError as exc:
            return JobRoleAnalysisResult(success=False, error_message=str(exc))
        if not response.success or not response.content:
            logger.warning("llm_role_analysis_failed status=%s", response.status_code)
            return JobRoleAnalysisResult(
                success=False,
                error_message=response.error_message or "Failed to analyze job role",
            )
        return parse_role_analysis(response.content)

    def _probe(self) -> bool:
        response = self._require_generator().generate(HEALTH_PROBE_PROMPT, EXTRACTION_SYSTEM_INSTRUCTION, "text")
        return response.success

    def is_available(self) -> bool:
        if not self._config.configured:
            return False
        return self._availability.check(self._probe)
