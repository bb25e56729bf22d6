from __future__ import annotations

import logging
import time

import openai
from openai import OpenAI

from ats_engine.ai.config import AIConfig
from ats_engine.ai.types import GenerationResult, ResponseFormat

logger = logging.getLogger(__name__)

_ERROR_BODY_MAX_CHARS = 500


class OpenAICompatibleGenerator:
    """Chat-completions client for any OpenAI-compatible endpoint (OpenAI, OpenRouter, Groq)."""

    def __init__(self, config: AIConfig, *, client: OpenAI | None = None):
        self._config = config
        self._client = client or OpenAI(
            api_key=(config.api_key or "").strip(),
            base_url=config.base_url or None,
            timeout=config.timeout_s,
            max_retries=0,
        )

    def generate(
        self,
        prompt: str,
        system_instruction: str,
        response_format: ResponseFormat = "json",
    ) -> GenerationResult:
        create_kwargs = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_output_tokens,
            "top_p": 0.9,
        }
        if response_format == "json":
            create_kwargs["response_format"] = {"type": "json_object"}

        started = time.perf_counter()
        try:
            response = self._client.chat.completions.create(**create_kwargs)
        except openai.APITimeoutError:
            logger.warning("llm_call_timeout model=%s timeout_s=%s", self._config.model, self._config.timeout_s)
            return GenerationResult(
                success=False,
                error_message=f"Request timed out after {self._config.timeout_s:g}s",
            )
        except openai.APIStatusError as exc:
            body = str(getattr(exc, "body", "") or exc.message or "")[:_ERROR_BODY_MAX_CHARS]
            logger.warning("llm_call_failed model=%s status=%s", self._config.model, exc.status_code)
            return GenerationResult(
                success=False,
                error_message=f"API request failed: {exc.status_code} - {body}",
                status_code=exc.status_code,
            )
        except openai.OpenAIError as exc:
            logger.warning("llm_call_error model=%s: %s", self._config.model, exc)
            return GenerationResult(success=False, error_message=f"Exception calling text generation API: {exc}")

        latency_ms = int((time.perf_counter() - started) * 1000)
        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.info("llm_call_empty model=%s latency_ms=%s", self._config.model, latency_ms)
            return GenerationResult(success=False, error_message="No valid response from text generation API")

        logger.debug("llm_call_ok model=%s latency_ms=%s chars=%s", self._config.model, latency_ms, len(content))
        return GenerationResult(success=True, content=content)
