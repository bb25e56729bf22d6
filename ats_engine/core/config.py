from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from ats_engine.ai.config import AIConfig

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    ai_enabled: bool
    llm_api_key: str | None
    llm_base_url: str | None
    llm_model: str
    llm_timeout_s: float
    llm_max_keywords: int
    llm_temperature: float
    health_cache_success_s: float
    health_cache_failure_s: float
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    max_upload_bytes: int

    def ai_config(self) -> AIConfig:
        return AIConfig(
            api_key=self.llm_api_key if self.ai_enabled else None,
            base_url=self.llm_base_url,
            model=self.llm_model,
            timeout_s=self.llm_timeout_s,
            max_keywords=self.llm_max_keywords,
            temperature=self.llm_temperature,
            health_cache_success_s=self.health_cache_success_s,
            health_cache_failure_s=self.health_cache_failure_s,
        )


settings = Settings(
    ai_enabled=_get_env_bool("AI_ENABLED", True),
    llm_api_key=_get_env("LLM_API_KEY") or _get_env("OPENAI_API_KEY"),
    llm_base_url=_get_env("LLM_BASE_URL", "https://openrouter.ai/api/v1"),
    llm_model=_get_env("LLM_MODEL", "mistralai/mistral-small-3.2-24b-instruct:free")
    or "mistralai/mistral-small-3.2-24b-instruct:free",
    llm_timeout_s=_get_env_float("LLM_TIMEOUT_S", 30.0),
    llm_max_keywords=_get_env_int("LLM_MAX_KEYWORDS", 50),
    llm_temperature=_get_env_float("LLM_TEMPERATURE", 0.3),
    health_cache_success_s=_get_env_float("HEALTH_CACHE_SUCCESS_S", 300.0),
    health_cache_failure_s=_get_env_float("HEALTH_CACHE_FAILURE_S", 60.0),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "https://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    ),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
)

if settings.llm_timeout_s <= 0:
    raise RuntimeError("LLM_TIMEOUT_S must be a positive number of seconds.")
