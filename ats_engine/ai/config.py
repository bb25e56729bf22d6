from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    api_key: str | None
    base_url: str | None = None
    model: str = "mistralai/mistral-small-3.2-24b-instruct:free"
    timeout_s: float = 30.0
    max_keywords: int = 50
    temperature: float = 0.3
    max_output_tokens: int = 4000
    health_cache_success_s: float = 300.0
    health_cache_failure_s: float = 60.0

    @property
    def configured(self) -> bool:
        return bool((self.api_key or "").strip())
