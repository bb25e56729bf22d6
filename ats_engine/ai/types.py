from dataclasses import dataclass
from typing import Literal, Protocol

ResponseFormat = Literal["json", "text"]


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    content: str | None = None
    error_message: str | None = None
    status_code: int | None = None


class TextGenerator(Protocol):
    def generate(
        self,
        prompt: str,
        system_instruction: str,
        response_format: ResponseFormat = "json",
    ) -> GenerationResult: ...
