from __future__ import annotations

import logging
from io import BytesIO
from typing import BinaryIO, Protocol

from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)


class TextExtractionFailed(ValueError):
    """Raised when a document yields no usable text."""


class TextExtractor(Protocol):
    def extract_text(self, stream: BinaryIO) -> str: ...


class PdfTextExtractor:
    def extract_text(self, stream: BinaryIO) -> str:
        content = stream.read()
        if not content:
            raise TextExtractionFailed("The uploaded file is empty.")

        try:
            reader = PdfReader(BytesIO(content))
            page_chunks: list[str] = []
            for page in reader.pages:
                page_text = page.extract_text() or ""
                if page_text.strip():
                    page_chunks.append(page_text)
        except (PdfReadError, ValueError, KeyError, TypeError) as exc:
            logger.warning("pdf_extract_failed bytes=%s: %s", len(content), exc)
            raise TextExtractionFailed("Unable to extract text from this PDF file.") from exc

        text = "\n\n".join(page_chunks)
        if not text.strip():
            raise TextExtractionFailed("No extractable text found in PDF.")
        logger.info("pdf_extract_ok pages=%s chars=%s", len(reader.pages), len(text))
        return text
