from .pdf import PdfTextExtractor, TextExtractionFailed, TextExtractor

__all__ = ["PdfTextExtractor", "TextExtractionFailed", "TextExtractor"]
