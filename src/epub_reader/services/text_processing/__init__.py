"""Text processing services - structured-content walking and normalization."""

from epub_reader.services.text_processing.structured_content import (
    definitions_from_glossary,
    walk_structured_content,
)
from epub_reader.services.text_processing.text_normalization import normalize_text

__all__ = [
    "definitions_from_glossary",
    "normalize_text",
    "walk_structured_content",
]
