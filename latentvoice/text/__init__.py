"""Text preprocessing and tokenization components.

This package provides deterministic normalization, long-text chunking, and
codepoint-indexed tokenization used before the inference stages.
"""

from .chunking import TextChunker
from .normalizer import (
    CollapseWhitespace,
    DecomposeUnicode,
    StripPictographs,
    TextNormalizer,
)
from .tokenizer import UnicodeIndexTable, UnicodeTokenizer, load_unicode_index_table

__all__ = [
    "TextChunker",
    "TextNormalizer",
    "DecomposeUnicode",
    "StripPictographs",
    "CollapseWhitespace",
    "UnicodeIndexTable",
    "UnicodeTokenizer",
    "load_unicode_index_table",
]
