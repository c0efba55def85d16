"""Text normalization rules applied before tokenization.

Responsibilities:
- Decompose Unicode text so composed characters match index-table codepoints.
- Strip emoji and pictographic blocks the index table does not cover.
- Collapse whitespace into single spaces.
"""

from __future__ import annotations

import re
import unicodedata
from typing import Protocol


SUPPORTED_NORMALIZATION_FORMS = frozenset({"NFD", "NFKD"})

_PICTOGRAPH_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"  # emoticons
    "\U0001F300-\U0001F5FF"  # symbols and pictographs
    "\U0001F680-\U0001F6FF"  # transport and map
    "\U0001F1E0-\U0001F1FF"  # regional indicator flags
    "\u2600-\u26FF"  # miscellaneous symbols
    "\u2700-\u27BF"  # dingbats
    "]"
)


class NormalizerRule(Protocol):
    """Protocol for text normalization rules."""

    def apply(self, text: str) -> str:
        """Apply a single normalization transformation."""


class DecomposeUnicode:
    """Apply Unicode decomposition (Hangul syllables split into jamo)."""

    def __init__(self, form: str = "NFD") -> None:
        """Initialize with a decomposition form (`NFD` or `NFKD`)."""

        if form not in SUPPORTED_NORMALIZATION_FORMS:
            supported = ", ".join(sorted(SUPPORTED_NORMALIZATION_FORMS))
            raise ValueError(f"Unsupported normalization form `{form}`; supported: {supported}.")
        self.form = form

    def apply(self, text: str) -> str:
        """Decompose text with the configured form."""

        return unicodedata.normalize(self.form, text)


class StripPictographs:
    """Remove emoji, flags, dingbats, and miscellaneous symbol blocks."""

    def apply(self, text: str) -> str:
        """Apply pictograph removal."""

        return _PICTOGRAPH_PATTERN.sub("", text)


class CollapseWhitespace:
    """Collapse whitespace runs to one space and trim both ends."""

    def apply(self, text: str) -> str:
        """Apply whitespace collapsing."""

        return re.sub(r"\s+", " ", text).strip()


class TextNormalizer:
    """Apply a sequence of deterministic normalization rules."""

    def __init__(
        self,
        rules: list[NormalizerRule] | None = None,
        form: str = "NFD",
    ) -> None:
        """Initialize with custom rules or the default decompose/strip/collapse sequence."""

        self.rules = rules or [
            DecomposeUnicode(form),
            StripPictographs(),
            CollapseWhitespace(),
        ]

    def normalize(self, text: str) -> str:
        """Apply all configured rules in order."""

        current = text
        for rule in self.rules:
            current = rule.apply(current)
        return current
