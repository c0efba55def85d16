"""Sentence-bounded text chunking for long synthesis inputs.

Responsibilities:
- Split long text into bounded chunks the duration predictor can handle.
- Prefer sentence boundaries, then whitespace, then a hard split.
"""

from __future__ import annotations

import re


class TextChunker:
    """Create sentence-complete chunks with deterministic fallback."""

    _MIN_BOUNDARY_RATIO = 0.60
    _MAX_EXTENSION_RATIO = 0.35
    _SENTENCE_TERMINATORS = ".!?。！？"
    _TRAILING_SENTENCE_CLOSERS = "\"')]}»”’"
    _COMMON_ABBREVIATIONS = frozenset(
        {
            "mr.",
            "mrs.",
            "ms.",
            "dr.",
            "prof.",
            "sr.",
            "jr.",
            "st.",
            "etc.",
            "e.g.",
            "i.e.",
            "vs.",
            "no.",
        }
    )
    _ACRONYM_PATTERN = re.compile(r"(?:[A-Za-z]\.){2,}$")

    def split(self, text: str, max_chars: int | None) -> list[str]:
        """Split text into stripped, non-empty chunks of roughly `max_chars`.

        Args:
            text: Input text.
            max_chars: Desired maximum chunk length; `None` or `<= 0` disables splitting.

        Returns:
            Ordered chunk list. Blank input yields one empty chunk so callers
            still synthesize the language markers.
        """

        collapsed = re.sub(r"\s+", " ", text).strip()
        if not max_chars or max_chars <= 0 or len(collapsed) <= max_chars:
            return [collapsed]

        chunks: list[str] = []
        start = 0
        text_length = len(collapsed)
        while start < text_length:
            end = self._resolve_boundary(collapsed, start, max_chars)
            piece = collapsed[start:end].strip()
            if piece:
                chunks.append(piece)
            start = end
        return chunks or [""]

    def _resolve_boundary(self, text: str, start: int, target_size: int) -> int:
        """Resolve the exclusive end index of the chunk starting at `start`."""

        text_length = len(text)
        if start + target_size >= text_length:
            return text_length

        target_end = start + target_size
        min_boundary = start + int(target_size * self._MIN_BOUNDARY_RATIO)

        for index in range(target_end - 1, max(start, min_boundary) - 1, -1):
            if self._is_sentence_boundary(text, index):
                return self._consume_trailing_sentence_tail(text, index + 1)

        extension_limit = min(
            text_length,
            target_end + max(1, int(target_size * self._MAX_EXTENSION_RATIO)),
        )
        for index in range(target_end, extension_limit):
            if self._is_sentence_boundary(text, index):
                return self._consume_trailing_sentence_tail(text, index + 1)

        for index in range(target_end - 1, start, -1):
            if text[index].isspace():
                return index + 1

        return target_end

    def _is_sentence_boundary(self, text: str, index: int) -> bool:
        """Return whether the character at `index` terminates a sentence."""

        character = text[index]
        if character not in self._SENTENCE_TERMINATORS:
            return False
        if character != ".":
            return True
        if 0 < index < len(text) - 1 and text[index - 1].isdigit() and text[index + 1].isdigit():
            return False

        start = index
        while start > 0 and text[start - 1].isalpha():
            start -= 1
        if text[start : index + 1].lower() in self._COMMON_ABBREVIATIONS:
            return False
        return not self._ACRONYM_PATTERN.search(text[max(0, index - 8) : index + 1])

    def _consume_trailing_sentence_tail(self, text: str, index: int) -> int:
        """Consume closing punctuation and whitespace after a sentence end."""

        adjusted = index
        while adjusted < len(text) and text[adjusted] in self._TRAILING_SENTENCE_CLOSERS:
            adjusted += 1
        while adjusted < len(text) and text[adjusted].isspace():
            adjusted += 1
        return adjusted
