"""Codepoint-indexed text tokenizer.

Responsibilities:
- Hold the read-only codepoint -> token id lookup table.
- Wrap normalized text in language markers and map each character to an id.
- Drop characters without a mapping instead of inserting placeholder tokens.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

import numpy as np

from ..errors import ConfigurationError, FormatError
from ..models.datatypes import TokenSequence
from .normalizer import TextNormalizer

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class UnicodeIndexTable:
    """Read-only table where position is a codepoint and value is a token id.

    Negative values mark unmapped codepoints.
    """

    def __init__(self, ids: Sequence[int] | np.ndarray) -> None:
        """Initialize from a sequence of integer token ids."""

        table = np.asarray(ids, dtype=np.int64)
        if table.ndim != 1:
            raise FormatError("Unicode index table must be a flat array of integers.")
        table.flags.writeable = False
        self._ids = table

    def __len__(self) -> int:
        return int(self._ids.size)

    def lookup(self, codepoint: int) -> int:
        """Return the token id for a codepoint, or `-1` when unmapped or out of range."""

        if codepoint < 0 or codepoint >= self._ids.size:
            return -1
        return int(self._ids[codepoint])

    def reverse(self) -> dict[int, int]:
        """Return a token id -> codepoint mapping for every mapped codepoint."""

        mapped = np.flatnonzero(self._ids >= 0)
        return {int(self._ids[codepoint]): int(codepoint) for codepoint in mapped}

    @classmethod
    def from_json(cls, payload: object) -> UnicodeIndexTable:
        """Validate a decoded JSON payload and build a table from it."""

        if not isinstance(payload, list) or not payload:
            raise FormatError("Unicode index table must be a non-empty JSON array.")
        for position, value in enumerate(payload):
            if isinstance(value, bool) or not isinstance(value, int):
                raise FormatError(
                    f"Unicode index table entry at codepoint {position} is not an integer."
                )
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise FormatError(
                    f"Unicode index table entry at codepoint {position} is out of range."
                )
        return cls(payload)


def load_unicode_index_table(path: Path) -> UnicodeIndexTable:
    """Load a unicode index table JSON file from disk."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise FormatError(
            f"Unicode index table `{path}` is not valid JSON: {exc}",
        ) from exc
    return UnicodeIndexTable.from_json(payload)


class UnicodeTokenizer:
    """Convert text into token ids through a `UnicodeIndexTable`."""

    def __init__(
        self,
        table: UnicodeIndexTable | None,
        normalizer: TextNormalizer | None = None,
    ) -> None:
        """Initialize with an index table and an optional custom normalizer."""

        self._table = table
        self._normalizer = normalizer or TextNormalizer()
        self._reverse: dict[int, int] | None = None

    def preprocess(self, text: str, language: str) -> str:
        """Normalize text and wrap it in `<lang>`/`</lang>` markers."""

        normalized = self._normalizer.normalize(text)
        return f"<{language}>{normalized}</{language}>"

    def tokenize(self, text: str, language: str) -> TokenSequence:
        """Return token ids for every mapped character of the wrapped text.

        Raises:
            ConfigurationError: If no index table has been loaded.
        """

        table = self._require_table()
        tokens: list[int] = []
        for character in self.preprocess(text, language):
            token_id = table.lookup(ord(character))
            if token_id >= 0:
                tokens.append(token_id)
        return tuple(tokens)

    def detokenize(self, token_ids: Sequence[int]) -> str:
        """Map token ids back to characters.

        The result is the decomposed text, not byte-identical to the original
        input when it contained composed characters.
        """

        table = self._require_table()
        if self._reverse is None:
            self._reverse = table.reverse()
        characters = [
            chr(self._reverse[token_id]) for token_id in token_ids if token_id in self._reverse
        ]
        return "".join(characters)

    def _require_table(self) -> UnicodeIndexTable:
        """Return the loaded table or fail with a configuration error."""

        if self._table is None:
            raise ConfigurationError(
                "Unicode index table is not loaded.",
                stage="tokenize",
                hint="Load model assets before tokenizing text.",
            )
        return self._table
