"""Tokenizers and part-of-speech taggers for intent classification.

The classifier only needs two things from a tagger: numerals (CD) and proper
nouns (NNP*). HeuristicPosTagger covers both from surface shape alone;
LexiconPosTagger loads a tab-separated word/tag model when a richer
vocabulary is available.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from ..errors import ModelLoadError

logger = logging.getLogger(__name__)

# Words with inner hyphens, dots, apostrophes, slashes or @ stay whole (CT-2024-001, john.doe@x.com)
TOKEN_PATTERN = re.compile(r"\w+(?:[-'./@]\w+)*")
_NUMERAL = re.compile(r"^\d+(?:[.,]\d+)*$")


class Tokenizer(ABC):
    """Splits a query into word tokens."""

    @abstractmethod
    def tokenize(self, text: str) -> list[str]:
        """Return the tokens of text in order."""
        ...


class PosTagger(ABC):
    """Assigns a Penn Treebank tag to each token."""

    @abstractmethod
    def tag(self, tokens: list[str]) -> list[str]:
        """Return one tag per token."""
        ...


class RegexTokenizer(Tokenizer):
    """Tokenizer driven by a single regex; punctuation is dropped."""

    def __init__(self, pattern: re.Pattern[str] | str = TOKEN_PATTERN) -> None:
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def tokenize(self, text: str) -> list[str]:
        if not text:
            return []
        return self.pattern.findall(text)


class HeuristicPosTagger(PosTagger):
    """Shape-based tagger: CD for numerals, NNP for capitalized non-initial tokens, NN otherwise."""

    def tag(self, tokens: list[str]) -> list[str]:
        return [self._tag(token, index) for index, token in enumerate(tokens)]

    @staticmethod
    def _tag(token: str, index: int) -> str:
        if _NUMERAL.match(token):
            return "CD"
        if index > 0 and token[:1].isupper():
            return "NNP"
        return "NN"


class LexiconPosTagger(PosTagger):
    """Tagger backed by a word-to-tag table.

    Words missing from the table are tagged by the fallback tagger.

    Attributes:
        tags: Lowercased word -> tag
        fallback: Tagger used for unknown words
    """

    def __init__(self, tags: dict[str, str], fallback: PosTagger | None = None) -> None:
        self.tags = {word.lower(): tag for word, tag in tags.items()}
        self.fallback = fallback or HeuristicPosTagger()

    @classmethod
    def from_file(cls, path: Path | str, fallback: PosTagger | None = None) -> "LexiconPosTagger":
        """Load a model file of ``word<TAB>TAG`` lines.

        Blank lines and lines starting with ``#`` are skipped.

        Args:
            path: Path to the model file
            fallback: Tagger for words the model does not know

        Returns:
            Loaded tagger

        Raises:
            ModelLoadError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        if not path.is_file():
            raise ModelLoadError(f"POS model not found: {path}")

        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise ModelLoadError(f"Failed to read POS model {path}: {e}") from e

        tags: dict[str, str] = {}
        for line_number, line in enumerate(lines, start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            parts = stripped.split("\t")
            if len(parts) != 2 or not parts[0].strip() or not parts[1].strip():
                raise ModelLoadError(f"Malformed POS model line {line_number} in {path}: {line!r}")
            tags[parts[0].strip()] = parts[1].strip()

        logger.info(f"Loaded POS model with {len(tags)} entries from {path}")
        return cls(tags, fallback)

    def tag(self, tokens: list[str]) -> list[str]:
        fallback_tags = self.fallback.tag(tokens)
        return [self.tags.get(token.lower(), fallback) for token, fallback in zip(tokens, fallback_tags)]

    def __len__(self) -> int:
        return len(self.tags)


__all__ = [
    "HeuristicPosTagger",
    "LexiconPosTagger",
    "PosTagger",
    "RegexTokenizer",
    "TOKEN_PATTERN",
    "Tokenizer",
]
