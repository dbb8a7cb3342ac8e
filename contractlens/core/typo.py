"""Word-level typo correction.

Each whitespace-delimited token is run through a fixed chain of strategies;
the first one that produces a correction wins:

1. Valid word (unchanged)
2. Domain dictionary
3. Known typo table, scored against neighbouring words
4. Abbreviation expansion
5. Contextual compound/bigram table
6. Edit distance, weighted by word frequency
7. Soundex phonetic match
8. Keyboard-adjacent single-key slip

Emails, phone numbers, URLs, "contract #123" references and curated entity
names are protected by span masking and are never touched. Tokens containing
digits are treated as identifiers and also left alone. Capitalized words that
do not start a sentence are taken for names: only the dictionary strategies
(2-5) apply to them.
"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from rapidfuzz.distance import Levenshtein

from .lexicon import Lexicon
from .masking import DEFAULT_PATTERNS, EMAIL_PATTERN, PHONE_PATTERN, SpanMask, literal_pattern

logger = logging.getLogger(__name__)

_EDGE_PUNCTUATION = re.compile(r"^[^A-Za-z0-9]+|[^A-Za-z0-9]+$")
_TOKEN = re.compile(r"\S+")
_INFLECTIONS = ("s", "es", "d", "ed", "ing")
_SENTENCE_END = (".", "!", "?")

_SOUNDEX_CODES = {
    **dict.fromkeys("bfpv", "1"),
    **dict.fromkeys("cgjkqsxz", "2"),
    **dict.fromkeys("dt", "3"),
    "l": "4",
    **dict.fromkeys("mn", "5"),
    "r": "6",
}


class CorrectionStrategy(str, Enum):
    """Which strategy produced a correction."""

    DOMAIN = "domain"
    TYPO = "typo"
    ABBREVIATION = "abbreviation"
    CONTEXTUAL = "contextual"
    EDIT_DISTANCE = "edit_distance"
    PHONETIC = "phonetic"
    KEYBOARD = "keyboard"


@dataclass(frozen=True)
class Token:
    """A whitespace-delimited unit of a query.

    Attributes:
        surface: Text as written
        clean: Lowercased text with edge punctuation stripped
        index: Position in the token sequence
        start: Character offset of the surface form
        end: Character offset one past the surface form
    """

    surface: str
    clean: str
    index: int
    start: int
    end: int


@dataclass(frozen=True)
class CorrectionRecord:
    """One applied correction (diagnostics only)."""

    original: str
    corrected: str
    strategy: CorrectionStrategy

    def to_dict(self) -> dict[str, str]:
        return {"original": self.original, "corrected": self.corrected, "strategy": self.strategy.value}


@dataclass
class CorrectionResult:
    """Output of TypoCorrector.correct()."""

    original: str
    corrected: str
    corrections: list[CorrectionRecord] = field(default_factory=list)

    @property
    def has_corrections(self) -> bool:
        return bool(self.corrections)

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "corrected": self.corrected,
            "has_corrections": self.has_corrections,
            "corrections": [c.to_dict() for c in self.corrections],
        }


@dataclass(frozen=True)
class TypoSuggestion:
    """A candidate correction with its confidence and source strategy."""

    suggestion: str
    confidence: float
    source: str


def clean_word(word: str) -> str:
    """Lowercase a word and strip leading/trailing non-alphanumerics."""
    return _EDGE_PUNCTUATION.sub("", word).lower()


def tokenize(text: str) -> list[Token]:
    """Split text on whitespace, keeping character offsets."""
    return [
        Token(m.group(0), clean_word(m.group(0)), i, m.start(), m.end())
        for i, m in enumerate(_TOKEN.finditer(text))
    ]


def soundex(word: str) -> str:
    """Four-character Soundex code ("" for words without letters)."""
    letters = re.sub(r"[^a-z]", "", word.lower())
    if not letters:
        return ""

    code = [letters[0].upper()]
    previous = _SOUNDEX_CODES.get(letters[0], "")
    for char in letters[1:]:
        digit = _SOUNDEX_CODES.get(char, "")
        if digit and digit != previous:
            code.append(digit)
            previous = digit
            if len(code) == 4:
                break
    return "".join(code).ljust(4, "0")


class TypoCorrector:
    """Corrects misspelled, abbreviated and mistyped words.

    Attributes:
        lexicon: Dictionary snapshot used for every lookup
        max_edit_distance: Largest Levenshtein distance considered
        similarity_threshold: Minimum edit-distance score to accept
        max_suggestions: Cap on suggestions() output
    """

    def __init__(
        self,
        lexicon: Lexicon | None = None,
        max_edit_distance: int = 2,
        similarity_threshold: float = 0.75,
        max_suggestions: int = 5,
    ) -> None:
        self.lexicon = lexicon or Lexicon.default()
        self.max_edit_distance = max_edit_distance
        self.similarity_threshold = similarity_threshold
        self.max_suggestions = max_suggestions

        # Indexes over the valid words bound the fuzzy scans
        self._by_length: dict[int, list[str]] = defaultdict(list)
        self._by_soundex: dict[str, list[str]] = defaultdict(list)
        for word in sorted(self.lexicon.valid_words):
            if not word.isalpha():
                continue
            self._by_length[len(word)].append(word)
            self._by_soundex[soundex(word)].append(word)

        # Curated entity names are protected like emails and phone numbers
        self._mask_patterns = dict(DEFAULT_PATTERNS)
        known = literal_pattern(self.lexicon.known_entities)
        if known is not None:
            self._mask_patterns["known_entity"] = known

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def correct(self, text: str) -> CorrectionResult:
        """Correct every token of a query.

        Args:
            text: Raw query text

        Returns:
            CorrectionResult with the corrected text and applied corrections
        """
        if not text or not text.strip():
            return CorrectionResult(text or "", text or "", [])

        mask = SpanMask.detect(text, self._mask_patterns)
        tokens = tokenize(text)
        corrections: list[CorrectionRecord] = []
        parts: list[str] = []
        cursor = 0

        for token in tokens:
            parts.append(text[cursor : token.start])
            cursor = token.end

            if mask.overlaps(token.start, token.end):
                parts.append(token.surface)
                continue

            previous = tokens[token.index - 1].clean if token.index > 0 else ""
            following = tokens[token.index + 1].clean if token.index + 1 < len(tokens) else ""
            fuzzy = not self._is_name_like(tokens, token)
            outcome = self._correct_clean(token.clean, previous, following, fuzzy=fuzzy)
            if outcome is None:
                parts.append(token.surface)
                continue

            corrected, strategy = outcome
            surface = self.preserve_case_and_punctuation(token.surface, corrected)
            parts.append(surface)
            corrections.append(CorrectionRecord(token.surface, surface, strategy))
            logger.debug(f"Corrected '{token.surface}' -> '{surface}' ({strategy.value})")

        parts.append(text[cursor:])
        return CorrectionResult(text, "".join(parts), corrections)

    def correct_word(self, word: str, context: Sequence[str] = ()) -> str:
        """Correct a single word.

        Args:
            word: Word as written
            context: Optional (previous word, next word) pair

        Returns:
            The corrected word with the original case and punctuation,
            or the word unchanged
        """
        previous = clean_word(context[0]) if len(context) > 0 else ""
        following = clean_word(context[1]) if len(context) > 1 else ""
        outcome = self._correct_clean(clean_word(word), previous, following)
        if outcome is None:
            return word
        return self.preserve_case_and_punctuation(word, outcome[0])

    def preserve_case_and_punctuation(self, original: str, corrected: str) -> str:
        """Re-apply the original's edge punctuation and case pattern to a correction."""
        core = _EDGE_PUNCTUATION.sub("", original)
        if not core:
            return corrected

        start = original.find(core)
        leading = original[:start]
        trailing = original[start + len(core) :]
        return f"{leading}{self._apply_case(core, corrected)}{trailing}"

    def suggestions(self, word: str) -> list[TypoSuggestion]:
        """Ranked correction candidates for a word (empty for valid words)."""
        clean = clean_word(word)
        if not clean or self._is_valid(clean):
            return []

        found: list[TypoSuggestion] = []
        lexicon = self.lexicon

        if clean in lexicon.domain_corrections:
            found.append(TypoSuggestion(lexicon.domain_corrections[clean], 0.95, CorrectionStrategy.DOMAIN.value))

        for i, candidate in enumerate(lexicon.typo_suggestions.get(clean, ())[:3]):
            found.append(TypoSuggestion(candidate, round(0.90 - 0.1 * i, 2), CorrectionStrategy.TYPO.value))

        if clean in lexicon.typo_abbreviations:
            found.append(
                TypoSuggestion(lexicon.typo_abbreviations[clean], 0.85, CorrectionStrategy.ABBREVIATION.value)
            )

        if clean.isalpha():
            neighbours = []
            for candidate in self._length_candidates(clean, self.max_edit_distance):
                distance = Levenshtein.distance(clean, candidate, score_cutoff=self.max_edit_distance)
                if 0 < distance <= self.max_edit_distance:
                    neighbours.append((distance, -lexicon.frequency(candidate), candidate))
            for distance, _, candidate in sorted(neighbours):
                confidence = max(0.0, round(0.8 - 0.2 * distance, 2))
                found.append(TypoSuggestion(candidate, confidence, CorrectionStrategy.EDIT_DISTANCE.value))

        unique: list[TypoSuggestion] = []
        seen: set[str] = set()
        for suggestion in found:
            if suggestion.suggestion in seen:
                continue
            seen.add(suggestion.suggestion)
            unique.append(suggestion)
        return unique[: self.max_suggestions]

    def needs_correction(self, word: str) -> bool:
        """Check whether a word would be considered for correction."""
        if not word or not word.strip():
            return False
        stripped = word.strip()
        if EMAIL_PATTERN.fullmatch(stripped) or PHONE_PATTERN.fullmatch(stripped):
            return False
        clean = clean_word(stripped)
        if not clean or any(c.isdigit() for c in clean):
            return False
        return not self._is_valid(clean)

    def correction_confidence(self, original: str, corrected: str) -> float:
        """Confidence that corrected is the right fix for original."""
        source, target = clean_word(original), clean_word(corrected)
        if source == target:
            return 1.0

        lexicon = self.lexicon
        if lexicon.domain_corrections.get(source) == target:
            return 0.95
        if target in lexicon.typo_suggestions.get(source, ()):
            return 0.90
        if lexicon.typo_abbreviations.get(source) == target:
            return 0.85

        distance = Levenshtein.distance(source, target)
        if distance <= self.max_edit_distance:
            similarity = 1.0 - distance / max(len(source), len(target))
            return min(1.0, max(0.0, similarity * 0.7 + lexicon.frequency(target) * 0.3))
        return 0.0

    def stats(self) -> dict[str, Any]:
        lexicon = self.lexicon
        return {
            "valid_words": len(lexicon.valid_words),
            "domain_corrections": len(lexicon.domain_corrections),
            "typo_suggestions": len(lexicon.typo_suggestions),
            "abbreviations": len(lexicon.typo_abbreviations),
            "contextual_corrections": len(lexicon.contextual_corrections),
            "soundex_codes": len(self._by_soundex),
            "max_edit_distance": self.max_edit_distance,
            "similarity_threshold": self.similarity_threshold,
        }

    # ------------------------------------------------------------------
    # Strategy chain
    # ------------------------------------------------------------------

    def _correct_clean(
        self, clean: str, previous: str, following: str, fuzzy: bool = True
    ) -> tuple[str, CorrectionStrategy] | None:
        """Run the strategy chain on a cleaned token; None means unchanged.

        With fuzzy=False only the dictionary strategies run.
        """
        if not clean or any(c.isdigit() for c in clean):
            return None
        if self._is_valid(clean):
            return None

        lexicon = self.lexicon

        if clean in lexicon.domain_corrections:
            return lexicon.domain_corrections[clean], CorrectionStrategy.DOMAIN

        candidates = lexicon.typo_suggestions.get(clean)
        if candidates:
            return self._best_typo_candidate(candidates, (previous, following)), CorrectionStrategy.TYPO

        if clean in lexicon.typo_abbreviations:
            return lexicon.typo_abbreviations[clean], CorrectionStrategy.ABBREVIATION

        contextual = self._contextual(clean, previous, following)
        if contextual is not None:
            return contextual, CorrectionStrategy.CONTEXTUAL

        # Fuzzy strategies only make sense for plain words of some length
        if not fuzzy or not clean.isalpha() or len(clean) < 3:
            return None

        match = self._edit_distance_match(clean)
        if match is not None:
            return match, CorrectionStrategy.EDIT_DISTANCE

        match = self._phonetic_match(clean)
        if match is not None:
            return match, CorrectionStrategy.PHONETIC

        match = self._keyboard_match(clean)
        if match is not None:
            return match, CorrectionStrategy.KEYBOARD

        return None

    @staticmethod
    def _is_name_like(tokens: list[Token], token: Token) -> bool:
        """Capitalized token that does not open a sentence (a likely proper name)."""
        core = _EDGE_PUNCTUATION.sub("", token.surface)
        if not core[:1].isupper():
            return False
        if token.index == 0:
            return False
        return not tokens[token.index - 1].surface.endswith(_SENTENCE_END)

    def _is_valid(self, clean: str) -> bool:
        valid = self.lexicon.valid_words
        if clean in valid:
            return True
        # Regular inflections of a valid word are valid too
        for suffix in _INFLECTIONS:
            if clean.endswith(suffix) and clean[: -len(suffix)] in valid:
                return True
        return False

    def _best_typo_candidate(self, candidates: Sequence[str], context: Sequence[str]) -> str:
        best, best_score = candidates[0], float("-inf")
        for candidate in candidates:
            score = self.lexicon.frequency(candidate)
            for word in context:
                if word and self.lexicon.related(candidate, word):
                    score += 0.3
            if score > best_score:
                best, best_score = candidate, score
        return best

    def _contextual(self, clean: str, previous: str, following: str) -> str | None:
        table = self.lexicon.contextual_corrections
        if clean in table:
            return table[clean]
        if previous and f"{previous}_{clean}" in table:
            return table[f"{previous}_{clean}"]
        if following and f"{clean}_{following}" in table:
            return table[f"{clean}_{following}"]
        return None

    def _length_candidates(self, clean: str, spread: int) -> list[str]:
        words: list[str] = []
        for length in range(max(1, len(clean) - spread), len(clean) + spread + 1):
            words.extend(self._by_length.get(length, ()))
        return sorted(words)

    def _edit_distance_match(self, clean: str) -> str | None:
        best, best_score = None, 0.0
        for candidate in self._length_candidates(clean, self.max_edit_distance):
            distance = Levenshtein.distance(clean, candidate, score_cutoff=self.max_edit_distance)
            if distance > self.max_edit_distance:
                continue
            similarity = 1.0 - distance / max(len(clean), len(candidate))
            score = 0.7 * similarity + 0.3 * self.lexicon.frequency(candidate)
            if score > best_score:
                best, best_score = candidate, score
        if best is not None and best_score >= self.similarity_threshold:
            return best
        return None

    def _phonetic_match(self, clean: str) -> str | None:
        candidates = [
            word for word in self._by_soundex.get(soundex(clean), ()) if word != clean and abs(len(word) - len(clean)) <= 2
        ]
        if not candidates:
            return None
        return min(
            candidates,
            key=lambda w: (Levenshtein.distance(clean, w), -self.lexicon.frequency(w), w),
        )

    def _keyboard_match(self, clean: str) -> str | None:
        matches = [w for w in self._length_candidates(clean, 1) if self._keyboard_close(clean, w)]
        if not matches:
            return None
        return min(matches, key=lambda w: (-self.lexicon.frequency(w), w))

    def _keyboard_close(self, typed: str, word: str) -> bool:
        """At most one differing key within the shared length, and it must be a neighbour."""
        if typed == word or abs(len(typed) - len(word)) > 1:
            return False
        adjacency = self.lexicon.keyboard_adjacency
        differences = [(a, b) for a, b in zip(typed, word) if a != b]
        if len(differences) > 1:
            return False
        if differences:
            a, b = differences[0]
            return b in adjacency.get(a, "") or a in adjacency.get(b, "")
        return True

    @staticmethod
    def _apply_case(pattern: str, word: str) -> str:
        if pattern.isupper():
            return word.upper()
        if pattern.islower() or not any(c.isalpha() for c in pattern):
            return word.lower()
        if pattern[0].isupper() and (len(pattern) == 1 or pattern[1:].islower()):
            return word[:1].upper() + word[1:].lower()
        return "".join(
            c.upper() if i < len(pattern) and pattern[i].isupper() else c.lower() for i, c in enumerate(word)
        )


__all__ = [
    "CorrectionRecord",
    "CorrectionResult",
    "CorrectionStrategy",
    "Token",
    "TypoCorrector",
    "TypoSuggestion",
    "clean_word",
    "soundex",
    "tokenize",
]
