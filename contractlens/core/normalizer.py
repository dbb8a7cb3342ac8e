"""Staged query normalization.

QueryNormalizer turns a chat utterance into a canonical, lowercase string
that downstream keyword and entity matching can rely on. Each stage is a
small pure function; a stage that changes the text appends its name to the
transformation log, and the log feeds the confidence score.

Stages, in order:
    truncated, entity_preservation, unicode_normalization, html_cleanup,
    markdown_cleanup, emoji_processing, profanity_filtering,
    contraction_expansion, slang_normalization, abbreviation_expansion,
    domain_term_expansion, business_term_expansion, spell_correction,
    synonym_replacement, repeated_char_normalization, special_char_removal,
    case_normalization, whitespace_normalization, stopword_removal,
    entity_restoration

URLs, emails, phone numbers and numbers are masked by position (each one
individually toggleable) so no stage can alter them.
"""

from __future__ import annotations

import html
import logging
import re
import time
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from ..config import NormalizerConfig
from .lexicon import Lexicon
from .masking import EMAIL_PATTERN, NUMBER_PATTERN, PHONE_PATTERN, URL_PATTERN, SpanMask
from .rules import WORD_LEFT, WORD_RIGHT, RuleChain

logger = logging.getLogger(__name__)

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
MARKDOWN_PATTERN = re.compile(r"\*\*([^*]+)\*\*|\*([^*]+)\*|__([^_]+)__|(?<!\w)_([^_]+)_(?!\w)")
MARKDOWN_CODE_PATTERN = re.compile(r"`([^`]+)`")
REPEATED_CHAR_PATTERN = re.compile(r"([^\d\s])\1{2,}")
SPECIAL_CHAR_PATTERN = re.compile(r"[^\w\s\-.,!?@#$%&*()+=\[\]{}|;:'\"/\\<>]")
PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")
WHITESPACE_PATTERN = re.compile(r"\s+")
WORD_PATTERN = re.compile(r"[A-Za-z][A-Za-z']*")

_QUOTES = str.maketrans({"\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"'})

FILTERED = "[filtered]"


@dataclass
class NormalizationResult:
    """Output of QueryNormalizer.normalize().

    Attributes:
        original: Input as given
        normalized: Canonical query text
        confidence: Trust in the normalization (0.0 - 1.0)
        message: Human-readable outcome
        transformations: Names of the stages that changed the text, in order
        processing_time_ms: Wall time spent normalizing
    """

    original: str
    normalized: str
    confidence: float
    message: str
    transformations: list[str] = field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.message.startswith("Successfully")

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "normalized": self.normalized,
            "confidence": self.confidence,
            "message": self.message,
            "transformations": list(self.transformations),
            "processing_time_ms": self.processing_time_ms,
        }


Pieces = list[tuple[str, bool]]


class QueryNormalizer:
    """Normalizes free-text queries.

    Attributes:
        lexicon: Dictionary snapshot with the expansion tables
        config: Preserve flags, toggles and length limits
    """

    def __init__(self, lexicon: Lexicon | None = None, config: NormalizerConfig | None = None) -> None:
        self.lexicon = lexicon or Lexicon.default()
        self.config = config or NormalizerConfig()

        lexicon = self.lexicon
        self._contractions = RuleChain.from_table("contraction_expansion", lexicon.contractions)
        self._slang = RuleChain.from_table("slang_normalization", lexicon.slang)
        self._abbreviations = RuleChain.from_table("abbreviation_expansion", lexicon.abbreviations)
        self._domain_terms = RuleChain.from_table("domain_term_expansion", lexicon.domain_terms)
        self._business_terms = RuleChain.from_table("business_term_expansion", lexicon.business_terms)
        self._misspellings = RuleChain.from_table("spell_correction", lexicon.misspellings)
        self._synonyms = RuleChain.from_table("synonym_replacement", lexicon.synonyms)

        profanity = "|".join(re.escape(w) for w in sorted(lexicon.profanity, key=len, reverse=True))
        self._profanity = (
            re.compile(f"{WORD_LEFT}(?:{profanity}){WORD_RIGHT}", re.IGNORECASE) if profanity else None
        )

        self._preserve: dict[str, re.Pattern[str]] = {}
        if self.config.preserve_urls:
            self._preserve["url"] = URL_PATTERN
        if self.config.preserve_emails:
            self._preserve["email"] = EMAIL_PATTERN
        if self.config.preserve_phones:
            self._preserve["phone"] = PHONE_PATTERN
        if self.config.preserve_numbers:
            self._preserve["number"] = NUMBER_PATTERN

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def normalize(self, query: str | None) -> NormalizationResult:
        """Normalize one query.

        Never raises: blank, too-short and failing inputs produce
        low-confidence sentinel results.

        Args:
            query: Raw query text

        Returns:
            NormalizationResult with the normalized text and transformation log
        """
        started = time.perf_counter()

        if query is None or not query.strip():
            return NormalizationResult(query or "", "", 0.0, "Empty query", [], self._elapsed(started))

        if len(query.strip()) < self.config.min_query_length:
            return NormalizationResult(
                query, query.strip(), 0.5, "Query too short", [], self._elapsed(started)
            )

        try:
            normalized, transformations = self._run_stages(query)
        except Exception as e:
            logger.error(f"Normalization failed: {e}")
            return NormalizationResult(
                query, query, 0.1, f"Error during normalization: {e}", [], self._elapsed(started)
            )

        if not normalized:
            return NormalizationResult(
                query,
                "",
                0.3,
                "Normalization resulted in empty query",
                transformations,
                self._elapsed(started),
            )

        confidence = self._confidence(query, normalized, transformations)
        return NormalizationResult(
            query,
            normalized,
            confidence,
            f"Successfully normalized with {len(transformations)} transformations",
            transformations,
            self._elapsed(started),
        )

    def normalize_batch(self, queries: Iterable[str | None]) -> list[NormalizationResult]:
        return [self.normalize(query) for query in queries]

    def stats(self) -> dict[str, Any]:
        lexicon = self.lexicon
        return {
            "contractions": len(lexicon.contractions),
            "slang": len(lexicon.slang),
            "abbreviations": len(lexicon.abbreviations),
            "domain_terms": len(lexicon.domain_terms),
            "business_terms": len(lexicon.business_terms),
            "misspellings": len(lexicon.misspellings),
            "synonyms": len(lexicon.synonyms),
            "emoji": len(lexicon.emoji),
            "stop_words": len(lexicon.stop_words),
            "business_stop_words": len(lexicon.business_stop_words),
            "profanity": len(lexicon.profanity),
            "preserved_entities": sorted(self._preserve),
            "config": self.config.model_dump(),
        }

    def validate(self) -> list[str]:
        """Check the tables and limits for problems.

        Returns:
            Human-readable problem descriptions (empty when all is well)
        """
        problems: list[str] = []
        config = self.config
        if config.min_query_length > config.max_query_length:
            problems.append(
                f"min_query_length ({config.min_query_length}) exceeds max_query_length ({config.max_query_length})"
            )

        tables = {
            "contractions": self.lexicon.contractions,
            "slang": self.lexicon.slang,
            "abbreviations": self.lexicon.abbreviations,
            "domain_terms": self.lexicon.domain_terms,
            "business_terms": self.lexicon.business_terms,
            "misspellings": self.lexicon.misspellings,
            "synonyms": self.lexicon.synonyms,
        }
        for name, table in tables.items():
            if not table:
                problems.append(f"{name} table is empty")
            for key, value in table.items():
                if not key.strip() or not value.strip():
                    problems.append(f"{name} has a blank entry: {key!r} -> {value!r}")
                elif key.lower() == value.lower():
                    problems.append(f"{name} maps '{key}' to itself")

        synonyms = self.lexicon.synonyms
        for word, canonical in synonyms.items():
            if synonyms.get(canonical) == word:
                problems.append(f"synonyms contain a cycle: '{word}' <-> '{canonical}'")
        return problems

    # ------------------------------------------------------------------
    # Stage runner
    # ------------------------------------------------------------------

    def _run_stages(self, query: str) -> tuple[str, list[str]]:
        transformations: list[str] = []
        text = query

        if len(text) > self.config.max_query_length:
            logger.warning(f"Query truncated from {len(text)} to {self.config.max_query_length} chars")
            text = text[: self.config.max_query_length]
            transformations.append("truncated")

        mask = SpanMask.detect(text, self._preserve)
        pieces: Pieces = [(piece, span is not None) for piece, span in mask.segments()]
        if mask:
            transformations.append("entity_preservation")

        stages: list[tuple[str, Callable[[str], str], bool]] = [
            ("unicode_normalization", self._unicode, True),
            ("html_cleanup", self._html, True),
            ("markdown_cleanup", self._markdown, True),
            ("emoji_processing", self._emoji, self.config.process_emoji),
            ("profanity_filtering", self._filter_profanity, self.config.filter_profanity),
            ("contraction_expansion", self._contractions.apply, True),
            ("slang_normalization", self._slang.apply, True),
            ("abbreviation_expansion", self._abbreviations.apply, True),
            ("domain_term_expansion", self._domain_terms.apply, True),
            ("business_term_expansion", self._business_terms.apply, True),
            ("spell_correction", self._misspellings.apply, True),
            ("synonym_replacement", self._synonyms.apply, True),
            ("repeated_char_normalization", self._repeated_chars, True),
            ("special_char_removal", self._special_chars, True),
            ("case_normalization", str.lower, not self.config.preserve_case),
            ("whitespace_normalization", self._collapse_whitespace, True),
            ("stopword_removal", self._remove_stopwords, self.config.remove_stopwords),
        ]

        for name, stage, enabled in stages:
            if not enabled:
                continue
            rewritten = [(piece if protected else stage(piece), protected) for piece, protected in pieces]
            if rewritten != pieces:
                transformations.append(name)
                pieces = rewritten

        if mask:
            transformations.append("entity_restoration")

        joined = "".join(piece for piece, _ in pieces)
        normalized = WHITESPACE_PATTERN.sub(" ", joined).strip()
        if normalized != joined and "whitespace_normalization" not in transformations:
            transformations.insert(len(transformations) - (1 if mask else 0), "whitespace_normalization")

        logger.debug(f"Normalized '{query[:80]}' with {transformations}")
        return normalized, transformations

    def _confidence(self, original: str, normalized: str, transformations: list[str]) -> float:
        confidence = 1.0 - 0.02 * len(transformations)

        ratio = len(normalized) / max(1, len(original))
        if ratio < 0.5 or ratio > 2.0:
            confidence -= 0.2
        elif ratio < 0.7 or ratio > 1.5:
            confidence -= 0.1

        if "spell_correction" in transformations:
            confidence += 0.05
        if "contraction_expansion" in transformations:
            confidence += 0.03
        if "abbreviation_expansion" in transformations:
            confidence += 0.03
        return round(min(1.0, max(0.0, confidence)), 4)

    @staticmethod
    def _elapsed(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 3)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    @staticmethod
    def _unicode(text: str) -> str:
        return unicodedata.normalize("NFKC", text.translate(_QUOTES))

    @staticmethod
    def _html(text: str) -> str:
        return html.unescape(HTML_TAG_PATTERN.sub(" ", text))

    @staticmethod
    def _markdown(text: str) -> str:
        text = MARKDOWN_CODE_PATTERN.sub(r"\1", text)
        return MARKDOWN_PATTERN.sub(lambda m: next(g for g in m.groups() if g is not None), text)

    def _emoji(self, text: str) -> str:
        for symbol, word in self.lexicon.emoji.items():
            if symbol in text:
                text = text.replace(symbol, f" {word} ")
        return text

    def _filter_profanity(self, text: str) -> str:
        if self._profanity is None:
            return text
        return self._profanity.sub(FILTERED, text)

    @staticmethod
    def _repeated_chars(text: str) -> str:
        return REPEATED_CHAR_PATTERN.sub(r"\1\1", text)

    def _special_chars(self, text: str) -> str:
        if not self.config.preserve_punctuation:
            return PUNCTUATION_PATTERN.sub(" ", text)
        return SPECIAL_CHAR_PATTERN.sub("", text)

    @staticmethod
    def _collapse_whitespace(text: str) -> str:
        return WHITESPACE_PATTERN.sub(" ", text)

    def _remove_stopwords(self, text: str) -> str:
        stop_words = self.lexicon.stop_words
        keep = self.lexicon.business_stop_words

        def drop(match: "re.Match[str]") -> str:
            word = match.group(0).lower()
            return "" if word in stop_words and word not in keep else match.group(0)

        return WHITESPACE_PATTERN.sub(" ", WORD_PATTERN.sub(drop, text))


__all__ = ["FILTERED", "NormalizationResult", "QueryNormalizer"]
