"""Typed entity extraction with overlap reconciliation.

EntityResolver finds business entities (identifiers, contact details,
amounts, dates, names, status words) in a query. Four passes run over the
text and their results are unioned:

1. Pattern pass: one regex per entity type
2. Dictionary pass: status, priority, department and currency words
3. Context pass: nearby keywords nudge each candidate's confidence
4. Known-entity pass: curated entities, with fuzzy matching for names

Overlapping candidates are then reconciled (higher confidence wins, ties go
to the more specific type), the survivors are rescored from five weighted
factors, and anything under the confidence threshold is dropped.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

from rapidfuzz import process
from rapidfuzz.distance import Levenshtein

from ..config import EntityConfig
from .lexicon import Lexicon

logger = logging.getLogger(__name__)


class EntityType(str, Enum):
    """Kinds of entity the resolver can produce."""

    CONTRACT_NUMBER = "CONTRACT_NUMBER"
    CUSTOMER_ID = "CUSTOMER_ID"
    ACCOUNT_NUMBER = "ACCOUNT_NUMBER"
    INVOICE_NUMBER = "INVOICE_NUMBER"
    PAYMENT_ID = "PAYMENT_ID"
    AMOUNT = "AMOUNT"
    DATE = "DATE"
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    PERSON_NAME = "PERSON_NAME"
    COMPANY_NAME = "COMPANY_NAME"
    ADDRESS = "ADDRESS"
    STATUS = "STATUS"
    PRIORITY = "PRIORITY"
    DEPARTMENT = "DEPARTMENT"
    CURRENCY = "CURRENCY"
    REFERENCE_NUMBER = "REFERENCE_NUMBER"
    PRODUCT_CODE = "PRODUCT_CODE"
    PERCENTAGE = "PERCENTAGE"
    TIME = "TIME"
    URL = "URL"
    IP_ADDRESS = "IP_ADDRESS"
    CREDIT_CARD = "CREDIT_CARD"
    SSN = "SSN"
    TAX_ID = "TAX_ID"
    UNKNOWN = "UNKNOWN"

    @property
    def label(self) -> str:
        """Lowercase, space-separated name for summaries."""
        return self.value.lower().replace("_", " ")


# Tie-break ranking when overlapping candidates have equal confidence
SPECIFICITY: dict[EntityType, int] = {
    EntityType.CONTRACT_NUMBER: 10,
    EntityType.CUSTOMER_ID: 10,
    EntityType.ACCOUNT_NUMBER: 10,
    EntityType.INVOICE_NUMBER: 10,
    EntityType.PAYMENT_ID: 10,
    EntityType.EMAIL: 9,
    EntityType.PHONE: 9,
    EntityType.CREDIT_CARD: 9,
    EntityType.SSN: 9,
    EntityType.TAX_ID: 9,
    EntityType.AMOUNT: 8,
    EntityType.DATE: 8,
    EntityType.TIME: 8,
    EntityType.PERCENTAGE: 8,
    EntityType.PERSON_NAME: 7,
    EntityType.COMPANY_NAME: 7,
    EntityType.ADDRESS: 7,
    EntityType.URL: 6,
    EntityType.IP_ADDRESS: 6,
    EntityType.STATUS: 5,
    EntityType.PRIORITY: 5,
    EntityType.DEPARTMENT: 5,
    EntityType.CURRENCY: 4,
    EntityType.REFERENCE_NUMBER: 3,
    EntityType.PRODUCT_CODE: 3,
    EntityType.UNKNOWN: 1,
}

# Only names are matched fuzzily; identifiers and contact details must match exactly
FUZZY_TYPES = frozenset({EntityType.PERSON_NAME, EntityType.COMPANY_NAME})

PATTERN_CONFIDENCE = 0.8
_CONFIDENCE_EPSILON = 1e-9


def _identifier(min_length: int, max_length: int) -> str:
    """Identifier of the given length: alphanumerics with inner hyphens and at least one digit."""
    return rf"((?=[A-Z0-9-]*\d)[A-Z0-9][A-Z0-9-]{{{min_length - 2},{max_length - 2}}}[A-Z0-9])"


_ID_PREFIXES: dict[EntityType, str] = {
    EntityType.CONTRACT_NUMBER: r"(?:contract|cntr|ct)[-_#\s]*",
    EntityType.CUSTOMER_ID: r"(?:customer|cust|client)[-_#\s]*(?:id|number)?[-_#\s]*",
    EntityType.ACCOUNT_NUMBER: r"(?:account|acct|acc)[-_#\s]*(?:number|no|num)?[-_#\s]*",
    EntityType.INVOICE_NUMBER: r"(?:invoice|inv)[-_#\s]*(?:number|no|num)?[-_#\s]*",
    EntityType.PAYMENT_ID: r"(?:payment|pay|transaction|txn)[-_#\s]*(?:id|number)?[-_#\s]*",
    EntityType.REFERENCE_NUMBER: r"(?:ref|reference|ticket|case)[-_#\s]*(?:number|no|num)?[-_#\s]*",
}

_ID_LENGTHS: dict[EntityType, tuple[int, int]] = {
    EntityType.CONTRACT_NUMBER: (3, 15),
    EntityType.CUSTOMER_ID: (3, 12),
    EntityType.ACCOUNT_NUMBER: (4, 16),
    EntityType.INVOICE_NUMBER: (3, 15),
    EntityType.PAYMENT_ID: (4, 20),
    EntityType.REFERENCE_NUMBER: (3, 15),
}

_MONTHS = r"(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*"

ENTITY_PATTERNS: dict[EntityType, re.Pattern[str]] = {
    **{
        entity_type: re.compile(rf"\b{prefix}{_identifier(*_ID_LENGTHS[entity_type])}\b", re.IGNORECASE)
        for entity_type, prefix in _ID_PREFIXES.items()
        if entity_type is not EntityType.REFERENCE_NUMBER
    },
    EntityType.AMOUNT: re.compile(
        r"\$?\b(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)\b|\b(\d+(?:\.\d{2})?)\s*(?:dollars?|usd|\$)(?!\w)",
        re.IGNORECASE,
    ),
    EntityType.DATE: re.compile(
        r"\b(\d{1,2}[/-]\d{1,2}[/-]\d{2,4}|\d{4}[/-]\d{1,2}[/-]\d{1,2}"
        rf"|{_MONTHS}\s+\d{{1,2}},?\s+\d{{2,4}}|\d{{1,2}}\s+{_MONTHS}\s+\d{{2,4}})\b",
        re.IGNORECASE,
    ),
    EntityType.EMAIL: re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),
    EntityType.PHONE: re.compile(
        r"(?<![\w+])(?:\+?1[-.\s]?)?(?:\(\d{3}\)|\d{3})[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"
    ),
    EntityType.PERSON_NAME: re.compile(
        r"\b(?:[Mm]rs?|[Mm]s|[Dd]r|[Pp]rof)\.?\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)|\b([A-Z][a-z]+\s+[A-Z][a-z]+)\b"
    ),
    EntityType.COMPANY_NAME: re.compile(
        r"\b([A-Z][A-Za-z\s&]+(?:Inc|LLC|Corp|Corporation|Company|Co|Ltd|Limited|Group|Solutions"
        r"|Services|Systems|Technologies|Tech))\b"
    ),
    EntityType.REFERENCE_NUMBER: re.compile(
        rf"\b{_ID_PREFIXES[EntityType.REFERENCE_NUMBER]}{_identifier(3, 15)}\b", re.IGNORECASE
    ),
    EntityType.PERCENTAGE: re.compile(r"\b(\d+(?:\.\d+)?)\s*%|\b(\d+(?:\.\d+)?)\s*percent\b", re.IGNORECASE),
    EntityType.TIME: re.compile(r"\b(\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AaPp][Mm])?)\b"),
    EntityType.URL: re.compile(r"\b(?:https?://|www\.)[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]"),
    EntityType.IP_ADDRESS: re.compile(
        r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b"
    ),
    EntityType.CREDIT_CARD: re.compile(
        r"(?<![\w*])(?:\*{4}[-\s]?){3}\d{4}\b|\b\d{4}[-\s]?(?:\*{4}[-\s]?){2}\d{4}\b"
    ),
    EntityType.SSN: re.compile(r"(?<!\w)\*{3}-\*{2}-\d{4}\b|\b\d{3}-\*{2}-\*{4}(?!\w)"),
    EntityType.TAX_ID: re.compile(r"\b(?:tax[-\s]?id|ein|fein)[-_#\s]*([0-9]{2}-[0-9]{7})\b", re.IGNORECASE),
}

_PREFIX_STRIP: dict[EntityType, re.Pattern[str]] = {
    entity_type: re.compile(rf"^{prefix}", re.IGNORECASE) for entity_type, prefix in _ID_PREFIXES.items()
}
_PERCENT_SUFFIX = re.compile(r"\s*(?:%|percent)\s*$", re.IGNORECASE)
_NON_AMOUNT = re.compile(r"[^\d.,]")
_SPACE_VARIANTS = str.maketrans({"\u00a0": " ", "\u2007": " ", "\u202f": " "})

# Context features: (feature name, pattern); checked against the lowercased window
_COMMON_FEATURES = {
    "hasNumbers": re.compile(r"\d"),
    "hasDateKeywords": re.compile(r"date|time|when|schedule|due|deadline"),
    "hasAmountKeywords": re.compile(r"amount|cost|price|fee|charge|total|sum"),
}

_TYPE_FEATURES: dict[EntityType, dict[str, tuple[re.Pattern[str], float]]] = {
    EntityType.CONTRACT_NUMBER: {
        "hasContractKeywords": (re.compile(r"agreement|terms|conditions|signed|executed"), 0.2),
        "hasLegalTerms": (re.compile(r"party|parties|whereas|hereby|therefore"), 0.1),
    },
    EntityType.CUSTOMER_ID: {
        "hasCustomerKeywords": (re.compile(r"client|customer|account|contact|profile"), 0.2),
        "hasPersonalInfo": (re.compile(r"name|address|phone|email"), 0.1),
    },
    EntityType.INVOICE_NUMBER: {
        "hasInvoiceKeywords": (re.compile(r"bill|billing|invoice|payment|due|outstanding"), 0.2),
        "hasFinancialTerms": (re.compile(r"tax|discount|subtotal|total|balance"), 0.1),
    },
    EntityType.AMOUNT: {
        "hasCurrencySymbols": (re.compile(r"[$€£¥]"), 0.2),
        "hasPaymentTerms": (re.compile(r"paid|pay|payment|charge|cost|fee"), 0.1),
    },
    EntityType.DATE: {
        "hasTimeKeywords": (re.compile(r"morning|afternoon|evening|am|pm|time|hour"), 0.1),
        "hasScheduleKeywords": (re.compile(r"meeting|appointment|deadline|due|schedule"), 0.1),
    },
    EntityType.EMAIL: {
        "hasContactKeywords": (re.compile(r"contact|email|send|reply|message"), 0.2),
        "hasCommunicationTerms": (re.compile(r"notification|alert|correspondence"), 0.1),
    },
    EntityType.PHONE: {
        "hasPhoneKeywords": (re.compile(r"phone|call|number|contact|mobile|cell"), 0.2),
        "hasContactInfo": (re.compile(r"reach|contact|call|dial"), 0.1),
    },
}

# Common features that also count for specific types
_COMMON_BONUS: dict[EntityType, tuple[str, float]] = {
    EntityType.AMOUNT: ("hasAmountKeywords", 0.1),
    EntityType.DATE: ("hasDateKeywords", 0.2),
}

# Keywords whose presence in the window makes the final context factor 1.0
_CONTEXT_KEYWORDS: dict[EntityType, tuple[str, ...]] = {
    EntityType.CONTRACT_NUMBER: ("contract", "agreement"),
    EntityType.CUSTOMER_ID: ("customer", "client"),
    EntityType.INVOICE_NUMBER: ("invoice", "bill"),
    EntityType.AMOUNT: ("$", "amount", "cost"),
    EntityType.EMAIL: ("email", "contact"),
    EntityType.PHONE: ("phone", "call"),
}

_VALID_EMAIL = re.compile(r"^[A-Za-z0-9+_.-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})$")
_VALID_URL = re.compile(r"^(?:https?|ftp)://[^\s/$.?#].[^\s]*$|^www\.[^\s/$.?#].[^\s]*$")
DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d", "%b %d, %Y", "%d %b %Y", "%B %d, %Y")


@dataclass(frozen=True)
class ResolvedEntity:
    """A typed span of the input text.

    Attributes:
        type: Entity type
        value: Canonical value (prefixes such as "contract #" removed)
        original_text: The matched text, equal to text[start:end]
        start: Start offset in the input
        end: End offset in the input (exclusive)
        confidence: Score in [0, 1]
        context: Surrounding window of text
        context_data: Context features found in the window
    """

    type: EntityType
    value: str
    original_text: str
    start: int
    end: int
    confidence: float
    context: str = ""
    context_data: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def overlaps(self, other: "ResolvedEntity") -> bool:
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "value": self.value,
            "original_text": self.original_text,
            "start": self.start,
            "end": self.end,
            "confidence": round(self.confidence, 4),
        }


@dataclass
class EntityResolutionResult:
    """Output of EntityResolver.resolve()."""

    text: str
    entities: list[ResolvedEntity] = field(default_factory=list)
    confidence: float = 1.0
    summary: str = ""

    def by_type(self) -> dict[EntityType, list[ResolvedEntity]]:
        grouped: dict[EntityType, list[ResolvedEntity]] = {}
        for entity in self.entities:
            grouped.setdefault(entity.type, []).append(entity)
        return grouped

    def high_confidence(self, threshold: float = 0.9) -> list[ResolvedEntity]:
        return [e for e in self.entities if e.confidence >= threshold]

    def first(self, entity_type: EntityType) -> ResolvedEntity | None:
        """First entity of a type, by position."""
        return next((e for e in self.entities if e.type is entity_type), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "entities": [e.to_dict() for e in self.entities],
            "confidence": round(self.confidence, 4),
            "summary": self.summary,
        }


class EntityResolver:
    """Extracts, reconciles and scores entities.

    Attributes:
        lexicon: Dictionary snapshot (status words, known entities, ...)
        config: Thresholds and pass toggles
    """

    def __init__(self, lexicon: Lexicon | None = None, config: EntityConfig | None = None) -> None:
        self.lexicon = lexicon or Lexicon.default()
        self.config = config or EntityConfig()

        self._dictionaries: tuple[tuple[EntityType, tuple[str, ...], float], ...] = (
            (EntityType.STATUS, self.lexicon.status_values, 0.9),
            (EntityType.PRIORITY, self.lexicon.priority_values, 0.9),
            (EntityType.DEPARTMENT, self.lexicon.departments, 0.85),
            (EntityType.CURRENCY, self.lexicon.currencies, 0.9),
        )
        self._known: tuple[tuple[str, EntityType], ...] = tuple(
            (text, EntityType[type_name]) for text, type_name in self.lexicon.known_entities.items()
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, text: str | None) -> EntityResolutionResult:
        """Find every entity in text.

        Args:
            text: Query text; offsets in the result refer to this string

        Returns:
            EntityResolutionResult with entities sorted by position
        """
        if text is None or not text.strip():
            return EntityResolutionResult(text or "", [], 1.0, "Empty input")

        try:
            entities = self._resolve(text)
        except Exception as e:
            logger.error(f"Entity resolution failed: {e}")
            return EntityResolutionResult(text, [], 0.0, f"Error: {e}")

        if not entities:
            return EntityResolutionResult(text, [], 1.0, "No entities found")

        confidence = sum(e.confidence for e in entities) / len(entities)
        counts = Counter(e.type for e in entities)
        details = ", ".join(f"{count} {entity_type.label}" for entity_type, count in counts.items())
        return EntityResolutionResult(text, entities, confidence, f"Found {len(entities)} entities: {details}")

    def merge_overlapping(self, entities: list[ResolvedEntity]) -> list[ResolvedEntity]:
        """Keep one entity per cluster of overlapping spans.

        Entities are walked in start order; of two overlapping entities the
        higher confidence wins, and on equal confidence the more specific
        type wins (the earlier one otherwise).
        """
        if not entities:
            return []

        ordered = sorted(entities, key=lambda e: e.start)
        merged: list[ResolvedEntity] = []
        current = ordered[0]
        for candidate in ordered[1:]:
            if not current.overlaps(candidate):
                merged.append(current)
                current = candidate
                continue
            if candidate.confidence > current.confidence + _CONFIDENCE_EPSILON:
                current = candidate
            elif abs(candidate.confidence - current.confidence) <= _CONFIDENCE_EPSILON and SPECIFICITY.get(
                candidate.type, 0
            ) > SPECIFICITY.get(current.type, 0):
                current = candidate
        merged.append(current)
        return merged

    def entities_of_type(self, text: str, entity_type: EntityType) -> list[ResolvedEntity]:
        return [e for e in self.resolve(text).entities if e.type is entity_type]

    def high_confidence_entities(self, text: str, threshold: float = 0.9) -> list[ResolvedEntity]:
        return self.resolve(text).high_confidence(threshold)

    def stats(self) -> dict[str, Any]:
        return {
            "patterns": len(ENTITY_PATTERNS),
            "status_values": len(self.lexicon.status_values),
            "priority_values": len(self.lexicon.priority_values),
            "departments": len(self.lexicon.departments),
            "currencies": len(self.lexicon.currencies),
            "business_terms": len(self.lexicon.context_business_terms),
            "known_entities": len(self._known),
            "config": self.config.model_dump(),
        }

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _resolve(self, text: str) -> list[ResolvedEntity]:
        # Same-length replacement keeps every offset valid for the caller
        scan = text.translate(_SPACE_VARIANTS)

        candidates = self._pattern_pass(scan) + self._dictionary_pass(scan)
        if self.config.enable_context_analysis:
            candidates = [self._with_context(e, scan) for e in candidates]
        if self.config.enable_fuzzy_matching:
            candidates += self._known_entity_pass(scan)

        survivors = self.merge_overlapping(candidates)
        scored = [self._rescore(e, scan) for e in survivors]
        kept = [e for e in scored if e.confidence >= self.config.confidence_threshold]
        kept.sort(key=lambda e: e.start)

        logger.debug(f"Resolved {len(kept)}/{len(candidates)} entity candidates")
        return [replace(e, original_text=text[e.start : e.end]) for e in kept]

    def _pattern_pass(self, text: str) -> list[ResolvedEntity]:
        found: list[ResolvedEntity] = []
        for entity_type, pattern in ENTITY_PATTERNS.items():
            for match in pattern.finditer(text):
                start, end = match.span()
                matched = match.group(0)
                # Trim whitespace a pattern may have swallowed at its edges
                stripped = matched.strip()
                if not stripped:
                    continue
                start += len(matched) - len(matched.lstrip())
                end = start + len(stripped)
                if len(stripped) > self.config.max_entity_length:
                    continue
                found.append(
                    ResolvedEntity(
                        type=entity_type,
                        value=self._clean_value(stripped, entity_type),
                        original_text=stripped,
                        start=start,
                        end=end,
                        confidence=PATTERN_CONFIDENCE,
                        context=self._window(text, start, end),
                    )
                )
        return found

    def _dictionary_pass(self, text: str) -> list[ResolvedEntity]:
        lowered = text.lower()
        found: list[ResolvedEntity] = []
        for entity_type, values, confidence in self._dictionaries:
            for value in values:
                needle = value.lower()
                index = lowered.find(needle)
                while index != -1:
                    end = index + len(needle)
                    if self._at_word_boundary(lowered, index, end):
                        found.append(
                            ResolvedEntity(
                                type=entity_type,
                                value=value,
                                original_text=text[index:end],
                                start=index,
                                end=end,
                                confidence=confidence,
                                context=self._window(text, index, end),
                            )
                        )
                    index = lowered.find(needle, index + 1)
        return found

    def _known_entity_pass(self, text: str) -> list[ResolvedEntity]:
        found: list[ResolvedEntity] = []
        words = list(re.finditer(r"\S+", text))
        lowered = text.lower()

        for known, entity_type in self._known:
            # Exact hits ignore case but report the curated spelling as the value
            needle = known.lower()
            index = lowered.find(needle)
            if index != -1:
                while index != -1:
                    end = index + len(needle)
                    found.append(
                        ResolvedEntity(
                            entity_type, known, text[index:end], index, end, 1.0, self._window(text, index, end)
                        )
                    )
                    index = lowered.find(needle, index + 1)
                continue

            if entity_type not in FUZZY_TYPES or not words:
                continue
            match = self._best_window(text, words, known)
            if match is not None:
                start, end, similarity = match
                found.append(
                    ResolvedEntity(
                        entity_type,
                        known,
                        text[start:end],
                        start,
                        end,
                        similarity,
                        self._window(text, start, end),
                    )
                )
        return found

    @staticmethod
    def _best_window(text: str, words: list[re.Match[str]], known: str) -> tuple[int, int, float] | None:
        """Best run of up to five consecutive words resembling a known name."""
        spans: list[tuple[int, int]] = []
        for i in range(len(words)):
            for j in range(i, min(i + 5, len(words))):
                start, end = words[i].start(), words[j].end()
                # Ignore punctuation glued to the edges of the run
                while start < end and not text[start].isalnum():
                    start += 1
                while end > start and not text[end - 1].isalnum():
                    end -= 1
                if start < end:
                    spans.append((start, end))
        if not spans:
            return None

        choices = [text[start:end].lower() for start, end in spans]
        best = process.extractOne(
            known.lower(),
            choices,
            scorer=Levenshtein.normalized_similarity,
            score_cutoff=0.8,
        )
        if best is None:
            return None
        _, similarity, index = best
        if similarity <= 0.7:
            return None
        start, end = spans[index]
        return start, end, float(similarity)

    # ------------------------------------------------------------------
    # Context analysis
    # ------------------------------------------------------------------

    def _window(self, text: str, start: int, end: int) -> str:
        size = self.config.context_window
        return text[max(0, start - size) : min(len(text), end + size)]

    def _analyze_context(self, context: str, entity_type: EntityType) -> dict[str, bool]:
        lowered = context.lower()
        features = {
            "hasBusinessTerms": any(term in lowered for term in self.lexicon.context_business_terms),
        }
        for name, pattern in _COMMON_FEATURES.items():
            features[name] = bool(pattern.search(lowered))
        for name, (pattern, _) in _TYPE_FEATURES.get(entity_type, {}).items():
            features[name] = bool(pattern.search(lowered))
        return features

    @staticmethod
    def _context_confidence(features: dict[str, bool], entity_type: EntityType) -> float:
        confidence = 0.5
        if features.get("hasBusinessTerms"):
            confidence += 0.1
        for name, (_, bonus) in _TYPE_FEATURES.get(entity_type, {}).items():
            if features.get(name):
                confidence += bonus
        common = _COMMON_BONUS.get(entity_type)
        if common is not None and features.get(common[0]):
            confidence += common[1]
        return min(1.0, confidence)

    def _with_context(self, entity: ResolvedEntity, text: str) -> ResolvedEntity:
        context = self._window(text, entity.start, entity.end)
        features = self._analyze_context(context, entity.type)
        adjusted = (entity.confidence + self._context_confidence(features, entity.type)) / 2.0
        return replace(entity, confidence=adjusted, context=context, context_data=features)

    # ------------------------------------------------------------------
    # Final scoring
    # ------------------------------------------------------------------

    def _rescore(self, entity: ResolvedEntity, text: str) -> ResolvedEntity:
        score = (
            entity.confidence * 0.4
            + self._length_factor(entity.value) * 0.2
            + self._format_factor(entity.value, entity.type) * 0.2
            + self._context_factor(entity.context, entity.type) * 0.15
            + self._position_factor(entity.start, len(text)) * 0.05
        )
        return replace(entity, confidence=min(1.0, max(0.0, score)))

    @staticmethod
    def _length_factor(value: str) -> float:
        length = len(value)
        if 3 <= length <= 20:
            return 1.0
        if 2 <= length <= 30:
            return 0.9
        if 1 <= length <= 50:
            return 0.8
        return 0.6

    @classmethod
    def _format_factor(cls, value: str, entity_type: EntityType) -> float:
        if entity_type is EntityType.EMAIL:
            return 1.0 if _VALID_EMAIL.match(value) else 0.5
        if entity_type is EntityType.PHONE:
            digits = re.sub(r"\D", "", value)
            return 1.0 if 10 <= len(digits) <= 15 else 0.7
        if entity_type is EntityType.DATE:
            return 1.0 if cls._is_valid_date(value) else 0.6
        if entity_type is EntityType.AMOUNT:
            return 1.0 if cls._is_valid_amount(value) else 0.7
        if entity_type is EntityType.URL:
            return 1.0 if _VALID_URL.match(value) else 0.6
        if entity_type is EntityType.IP_ADDRESS:
            return 1.0 if cls._is_valid_ip(value) else 0.5
        return 0.8

    @staticmethod
    def _context_factor(context: str, entity_type: EntityType) -> float:
        if not context or not context.strip():
            return 0.5
        lowered = context.lower()
        if any(keyword in lowered for keyword in _CONTEXT_KEYWORDS.get(entity_type, ())):
            return 1.0
        return 0.7

    @staticmethod
    def _position_factor(position: int, length: int) -> float:
        if length == 0:
            return 0.5
        relative = position / length
        if relative <= 0.1 or 0.3 <= relative <= 0.7:
            return 1.0
        if relative <= 0.3 or relative >= 0.7:
            return 0.9
        return 0.8

    @staticmethod
    def _is_valid_date(value: str) -> bool:
        for fmt in DATE_FORMATS:
            try:
                datetime.strptime(value, fmt)
            except ValueError:
                continue
            return True
        return False

    @staticmethod
    def _is_valid_amount(value: str) -> bool:
        cleaned = re.sub(r"[^0-9.]", "", value)
        if not cleaned or cleaned.count(".") > 1 or cleaned == ".":
            return False
        amount = float(cleaned)
        return amount >= 0 and amount != float("inf")

    @staticmethod
    def _is_valid_ip(value: str) -> bool:
        parts = value.split(".")
        if len(parts) != 4:
            return False
        return all(part.isdigit() and 0 <= int(part) <= 255 for part in parts)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _at_word_boundary(text: str, start: int, end: int) -> bool:
        before = start == 0 or not text[start - 1].isalnum()
        after = end >= len(text) or not text[end].isalnum()
        return before and after

    @staticmethod
    def _clean_value(matched: str, entity_type: EntityType) -> str:
        prefix = _PREFIX_STRIP.get(entity_type)
        if prefix is not None:
            return prefix.sub("", matched).strip()
        if entity_type is EntityType.AMOUNT:
            return _NON_AMOUNT.sub("", matched)
        if entity_type is EntityType.PERCENTAGE:
            return _PERCENT_SUFFIX.sub("", matched).strip()
        return matched.strip()


__all__ = [
    "ENTITY_PATTERNS",
    "EntityResolutionResult",
    "EntityResolver",
    "EntityType",
    "FUZZY_TYPES",
    "ResolvedEntity",
    "SPECIFICITY",
]
