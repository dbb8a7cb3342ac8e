"""Hybrid keyword / context-pattern intent classifier.

Classification runs in three steps:
1. Context patterns: the first whole-phrase regex that matches fixes the intent
2. Keyword scoring: each intent counts the tokens in its keyword set; the
   highest count wins and ties go to the intent registered first
3. UNKNOWN with confidence 0.0 when no keyword matched

The action type is then read off the decision table in ``patterns``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Any

from ...config import IntentConfig
from .patterns import (
    ACCOUNT_PATTERN,
    ACTION_RULES,
    CONTEXT_PATTERNS,
    CONTRACT_NUMBER_PATTERN,
    CUSTOMER_KEYWORDS,
    INTENT_KEYWORDS,
    PART_NUMBER_PATTERN,
    STATUS_TYPES,
    USER_KEYWORDS,
    ActionRule,
    ContextPattern,
    derive_action,
    is_part_number,
)
from .tagging import HeuristicPosTagger, LexiconPosTagger, PosTagger, RegexTokenizer, Tokenizer
from .taxonomy import ParsedQuery, QueryType

logger = logging.getLogger(__name__)

CONTEXT_PATTERN_CONFIDENCE = 0.8
CONTRACT_NUMBER_CONFIDENCE = 0.7
PART_NUMBER_CONFIDENCE = 0.6

# classify_with_context thresholds
LOW_CONFIDENCE = 0.5
TRUSTED_PREVIOUS = 0.7
CONTEXT_BONUS = 0.2


class IntentClassifier:
    """Classifies a normalized query into a ParsedQuery.

    Instances are immutable in practice: ``with_intent_keywords`` and
    ``with_context_pattern`` return new classifiers.

    Attributes:
        tokenizer: Splits queries into word tokens
        tagger: Tags tokens (CD and NNP* are used)
        keywords: Intent -> keyword set, in registration order
        context_patterns: Whole-phrase patterns, tried in order
        action_rules: Action decision table
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        tagger: PosTagger | None = None,
        keywords: dict[QueryType, frozenset[str]] | None = None,
        context_patterns: tuple[ContextPattern, ...] | None = None,
        action_rules: tuple[ActionRule, ...] | None = None,
    ) -> None:
        self.tokenizer = tokenizer or RegexTokenizer()
        self.tagger = tagger or HeuristicPosTagger()
        self.keywords = dict(keywords) if keywords is not None else dict(INTENT_KEYWORDS)
        self.context_patterns = context_patterns if context_patterns is not None else CONTEXT_PATTERNS
        self.action_rules = action_rules if action_rules is not None else ACTION_RULES

    @classmethod
    def from_config(cls, config: IntentConfig | None = None) -> "IntentClassifier":
        """Build a classifier, loading the POS model named in config.

        Raises:
            ModelLoadError: If a configured model file cannot be loaded
        """
        config = config or IntentConfig()
        tagger: PosTagger | None = None
        if config.tagger_model_path:
            tagger = LexiconPosTagger.from_file(config.tagger_model_path)
        return cls(tagger=tagger)

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, query: str | None) -> ParsedQuery:
        """Classify a query.

        Args:
            query: Normalized query text

        Returns:
            ParsedQuery with intent, action, confidence and extracted fields
        """
        if query is None or not query.strip():
            return ParsedQuery.unknown()

        text = query.strip()
        lowered = text.lower()
        tokens = self.tokenizer.tokenize(text)
        if not tokens:
            return ParsedQuery.unknown()

        words = [token.lower() for token in tokens]
        tags = self.tagger.tag(tokens)
        entities = self._extract_entities(text, tokens, tags)

        intent, source = self._classify_intent(lowered, words)
        confidence = self._confidence(intent, lowered, words, entities)

        fields = {
            "contract_number": self._first(entities, "contract_numbers"),
            "part_number": self._first(entities, "part_numbers"),
            "account_number": self._account_number(text),
            "status_type": next((word for word in words if word in STATUS_TYPES), None),
            "user_name": None,
            "customer_name": None,
        }
        proper_noun = self._first(entities, "proper_nouns")
        if proper_noun is not None:
            if any(word in USER_KEYWORDS for word in words):
                fields["user_name"] = proper_noun
            elif any(word in CUSTOMER_KEYWORDS for word in words):
                fields["customer_name"] = proper_noun

        action = derive_action(intent, words, fields, self.action_rules)
        keyword_set = self.keywords.get(intent, frozenset())

        logger.debug(f"Classified {text!r} as {intent.value}/{action.value} ({confidence:.2f}, {source})")
        return ParsedQuery(
            query_type=intent,
            action_type=action,
            confidence=confidence,
            entities=entities,
            matched_keywords=[word for word in words if word in keyword_set],
            source=source,
            **fields,
        )

    def classify_with_context(self, query: str | None, previous_query: str | None) -> ParsedQuery:
        """Classify a follow-up query, borrowing fields from a confident previous query.

        Only when the current confidence is below 0.5 and the previous query
        classifies above 0.7: missing contract number, part number and
        customer name are copied over and confidence gains a flat 0.2.
        """
        result = self.classify(query)
        if result.confidence >= LOW_CONFIDENCE or previous_query is None or not previous_query.strip():
            return result

        previous = self.classify(previous_query)
        if previous.confidence <= TRUSTED_PREVIOUS:
            return result

        return replace(
            result,
            contract_number=result.contract_number or previous.contract_number,
            part_number=result.part_number or previous.part_number,
            customer_name=result.customer_name or previous.customer_name,
            confidence=min(1.0, result.confidence + CONTEXT_BONUS),
            source=f"{result.source}+context",
        )

    def detailed_classification(self, query: str | None) -> dict[QueryType, float]:
        """Confidence each registered intent would get for query."""
        if query is None or not query.strip():
            return {}

        text = query.strip()
        tokens = self.tokenizer.tokenize(text)
        words = [token.lower() for token in tokens]
        entities = self._extract_entities(text, tokens, self.tagger.tag(tokens))
        return {intent: self._confidence(intent, text.lower(), words, entities) for intent in self.keywords}

    @staticmethod
    def is_valid_query(query: str | None) -> bool:
        """At least 3 non-blank characters including a letter."""
        if query is None or len(query.strip()) < 3:
            return False
        return re.search(r"[A-Za-z]", query) is not None

    def supported_intents(self) -> list[QueryType]:
        return list(self.keywords)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def with_intent_keywords(self, intent: QueryType, keywords: set[str] | list[str] | tuple[str, ...]) -> "IntentClassifier":
        """New classifier whose keyword set for intent is replaced."""
        cleaned = frozenset(word.strip().lower() for word in keywords if word and word.strip())
        updated = dict(self.keywords)
        updated[intent] = cleaned
        return IntentClassifier(self.tokenizer, self.tagger, updated, self.context_patterns, self.action_rules)

    def with_context_pattern(
        self, name: str, intent: QueryType, regex: str | re.Pattern[str]
    ) -> "IntentClassifier":
        """New classifier with a context pattern added (or replaced, by name)."""
        pattern = ContextPattern.compile(name, intent, regex)
        patterns = list(self.context_patterns)
        for index, existing in enumerate(patterns):
            if existing.name == name:
                patterns[index] = pattern
                break
        else:
            patterns.append(pattern)
        return IntentClassifier(self.tokenizer, self.tagger, self.keywords, tuple(patterns), self.action_rules)

    def stats(self) -> dict[str, Any]:
        return {
            "intents": len(self.keywords),
            "keywords": sum(len(words) for words in self.keywords.values()),
            "context_patterns": len(self.context_patterns),
            "action_rules": len(self.action_rules),
            "tokenizer": type(self.tokenizer).__name__,
            "tagger": type(self.tagger).__name__,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _classify_intent(self, lowered: str, words: list[str]) -> tuple[QueryType, str]:
        for context in self.context_patterns:
            if context.matches(lowered):
                return context.intent, f"context_pattern:{context.name}"

        best_intent = QueryType.UNKNOWN
        best_score = 0
        for intent, keyword_set in self.keywords.items():
            score = sum(1 for word in words if word in keyword_set)
            # Strictly greater keeps the first-registered intent on ties
            if score > best_score:
                best_intent, best_score = intent, score

        if best_score == 0:
            return QueryType.UNKNOWN, "none"
        return best_intent, "keywords"

    def _confidence(
        self, intent: QueryType, lowered: str, words: list[str], entities: dict[str, list[str]]
    ) -> float:
        if intent is QueryType.UNKNOWN or not words:
            return 0.0

        keyword_set = self.keywords.get(intent, frozenset())
        confidence = sum(1 for word in words if word in keyword_set) / len(words)

        if any(context.intent is intent and context.matches(lowered) for context in self.context_patterns):
            confidence = max(confidence, CONTEXT_PATTERN_CONFIDENCE)
        if entities.get("contract_numbers"):
            confidence = max(confidence, CONTRACT_NUMBER_CONFIDENCE)
        if entities.get("part_numbers"):
            confidence = max(confidence, PART_NUMBER_CONFIDENCE)

        return min(1.0, max(0.0, confidence))

    @staticmethod
    def _extract_entities(text: str, tokens: list[str], tags: list[str]) -> dict[str, list[str]]:
        entities: dict[str, list[str]] = {}

        contract_numbers = CONTRACT_NUMBER_PATTERN.findall(text)
        if contract_numbers:
            entities["contract_numbers"] = contract_numbers

        part_numbers = [
            match.group(0).upper() for match in PART_NUMBER_PATTERN.finditer(text) if is_part_number(match.group(0))
        ]
        if part_numbers:
            entities["part_numbers"] = part_numbers

        # Adjacent proper nouns form one name ("John Smith")
        proper_nouns: list[str] = []
        run: list[str] = []
        for token, tag in zip(tokens, tags):
            if tag.startswith("NNP"):
                run.append(token)
            elif run:
                proper_nouns.append(" ".join(run))
                run = []
        if run:
            proper_nouns.append(" ".join(run))
        if proper_nouns:
            entities["proper_nouns"] = proper_nouns

        numbers = [token for token, tag in zip(tokens, tags) if tag == "CD"]
        if numbers:
            entities["numbers"] = numbers

        return entities

    @staticmethod
    def _account_number(text: str) -> str | None:
        match = ACCOUNT_PATTERN.search(text)
        return match.group(1) if match else None

    @staticmethod
    def _first(entities: dict[str, list[str]], key: str) -> str | None:
        values = entities.get(key)
        return values[0] if values else None


__all__ = ["IntentClassifier"]
