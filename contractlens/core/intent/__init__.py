"""Intent classification for contractlens.

This module maps a normalized query to a query type, an action type and the
identifiers downstream lookups need (contract number, part number, names).

Classification has two stages:
1. Context patterns - whole-phrase regexes that fix the intent (confidence >= 0.8)
2. Keyword scoring - per-intent keyword hit counts, first-registered wins ties

Example usage:
    ```python
    from contractlens.core.intent import IntentClassifier, QueryType

    classifier = IntentClassifier()
    parsed = classifier.classify("show failed parts for contract 987654")
    assert parsed.query_type == QueryType.FAILED_PARTS
    assert parsed.contract_number == "987654"
    ```
"""

from .classifier import IntentClassifier
from .patterns import (
    ACTION_RULES,
    CONTEXT_PATTERNS,
    INTENT_KEYWORDS,
    ActionRule,
    ContextPattern,
    derive_action,
)
from .tagging import (
    HeuristicPosTagger,
    LexiconPosTagger,
    PosTagger,
    RegexTokenizer,
    Tokenizer,
)
from .taxonomy import (
    ActionType,
    IntentClassification,
    ParsedQuery,
    QueryType,
)

__all__ = [
    # Classifier
    "IntentClassifier",
    # Patterns
    "ACTION_RULES",
    "CONTEXT_PATTERNS",
    "INTENT_KEYWORDS",
    "ActionRule",
    "ContextPattern",
    "derive_action",
    # Tagging
    "HeuristicPosTagger",
    "LexiconPosTagger",
    "PosTagger",
    "RegexTokenizer",
    "Tokenizer",
    # Taxonomy
    "ActionType",
    "IntentClassification",
    "ParsedQuery",
    "QueryType",
]
