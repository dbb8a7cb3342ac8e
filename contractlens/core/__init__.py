"""Core components for contractlens.

The query pipeline and its five stages, plus the dictionaries they share.
"""

from .entities import (
    EntityResolutionResult,
    EntityResolver,
    EntityType,
    ResolvedEntity,
)
from .errors import (
    ConfigurationError,
    ContractLensError,
    LexiconError,
    ModelLoadError,
)
from .grammar import (
    GrammarAnalysis,
    GrammarEnforcer,
    GrammarSuggestion,
)
from .intent import (
    ActionType,
    IntentClassification,
    IntentClassifier,
    ParsedQuery,
    QueryType,
)
from .lexicon import Lexicon
from .masking import Span, SpanMask
from .normalizer import (
    NormalizationResult,
    QueryNormalizer,
)
from .pipeline import (
    PipelineResult,
    QueryPipeline,
)
from .rules import RuleChain, SubstitutionRule
from .typo import (
    CorrectionRecord,
    CorrectionResult,
    CorrectionStrategy,
    TypoCorrector,
    TypoSuggestion,
)

__all__ = [
    # Errors
    "ContractLensError",
    "ConfigurationError",
    "LexiconError",
    "ModelLoadError",
    # Pipeline
    "PipelineResult",
    "QueryPipeline",
    # Dictionaries and rule engine
    "Lexicon",
    "RuleChain",
    "Span",
    "SpanMask",
    "SubstitutionRule",
    # Typo correction
    "CorrectionRecord",
    "CorrectionResult",
    "CorrectionStrategy",
    "TypoCorrector",
    "TypoSuggestion",
    # Grammar
    "GrammarAnalysis",
    "GrammarEnforcer",
    "GrammarSuggestion",
    # Normalization
    "NormalizationResult",
    "QueryNormalizer",
    # Entities
    "EntityResolutionResult",
    "EntityResolver",
    "EntityType",
    "ResolvedEntity",
    # Intent
    "ActionType",
    "IntentClassification",
    "IntentClassifier",
    "ParsedQuery",
    "QueryType",
]
