"""Five-stage query pipeline.

Each query flows strictly forward through:
    TypoCorrector -> GrammarEnforcer -> QueryNormalizer -> EntityResolver -> IntentClassifier

The normalizer runs twice: its lowercased output is the canonical
``normalized`` text, and a case-preserving pass (``analyzed``) feeds entity
resolution and classification so proper names keep their capitals.

Nothing feeds back upstream. Per-query problems never raise: they come back
as a PipelineResult with a message, a low confidence and (for unexpected
failures) the error text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from ..config import ContractLensConfig
from .entities import EntityResolver, EntityType, ResolvedEntity
from .grammar import GrammarEnforcer
from .intent import IntentClassifier, ParsedQuery
from .intent.classifier import CONTEXT_BONUS, LOW_CONFIDENCE, TRUSTED_PREVIOUS
from .lexicon import Lexicon
from .normalizer import QueryNormalizer
from .typo import CorrectionRecord, TypoCorrector

logger = logging.getLogger(__name__)

# Resolved entity type -> ParsedQuery field it fills when the classifier left it empty
ENTITY_FIELDS: dict[EntityType, str] = {
    EntityType.CONTRACT_NUMBER: "contract_number",
    EntityType.ACCOUNT_NUMBER: "account_number",
    EntityType.PERSON_NAME: "user_name",
    EntityType.COMPANY_NAME: "customer_name",
    EntityType.STATUS: "status_type",
}


@dataclass
class PipelineResult:
    """Everything the pipeline learned about one query.

    Attributes:
        original: Query as received
        corrected: After typo correction
        grammar: After grammar enforcement
        normalized: After normalization
        analyzed: Normalized with case preserved (input to entities and intent)
        corrections: Typo corrections in token order
        transformations: Normalization stages that changed the text
        entities: Resolved entities, offsets relative to ``analyzed``
        parsed: Intent, action and extracted fields
        confidence: Mean of normalizer, entity and intent confidences
        message: Human-readable outcome
        error: Error text when processing failed unexpectedly
    """

    original: str
    corrected: str = ""
    grammar: str = ""
    normalized: str = ""
    analyzed: str = ""
    corrections: list[CorrectionRecord] = field(default_factory=list)
    transformations: list[str] = field(default_factory=list)
    entities: list[ResolvedEntity] = field(default_factory=list)
    parsed: ParsedQuery = field(default_factory=ParsedQuery.unknown)
    confidence: float = 0.0
    message: str = ""
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None and bool(self.normalized)

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "corrected": self.corrected,
            "grammar": self.grammar,
            "normalized": self.normalized,
            "analyzed": self.analyzed,
            "corrections": [c.to_dict() for c in self.corrections],
            "transformations": list(self.transformations),
            "entities": [e.to_dict() for e in self.entities],
            "parsed": self.parsed.to_dict(),
            "confidence": round(self.confidence, 4),
            "message": self.message,
            "error": self.error,
        }


class QueryPipeline:
    """Wires the five stages together.

    Attributes:
        config: Settings for every stage
        lexicon: Dictionary snapshot shared by all stages
    """

    def __init__(self, config: ContractLensConfig | None = None, lexicon: Lexicon | None = None) -> None:
        self.config = config or ContractLensConfig()
        if lexicon is None:
            if self.config.lexicon_path is not None:
                lexicon = Lexicon.from_yaml(self.config.lexicon_path)
            else:
                lexicon = Lexicon.default()
        self.lexicon = lexicon

        typo = self.config.typo
        self.typo = TypoCorrector(
            lexicon,
            max_edit_distance=typo.max_edit_distance,
            similarity_threshold=typo.similarity_threshold,
            max_suggestions=typo.max_suggestions,
        )
        self.grammar = GrammarEnforcer()
        self.normalizer = QueryNormalizer(lexicon, self.config.normalizer)
        # Names and identifiers keep their capitals for the resolver and classifier
        self.case_normalizer = QueryNormalizer(
            lexicon, self.config.normalizer.model_copy(update={"preserve_case": True})
        )
        self.resolver = EntityResolver(lexicon, self.config.entities)
        self.classifier = IntentClassifier.from_config(self.config.intent)

    def reload(self, lexicon: Lexicon) -> "QueryPipeline":
        """New pipeline with the same config over a different lexicon."""
        return QueryPipeline(self.config, lexicon)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process(self, query: str | None) -> PipelineResult:
        """Run one query through every stage.

        Args:
            query: Raw user text

        Returns:
            PipelineResult; never raises for per-query problems
        """
        if query is None or not query.strip():
            return PipelineResult(original=query or "", message="Empty query")

        try:
            return self._process(query)
        except Exception as e:
            logger.exception(f"Pipeline failed for query {query!r}")
            return PipelineResult(
                original=query,
                confidence=0.0,
                message=f"Error processing query: {e}",
                error=str(e),
            )

    def process_batch(self, queries: Iterable[str | None]) -> list[PipelineResult]:
        return [self.process(query) for query in queries]

    def process_with_context(self, query: str | None, previous_query: str | None) -> PipelineResult:
        """Process a follow-up query, borrowing fields from a confident previous query.

        Mirrors IntentClassifier.classify_with_context over the full pipeline:
        when this query's intent confidence is below 0.5 and the previous
        query's is above 0.7, missing contract number, part number and
        customer name are copied and intent confidence gains 0.2.
        """
        result = self.process(query)
        if result.error is not None or result.parsed.confidence >= LOW_CONFIDENCE:
            return result
        if previous_query is None or not previous_query.strip():
            return result

        previous = self.process(previous_query)
        if previous.parsed.confidence <= TRUSTED_PREVIOUS:
            return result

        current = result.parsed
        parsed = replace(
            current,
            contract_number=current.contract_number or previous.parsed.contract_number,
            part_number=current.part_number or previous.parsed.part_number,
            customer_name=current.customer_name or previous.parsed.customer_name,
            confidence=min(1.0, current.confidence + CONTEXT_BONUS),
            source=f"{current.source}+context",
        )
        # Swap the intent share of the overall mean for the boosted one
        confidence = min(1.0, result.confidence + (parsed.confidence - current.confidence) / 3.0)
        return replace(result, parsed=parsed, confidence=confidence)

    def stats(self) -> dict[str, Any]:
        return {
            "lexicon": self.lexicon.stats(),
            "typo": self.typo.stats(),
            "grammar": self.grammar.stats(),
            "normalizer": self.normalizer.stats(),
            "entities": self.resolver.stats(),
            "intent": self.classifier.stats(),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _process(self, query: str) -> PipelineResult:
        correction = self.typo.correct(query)
        grammar_text = self.grammar.enforce_grammar(correction.corrected)
        normalization = self.normalizer.normalize(grammar_text)

        result = PipelineResult(
            original=query,
            corrected=correction.corrected,
            grammar=grammar_text,
            normalized=normalization.normalized,
            corrections=list(correction.corrections),
            transformations=list(normalization.transformations),
        )

        if not normalization.succeeded:
            logger.warning(f"Normalization did not succeed: {normalization.message}")
            result.confidence = normalization.confidence
            result.message = normalization.message
            return result

        cased = self.case_normalizer.normalize(grammar_text)
        analyzed = cased.normalized if cased.succeeded else normalization.normalized

        resolution = self.resolver.resolve(analyzed)
        parsed = self._fill_from_entities(
            self.classifier.classify(analyzed),
            resolution.entities,
        )

        result.analyzed = analyzed
        result.entities = list(resolution.entities)
        result.parsed = parsed
        result.confidence = (normalization.confidence + resolution.confidence + parsed.confidence) / 3.0
        result.message = (
            f"Classified as {parsed.query_type.value} ({parsed.action_type.value}) "
            f"with {len(correction.corrections)} corrections; {resolution.summary}"
        )
        logger.debug(f"Processed {query!r}: {result.message}")
        return result

    @staticmethod
    def _fill_from_entities(parsed: ParsedQuery, entities: list[ResolvedEntity]) -> ParsedQuery:
        updates: dict[str, str] = {}
        for entity in entities:
            name = ENTITY_FIELDS.get(entity.type)
            if name is None or name in updates or getattr(parsed, name):
                continue
            updates[name] = entity.value.lower() if entity.type is EntityType.STATUS else entity.value
        return replace(parsed, **updates) if updates else parsed


__all__ = ["ENTITY_FIELDS", "PipelineResult", "QueryPipeline"]
