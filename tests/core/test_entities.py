"""Tests for contractlens.core.entities module.

Covers:
- Pattern, dictionary and known-entity extraction
- Overlap merging with confidence and specificity tie-breaks
- Offsets, thresholds and summaries
"""

from __future__ import annotations

import pytest

from contractlens.config import EntityConfig
from contractlens.core.entities import (
    EntityResolver,
    EntityType,
    ResolvedEntity,
)
from contractlens.core.lexicon import Lexicon


@pytest.fixture
def resolver() -> EntityResolver:
    return EntityResolver()


def _entity(entity_type: EntityType, start: int, end: int, confidence: float) -> ResolvedEntity:
    return ResolvedEntity(entity_type, "x", "x", start, end, confidence)


# ============================================================================
# Extraction
# ============================================================================


class TestExtraction:
    """Tests for EntityResolver.resolve()."""

    def test_email_and_phone(self, resolver: EntityResolver) -> None:
        """Contact details are found and the phone digits are not read as amounts."""
        text = "contact john.doe@company.com or call (555) 123-4567"
        result = resolver.resolve(text)
        assert [e.type for e in result.entities] == [EntityType.EMAIL, EntityType.PHONE]
        assert result.entities[0].value == "john.doe@company.com"
        assert result.entities[1].value == "(555) 123-4567"
        assert result.summary == "Found 2 entities: 1 email, 1 phone"

    def test_contract_number_and_status(self, resolver: EntityResolver) -> None:
        """Prefixed identifiers drop their prefix; status words come from the dictionary."""
        result = resolver.resolve("show failed parts for contract 987654")
        contract = result.first(EntityType.CONTRACT_NUMBER)
        status = result.first(EntityType.STATUS)
        assert contract is not None and contract.value == "987654"
        assert contract.original_text == "contract 987654"
        assert status is not None and status.value == "failed"

    def test_amount_and_date(self, resolver: EntityResolver) -> None:
        """Amounts keep digits and separators; ISO dates are recognized."""
        result = resolver.resolve("$1,250.00 due on 2024-03-15")
        assert [e.type for e in result.entities] == [EntityType.AMOUNT, EntityType.DATE]
        assert result.entities[0].value == "1,250.00"
        assert result.entities[1].value == "2024-03-15"

    def test_known_entity_exact(self, resolver: EntityResolver) -> None:
        """Curated identifiers match exactly and beat overlapping pattern hits."""
        result = resolver.resolve("renew CT-2024-001 today")
        assert len(result.entities) == 1
        entity = result.entities[0]
        assert entity.type is EntityType.CONTRACT_NUMBER
        assert entity.value == "CT-2024-001"

    def test_known_entity_exact_ignores_case(self, resolver: EntityResolver) -> None:
        """Exact curated hits ignore case and report the curated spelling."""
        result = resolver.resolve("renew ct-2024-001 today")
        assert len(result.entities) == 1
        entity = result.entities[0]
        assert entity.type is EntityType.CONTRACT_NUMBER
        assert entity.value == "CT-2024-001"
        assert entity.original_text == "ct-2024-001"
        assert entity.confidence == 1.0

    def test_known_name_fuzzy(self, resolver: EntityResolver) -> None:
        """Curated names match regardless of case."""
        result = resolver.resolve("Call Acme Corp about the contract")
        company = result.first(EntityType.COMPANY_NAME)
        assert company is not None
        assert company.value == "ACME Corp"
        assert company.original_text == "Acme Corp"

    def test_known_entity_beats_status_word(self) -> None:
        """A curated company name wins over a status word inside it."""
        lexicon = Lexicon.default().with_known_entity("Open Systems", "COMPANY_NAME")
        result = EntityResolver(lexicon).resolve("The Open Systems account")
        assert [e.type for e in result.entities] == [EntityType.COMPANY_NAME]
        assert result.entities[0].value == "Open Systems"

    def test_fuzzy_matching_disabled(self) -> None:
        """Known entities are skipped when fuzzy matching is off."""
        resolver = EntityResolver(config=EntityConfig(enable_fuzzy_matching=False))
        result = resolver.resolve("Call Acme Corp about the contract")
        assert all(e.value != "ACME Corp" for e in result.entities)

    def test_offsets_match_text(self, resolver: EntityResolver) -> None:
        """Every entity's offsets slice out its original text."""
        text = "contact john.doe@company.com or call (555) 123-4567 about contract 987654"
        for entity in resolver.resolve(text).entities:
            assert text[entity.start : entity.end] == entity.original_text

    def test_non_breaking_spaces_keep_offsets(self, resolver: EntityResolver) -> None:
        """Space variants are scanned as spaces without shifting offsets."""
        text = "contract\u00a0987654"
        result = resolver.resolve(text)
        contract = result.first(EntityType.CONTRACT_NUMBER)
        assert contract is not None
        assert contract.original_text == text
        assert contract.value == "987654"

    def test_entities_sorted_and_disjoint(self, resolver: EntityResolver) -> None:
        """Survivors are sorted by position and never overlap."""
        entities = resolver.resolve("contact john.doe@company.com or call (555) 123-4567").entities
        for first, second in zip(entities, entities[1:]):
            assert first.end <= second.start


# ============================================================================
# Result shapes
# ============================================================================


class TestResults:
    """Tests for sentinel results and helpers."""

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_input(self, resolver: EntityResolver, text) -> None:
        """Blank input has no entities and full confidence."""
        result = resolver.resolve(text)
        assert result.entities == []
        assert result.confidence == 1.0
        assert result.summary == "Empty input"

    def test_no_entities(self, resolver: EntityResolver) -> None:
        """Text without entities reports so."""
        result = resolver.resolve("hello there")
        assert result.entities == []
        assert result.confidence == 1.0
        assert result.summary == "No entities found"

    def test_threshold_filters(self) -> None:
        """Entities below the confidence threshold are dropped."""
        resolver = EntityResolver(config=EntityConfig(confidence_threshold=0.99))
        result = resolver.resolve("contact john.doe@company.com")
        assert result.entities == []

    def test_confidence_is_mean(self, resolver: EntityResolver) -> None:
        """Result confidence is the mean entity confidence."""
        result = resolver.resolve("contact john.doe@company.com or call (555) 123-4567")
        mean = sum(e.confidence for e in result.entities) / len(result.entities)
        assert result.confidence == pytest.approx(mean)

    def test_helpers(self, resolver: EntityResolver) -> None:
        """Grouping, type filters and serialization work together."""
        text = "contact john.doe@company.com or call (555) 123-4567"
        result = resolver.resolve(text)
        assert set(result.by_type()) == {EntityType.EMAIL, EntityType.PHONE}
        assert [e.type for e in resolver.entities_of_type(text, EntityType.PHONE)] == [EntityType.PHONE]
        assert resolver.high_confidence_entities(text, threshold=0.0) == result.entities
        data = result.to_dict()
        assert data["entities"][0]["type"] == "EMAIL"

    def test_stats(self, resolver: EntityResolver) -> None:
        """Stats include dictionary sizes and the config."""
        stats = resolver.stats()
        assert stats["known_entities"] == len(Lexicon.default().known_entities)
        assert stats["config"]["confidence_threshold"] == 0.75


# ============================================================================
# Merging
# ============================================================================


class TestMergeOverlapping:
    """Tests for EntityResolver.merge_overlapping()."""

    def test_higher_confidence_wins(self, resolver: EntityResolver) -> None:
        """Of two overlapping entities the more confident one survives."""
        low = _entity(EntityType.AMOUNT, 0, 3, 0.6)
        high = _entity(EntityType.PHONE, 0, 10, 0.9)
        assert resolver.merge_overlapping([low, high]) == [high]

    def test_equal_confidence_prefers_specific_type(self, resolver: EntityResolver) -> None:
        """Ties go to the more specific entity type."""
        status = _entity(EntityType.STATUS, 0, 6, 0.8)
        contract = _entity(EntityType.CONTRACT_NUMBER, 2, 8, 0.8)
        assert resolver.merge_overlapping([status, contract]) == [contract]

    def test_equal_confidence_and_specificity_keeps_first(self, resolver: EntityResolver) -> None:
        """Full ties keep the earlier entity."""
        first = _entity(EntityType.STATUS, 0, 6, 0.8)
        second = _entity(EntityType.PRIORITY, 3, 9, 0.8)
        assert resolver.merge_overlapping([first, second]) == [first]

    def test_disjoint_entities_kept(self, resolver: EntityResolver) -> None:
        """Non-overlapping entities all survive, in start order."""
        a = _entity(EntityType.EMAIL, 10, 20, 0.9)
        b = _entity(EntityType.PHONE, 0, 5, 0.9)
        assert resolver.merge_overlapping([a, b]) == [b, a]

    def test_empty(self, resolver: EntityResolver) -> None:
        """No candidates, no survivors."""
        assert resolver.merge_overlapping([]) == []


class TestEntityType:
    """Tests for EntityType."""

    def test_label(self):
        """Labels are lowercase with spaces."""
        assert EntityType.CONTRACT_NUMBER.label == "contract number"
