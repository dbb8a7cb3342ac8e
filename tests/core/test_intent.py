"""Tests for contractlens intent classification.

Tests cover:
- Context patterns and keyword scoring (all intent types)
- Action derivation
- Field extraction (contract, part, account, status, names)
- Follow-up queries with context
- Tokenizer and POS tagger seams
- Builders and edge cases
"""

from __future__ import annotations

from pathlib import Path

import pytest

from contractlens.config import IntentConfig
from contractlens.core.errors import ModelLoadError
from contractlens.core.intent import (
    CONTEXT_PATTERNS,
    ActionType,
    HeuristicPosTagger,
    IntentClassifier,
    LexiconPosTagger,
    ParsedQuery,
    QueryType,
    RegexTokenizer,
    derive_action,
)
from contractlens.core.intent.patterns import is_part_number


@pytest.fixture
def classifier() -> IntentClassifier:
    return IntentClassifier()


# ============================================================================
# Intent Tests
# ============================================================================


class TestClassify:
    """Tests for IntentClassifier.classify()."""

    def test_failed_parts(self, classifier: IntentClassifier) -> None:
        """Failed parts of a contract use the context pattern."""
        parsed = classifier.classify("show failed parts for contract 987654.")
        assert parsed.query_type == QueryType.FAILED_PARTS
        assert parsed.action_type == ActionType.CHECK_ISSUES
        assert parsed.confidence == pytest.approx(0.8)
        assert parsed.contract_number == "987654"
        assert parsed.source == "context_pattern:failed_parts_context"

    def test_status_check(self, classifier: IntentClassifier) -> None:
        """"status of contract N" is a status check."""
        parsed = classifier.classify("what is the status of contract 123456")
        assert parsed.query_type == QueryType.STATUS_CHECK
        assert parsed.action_type == ActionType.CHECK_STATUS

    def test_contract_info(self, classifier: IntentClassifier) -> None:
        """Showing a contract by number is contract info."""
        parsed = classifier.classify("show contract 123456")
        assert parsed.query_type == QueryType.CONTRACT_INFO
        assert parsed.action_type == ActionType.SHOW
        assert parsed.contract_number == "123456"

    def test_contract_details_by_keywords(self, classifier: IntentClassifier) -> None:
        """Keyword scoring with a contract number floors confidence at 0.7."""
        parsed = classifier.classify("contract details 123456")
        assert parsed.query_type == QueryType.CONTRACT_INFO
        assert parsed.action_type == ActionType.DETAILS
        assert parsed.confidence == pytest.approx(0.7)
        assert parsed.source == "keywords"
        assert parsed.matched_keywords == ["contract", "details"]

    def test_part_specifications(self, classifier: IntentClassifier) -> None:
        """Part numbers are uppercased and specification requests detected."""
        parsed = classifier.classify("specifications for part ab-1234")
        assert parsed.query_type == QueryType.PARTS_INFO
        assert parsed.action_type == ActionType.GET_SPECIFICATIONS
        assert parsed.part_number == "AB-1234"

    def test_list_parts(self, classifier: IntentClassifier) -> None:
        """Listing the parts of a contract."""
        parsed = classifier.classify("list all parts for contract 555555")
        assert parsed.query_type == QueryType.LIST_PARTS
        assert parsed.action_type == ActionType.LIST_PARTS
        assert parsed.confidence == pytest.approx(0.7)

    def test_help_create(self, classifier: IntentClassifier) -> None:
        """Creation requests map to CREATE."""
        parsed = classifier.classify("how to create a new contract")
        assert parsed.query_type == QueryType.HELP_CREATE_CONTRACT
        assert parsed.action_type == ActionType.CREATE

    def test_user_contracts(self, classifier: IntentClassifier) -> None:
        """A proper noun next to a user keyword becomes the user name."""
        parsed = classifier.classify("contracts for user Smith")
        assert parsed.query_type == QueryType.USER_CONTRACT_QUERY
        assert parsed.action_type == ActionType.LIST
        assert parsed.user_name == "Smith"
        assert parsed.customer_name is None

    def test_user_full_name(self, classifier: IntentClassifier) -> None:
        """Adjacent capitalized words form one name."""
        parsed = classifier.classify("Show contracts for user John Smith.")
        assert parsed.query_type == QueryType.USER_CONTRACT_QUERY
        assert parsed.user_name == "John Smith"
        assert parsed.entities["proper_nouns"] == ["John Smith"]

    def test_customer_info(self, classifier: IntentClassifier) -> None:
        """A proper noun next to a customer keyword becomes the customer name."""
        parsed = classifier.classify("customer information for Acme")
        assert parsed.query_type == QueryType.CUSTOMER_INFO
        assert parsed.action_type == ActionType.INFO
        assert parsed.customer_name == "Acme"

    def test_keyword_tie_goes_to_first_intent(self, classifier: IntentClassifier) -> None:
        """Equal keyword counts resolve to the first registered intent."""
        parsed = classifier.classify("is contract 123456 active")
        assert parsed.query_type == QueryType.CONTRACT_INFO
        assert parsed.status_type == "active"

    def test_account_number(self, classifier: IntentClassifier) -> None:
        """Identifiers after "account" are extracted."""
        parsed = classifier.classify("balance for account number 12345")
        assert parsed.account_number == "12345"

    def test_unknown(self, classifier: IntentClassifier) -> None:
        """No keyword hits gives UNKNOWN with zero confidence."""
        parsed = classifier.classify("hello there")
        assert parsed.query_type == QueryType.UNKNOWN
        assert parsed.action_type == ActionType.UNKNOWN
        assert parsed.confidence == 0.0
        assert parsed.source == "none"

    @pytest.mark.parametrize("query", [None, "", "   ", "?!"])
    def test_blank_input(self, classifier: IntentClassifier, query) -> None:
        """Blank or token-free input returns the unknown sentinel."""
        assert classifier.classify(query) == ParsedQuery.unknown()

    def test_to_dict(self, classifier: IntentClassifier) -> None:
        """ParsedQuery serializes enum values."""
        data = classifier.classify("show contract 123456").to_dict()
        assert data["query_type"] == "CONTRACT_INFO"
        assert data["action_type"] == "SHOW"
        assert data["entities"]["contract_numbers"] == ["123456"]

    def test_classification_view(self, classifier: IntentClassifier) -> None:
        """The classification property pairs intent and confidence."""
        classification = classifier.classify("show contract 123456").classification
        assert classification.intent == QueryType.CONTRACT_INFO
        assert classification.confidence == pytest.approx(0.8)


# ============================================================================
# Context Tests
# ============================================================================


class TestClassifyWithContext:
    """Tests for follow-up classification."""

    PREVIOUS = "show failed parts for contract 987654"

    def test_borrows_fields_from_previous(self, classifier: IntentClassifier) -> None:
        """A vague follow-up inherits the contract number and gains 0.2."""
        parsed = classifier.classify_with_context("what about its parts", self.PREVIOUS)
        assert parsed.query_type == QueryType.PARTS_INFO
        assert parsed.contract_number == "987654"
        assert parsed.confidence == pytest.approx(0.45)
        assert parsed.source == "keywords+context"

    def test_confident_query_unchanged(self, classifier: IntentClassifier) -> None:
        """Confident queries ignore the previous query."""
        parsed = classifier.classify_with_context("show contract 123456", self.PREVIOUS)
        assert parsed == classifier.classify("show contract 123456")

    def test_vague_previous_ignored(self, classifier: IntentClassifier) -> None:
        """A previous query that was itself vague adds nothing."""
        parsed = classifier.classify_with_context("what about its parts", "hello there")
        assert parsed.contract_number is None
        assert parsed.confidence == pytest.approx(0.25)

    def test_missing_previous(self, classifier: IntentClassifier) -> None:
        """No previous query means plain classification."""
        assert classifier.classify_with_context("what about its parts", None) == classifier.classify(
            "what about its parts"
        )


# ============================================================================
# Actions and helpers
# ============================================================================


class TestActions:
    """Tests for the action decision table."""

    def test_specific_word_beats_intent(self):
        """Literal request words are checked first."""
        assert derive_action(QueryType.PARTS_INFO, ["warranty", "for", "ab-1234"], {}) == ActionType.GET_WARRANTY

    def test_unknown_intent(self):
        """UNKNOWN intent always yields UNKNOWN action."""
        assert derive_action(QueryType.UNKNOWN, ["show"], {}) == ActionType.UNKNOWN

    def test_contract_default_requires_number(self):
        """Contract info defaults to DETAILS only with a contract number."""
        assert derive_action(QueryType.CONTRACT_INFO, ["contract"], {"contract_number": "123456"}) == ActionType.DETAILS
        assert derive_action(QueryType.CONTRACT_INFO, ["contract"], {}) == ActionType.INFO

    def test_is_part_number(self):
        """Part numbers need a digit and are not contract numbers or stop words."""
        assert is_part_number("AB-1234") is True
        assert is_part_number("123456") is False
        assert is_part_number("ABC") is False
        assert is_part_number("A1") is False


class TestClassifierApi:
    """Tests for builders, validation and stats."""

    def test_is_valid_query(self):
        """Valid queries have 3+ characters including a letter."""
        assert IntentClassifier.is_valid_query("abc") is True
        assert IntentClassifier.is_valid_query("ab") is False
        assert IntentClassifier.is_valid_query("123") is False
        assert IntentClassifier.is_valid_query(None) is False

    def test_detailed_classification(self, classifier: IntentClassifier) -> None:
        """Every registered intent gets a score."""
        scores = classifier.detailed_classification("show contract 123456")
        assert set(scores) == set(classifier.supported_intents())
        assert max(scores, key=scores.get) == QueryType.CONTRACT_INFO
        assert scores[QueryType.CONTRACT_INFO] == pytest.approx(0.8)
        assert classifier.detailed_classification("") == {}

    def test_with_intent_keywords(self, classifier: IntentClassifier) -> None:
        """Keyword sets can be replaced without touching the original."""
        custom = classifier.with_intent_keywords(QueryType.PARTS_INFO, ["Gearbox"])
        assert custom.classify("gearbox please").query_type == QueryType.PARTS_INFO
        assert classifier.classify("gearbox please").query_type == QueryType.UNKNOWN

    def test_with_context_pattern_appends(self, classifier: IntentClassifier) -> None:
        """New context patterns are tried after the built-in ones."""
        custom = classifier.with_context_pattern("warranty_context", QueryType.PARTS_INFO, r"\bwarranty\s+for\b")
        parsed = custom.classify("warranty for contract 123456")
        assert parsed.query_type == QueryType.PARTS_INFO
        assert parsed.action_type == ActionType.GET_WARRANTY
        assert parsed.source == "context_pattern:warranty_context"
        assert len(custom.context_patterns) == len(CONTEXT_PATTERNS) + 1

    def test_with_context_pattern_replaces_by_name(self, classifier: IntentClassifier) -> None:
        """A pattern with an existing name replaces it in place."""
        custom = classifier.with_context_pattern("contract_context", QueryType.CONTRACT_INFO, r"\bcontract\b")
        assert len(custom.context_patterns) == len(CONTEXT_PATTERNS)

    def test_stats(self, classifier: IntentClassifier) -> None:
        """Stats describe the registered tables and seams."""
        stats = classifier.stats()
        assert stats["intents"] == 8
        assert stats["context_patterns"] == len(CONTEXT_PATTERNS)
        assert stats["tokenizer"] == "RegexTokenizer"
        assert stats["tagger"] == "HeuristicPosTagger"


# ============================================================================
# Tokenizer and tagger Tests
# ============================================================================


class TestTagging:
    """Tests for tokenizers and POS taggers."""

    def test_regex_tokenizer(self):
        """Punctuation is dropped; inner hyphens, dots and @ are kept."""
        tokens = RegexTokenizer().tokenize("Email a.b@c.com about AB-12, please!")
        assert tokens == ["Email", "a.b@c.com", "about", "AB-12", "please"]

    def test_heuristic_tagger(self):
        """Numerals are CD; capitalized non-initial tokens are NNP."""
        tags = HeuristicPosTagger().tag(["Show", "contract", "123456", "for", "Smith"])
        assert tags == ["NN", "NN", "CD", "NN", "NNP"]

    def test_lexicon_tagger_from_file(self, tmp_path: Path):
        """Model files are tab-separated; unknown words use the fallback."""
        model = tmp_path / "pos.tsv"
        model.write_text("# word\ttag\nacme\tNNP\n\nshow\tVB\n")
        tagger = LexiconPosTagger.from_file(model)
        assert len(tagger) == 2
        assert tagger.tag(["Show", "ACME", "widget"]) == ["VB", "NNP", "NN"]

    def test_lexicon_tagger_missing_file(self, tmp_path: Path):
        """A missing model raises ModelLoadError."""
        with pytest.raises(ModelLoadError):
            LexiconPosTagger.from_file(tmp_path / "missing.tsv")

    def test_lexicon_tagger_malformed_line(self, tmp_path: Path):
        """Lines without exactly one tab raise ModelLoadError."""
        model = tmp_path / "pos.tsv"
        model.write_text("acme NNP\n")
        with pytest.raises(ModelLoadError, match="line 1"):
            LexiconPosTagger.from_file(model)

    def test_from_config_loads_model(self, tmp_path: Path):
        """from_config uses the configured tagger model."""
        model = tmp_path / "pos.tsv"
        model.write_text("acme\tNNP\n")
        classifier = IntentClassifier.from_config(IntentConfig(tagger_model_path=model))
        assert isinstance(classifier.tagger, LexiconPosTagger)
        parsed = classifier.classify("customer info for acme")
        assert parsed.customer_name == "acme"

    def test_from_config_missing_model(self, tmp_path: Path):
        """A configured but missing model fails at construction."""
        with pytest.raises(ModelLoadError):
            IntentClassifier.from_config(IntentConfig(tagger_model_path=tmp_path / "missing.tsv"))
