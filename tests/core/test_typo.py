"""Tests for contractlens.core.typo module.

Covers:
- Strategy chain (domain, typo table, abbreviation, contextual, edit distance,
  phonetic, keyboard)
- Protection of known entity names and capitalized names
- Case and punctuation preservation
- Protection of emails, phones and identifiers
- Suggestions, confidence and helper functions
"""

from __future__ import annotations

import pytest

from contractlens.core import vocab
from contractlens.core.lexicon import Lexicon
from contractlens.core.typo import (
    CorrectionStrategy,
    TypoCorrector,
    clean_word,
    soundex,
    tokenize,
)


@pytest.fixture
def corrector() -> TypoCorrector:
    return TypoCorrector()


# ============================================================================
# correct()
# ============================================================================


class TestCorrect:
    """Tests for TypoCorrector.correct()."""

    def test_domain_corrections(self, corrector: TypoCorrector) -> None:
        """Domain misspellings are fixed and recorded in order."""
        result = corrector.correct("show faild prts for contrct 987654")
        assert result.corrected == "show failed parts for contract 987654"
        assert [c.original for c in result.corrections] == ["faild", "prts", "contrct"]
        assert all(c.strategy is CorrectionStrategy.DOMAIN for c in result.corrections)
        assert result.has_corrections

    def test_valid_text_unchanged(self, corrector: TypoCorrector) -> None:
        """Text made of valid words passes through."""
        result = corrector.correct("show the contract details")
        assert result.corrected == "show the contract details"
        assert result.corrections == []

    def test_inflected_valid_word_unchanged(self, corrector: TypoCorrector) -> None:
        """Regular inflections of valid words are not corrected."""
        assert corrector.correct("customers").corrected == "customers"

    def test_typo_table(self, corrector: TypoCorrector) -> None:
        """Known typos use the typo table."""
        result = corrector.correct("teh contract")
        assert result.corrected == "the contract"
        assert result.corrections[0].strategy is CorrectionStrategy.TYPO

    def test_abbreviation(self, corrector: TypoCorrector) -> None:
        """Short forms are expanded."""
        result = corrector.correct("cust info")
        assert result.corrected == "customer information"
        assert {c.strategy for c in result.corrections} == {CorrectionStrategy.ABBREVIATION}

    def test_contextual_bigram(self, corrector: TypoCorrector) -> None:
        """Bigram keys use the previous word as context."""
        result = corrector.correct("contract numbr")
        assert result.corrected == "contract number"
        assert result.corrections[0].strategy is CorrectionStrategy.CONTEXTUAL

    def test_contextual_compound(self, corrector: TypoCorrector) -> None:
        """Compound tokens are split into words."""
        assert corrector.correct("check due_date").corrected == "check due date"

    def test_edit_distance(self, corrector: TypoCorrector) -> None:
        """Unknown misspellings fall back to frequency-weighted edit distance."""
        result = corrector.correct("custoner")
        assert result.corrected == "customer"
        assert result.corrections[0].strategy is CorrectionStrategy.EDIT_DISTANCE

    def test_phonetic(self, corrector: TypoCorrector) -> None:
        """Transposed letters that edit distance scores too low match by sound."""
        result = corrector.correct("paymnet")
        assert result.corrected == "payment"
        assert result.corrections[0].strategy is CorrectionStrategy.PHONETIC

    def test_phonetic_isolated(self) -> None:
        """Phonetic matching works against a one-word dictionary."""
        corrector = TypoCorrector(Lexicon(valid_words=frozenset({"payment"})))
        result = corrector.correct("paymnet")
        assert result.corrected == "payment"
        assert result.corrections[0].strategy is CorrectionStrategy.PHONETIC

    def test_keyboard(self) -> None:
        """A single slip onto a neighbouring key is corrected."""
        lexicon = Lexicon(valid_words=frozenset({"gasket"}), keyboard_adjacency=vocab.KEYBOARD_ADJACENCY)
        result = TypoCorrector(lexicon).correct("gaskrt")
        assert result.corrected == "gasket"
        assert result.corrections[0].strategy is CorrectionStrategy.KEYBOARD

    def test_keyboard_requires_adjacent_key(self) -> None:
        """Distant keys are not treated as slips."""
        lexicon = Lexicon(valid_words=frozenset({"gasket"}), keyboard_adjacency=vocab.KEYBOARD_ADJACENCY)
        assert TypoCorrector(lexicon).correct("gaskpt").corrected == "gaskpt"

    def test_known_entity_names_untouched(self, corrector: TypoCorrector) -> None:
        """Curated entity names are protected in any case."""
        for text in ("show contracts for user John Smith", "show contracts for user john smith"):
            result = corrector.correct(text)
            assert result.corrected == text
            assert result.corrections == []

    def test_capitalized_name_not_fuzzed(self, corrector: TypoCorrector) -> None:
        """Capitalized words inside a sentence skip the fuzzy strategies."""
        for text in ("show contracts for Jones", "failed parts for Boeing"):
            assert corrector.correct(text).corrected == text

    def test_capitalized_word_still_uses_tables(self, corrector: TypoCorrector) -> None:
        """Dictionary corrections still apply to capitalized words."""
        assert corrector.correct("show Contrct 987654").corrected == "show Contract 987654"

    def test_sentence_initial_word_fuzzed(self, corrector: TypoCorrector) -> None:
        """A capital at the start of a sentence does not block fuzzy matching."""
        result = corrector.correct("Custoner details")
        assert result.corrected == "Customer details"
        assert result.corrections[0].strategy is CorrectionStrategy.EDIT_DISTANCE

    def test_contract_reference_untouched(self, corrector: TypoCorrector) -> None:
        """'contract #NNNNNN' references come back verbatim."""
        text = "check contract #123456 status"
        result = corrector.correct(text)
        assert result.corrected == text
        assert "contract #123456" in result.corrected
        assert result.corrections == []

    def test_preserves_case_and_punctuation(self, corrector: TypoCorrector) -> None:
        """Corrections keep the original case shape and edge punctuation."""
        assert corrector.correct("Contrct, CONTRCT!").corrected == "Contract, CONTRACT!"

    def test_preserves_whitespace(self, corrector: TypoCorrector) -> None:
        """Original spacing between tokens survives."""
        assert corrector.correct("  faild   prts ").corrected == "  failed   parts "

    def test_email_and_phone_untouched(self, corrector: TypoCorrector) -> None:
        """Emails and phone numbers are never corrected."""
        text = "email teh@exmaple.com or call 555-123-4567"
        assert corrector.correct(text).corrected == text

    def test_identifiers_untouched(self, corrector: TypoCorrector) -> None:
        """Tokens with digits are treated as identifiers."""
        assert corrector.correct("prt AB12X").corrected == "part AB12X"

    def test_blank_input(self, corrector: TypoCorrector) -> None:
        """Blank input returns unchanged with no corrections."""
        result = corrector.correct("   ")
        assert result.corrected == "   "
        assert not result.has_corrections

    def test_correcting_twice_is_stable(self, corrector: TypoCorrector) -> None:
        """Correction output is itself valid."""
        once = corrector.correct("show faild prts for contrct 987654").corrected
        assert corrector.correct(once).corrected == once

    def test_custom_lexicon(self) -> None:
        """Corrections added to the lexicon are used."""
        lexicon = Lexicon.default().with_typo_correction("gearbx", "gearbox")
        corrector = TypoCorrector(lexicon)
        assert corrector.correct("gearbx").corrected == "gearbox"
        assert corrector.correct("gearbox").corrected == "gearbox"

    def test_to_dict(self, corrector: TypoCorrector) -> None:
        """Results serialize with strategy values."""
        data = corrector.correct("faild").to_dict()
        assert data["corrected"] == "failed"
        assert data["corrections"] == [{"original": "faild", "corrected": "failed", "strategy": "domain"}]


# ============================================================================
# Single-word API
# ============================================================================


class TestWordApi:
    """Tests for correct_word, suggestions and confidence."""

    def test_correct_word(self, corrector: TypoCorrector) -> None:
        """Single words are corrected with their case."""
        assert corrector.correct_word("Faild") == "Failed"
        assert corrector.correct_word("contract") == "contract"

    def test_correct_word_with_context(self, corrector: TypoCorrector) -> None:
        """Context pairs enable bigram corrections."""
        assert corrector.correct_word("numbr", ("contract", "")) == "number"

    def test_preserve_case_and_punctuation(self, corrector: TypoCorrector) -> None:
        """Edge punctuation is re-applied around the correction."""
        assert corrector.preserve_case_and_punctuation("(Contrct)", "contract") == "(Contract)"

    def test_suggestions_for_valid_word(self, corrector: TypoCorrector) -> None:
        """Valid words get no suggestions."""
        assert corrector.suggestions("contract") == []

    def test_suggestions_ranked(self, corrector: TypoCorrector) -> None:
        """Domain correction comes first and suggestions are unique."""
        suggestions = corrector.suggestions("contrct")
        assert suggestions[0].suggestion == "contract"
        assert suggestions[0].confidence == pytest.approx(0.95)
        assert suggestions[0].source == "domain"
        words = [s.suggestion for s in suggestions]
        assert len(words) == len(set(words))
        assert len(suggestions) <= corrector.max_suggestions

    def test_needs_correction(self, corrector: TypoCorrector) -> None:
        """Only unknown plain words need correction."""
        assert corrector.needs_correction("contrct") is True
        assert corrector.needs_correction("contract") is False
        assert corrector.needs_correction("john@example.com") is False
        assert corrector.needs_correction("555-123-4567") is False
        assert corrector.needs_correction("12345") is False
        assert corrector.needs_correction("") is False

    def test_correction_confidence(self, corrector: TypoCorrector) -> None:
        """Confidence depends on which table produced the correction."""
        assert corrector.correction_confidence("contract", "contract") == 1.0
        assert corrector.correction_confidence("contrct", "contract") == pytest.approx(0.95)
        assert corrector.correction_confidence("teh", "the") == pytest.approx(0.90)
        assert corrector.correction_confidence("cust", "customer") == pytest.approx(0.85)
        assert corrector.correction_confidence("xyz", "contract") == 0.0

    def test_stats(self, corrector: TypoCorrector) -> None:
        """Stats report table sizes and settings."""
        stats = corrector.stats()
        assert stats["valid_words"] > 0
        assert stats["max_edit_distance"] == 2


# ============================================================================
# Helpers
# ============================================================================


class TestHelpers:
    """Tests for module-level helpers."""

    def test_clean_word(self):
        """Edge punctuation is stripped and case folded."""
        assert clean_word("(Contract),") == "contract"
        assert clean_word("due_date") == "due_date"

    def test_tokenize_offsets(self):
        """Tokens carry offsets into the source text."""
        text = "show  Contrct!"
        tokens = tokenize(text)
        assert [t.clean for t in tokens] == ["show", "contrct"]
        assert all(text[t.start : t.end] == t.surface for t in tokens)

    def test_soundex(self):
        """Soundex codes group similar-sounding words."""
        assert soundex("Robert") == "R163"
        assert soundex("Rupert") == "R163"
        assert soundex("payment") == soundex("paymnet") == "P530"
        assert soundex("") == ""
        assert soundex("123") == ""
