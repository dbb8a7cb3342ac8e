"""Tests for contractlens.core.rules and contractlens.core.masking.

Covers:
- match_case and phrase_pattern helpers
- RuleChain compilation from phrase and regex tables
- SpanMask detection, segmentation and protected rewriting
- literal_pattern for curated phrases
"""

from __future__ import annotations

import re

from contractlens.core.masking import URL_PATTERN, SpanMask, literal_pattern
from contractlens.core.rules import RuleChain, SubstitutionRule, match_case, phrase_pattern

# ============================================================================
# Helpers
# ============================================================================


class TestMatchCase:
    """Tests for match_case()."""

    def test_all_caps(self):
        """ALL CAPS source gives an upper-case replacement."""
        assert match_case("CUST", "customer") == "CUSTOMER"

    def test_capitalized(self):
        """Capitalized source capitalizes the replacement."""
        assert match_case("Cust", "customer") == "Customer"

    def test_lowercase(self):
        """Lowercase source leaves the replacement alone."""
        assert match_case("cust", "customer") == "customer"

    def test_empty_values(self):
        """Empty source or replacement is returned as-is."""
        assert match_case("", "customer") == "customer"
        assert match_case("Cust", "") == ""


class TestPhrasePattern:
    """Tests for phrase_pattern()."""

    def test_multiword_allows_any_whitespace(self):
        """Multi-word keys match runs of whitespace between words."""
        assert phrase_pattern("in order to").search("done in  order\tto ship")

    def test_whole_word_only(self):
        """Keys never match inside longer words."""
        assert phrase_pattern("cust").search("custom fields") is None

    def test_anchored_matches_whole_input(self):
        """Anchored keys match the full input with optional "the" and terminal mark."""
        pattern = phrase_pattern("show me contract", anchored=True)
        assert pattern.search("the show me contract.")
        assert pattern.search("please show me contract") is None


# ============================================================================
# RuleChain
# ============================================================================


class TestRuleChain:
    """Tests for RuleChain."""

    def test_from_table_preserves_case(self):
        """Table rules copy the case shape of the matched text."""
        chain = RuleChain.from_table("abbr", {"cust": "customer", "info": "information"})
        assert chain.apply("Cust info for CUST custom") == "Customer information for CUSTOMER custom"

    def test_from_table_without_case_matching(self):
        """match_case=False inserts the replacement verbatim."""
        chain = RuleChain.from_table("t", {"cust": "customer"}, match_case=False)
        assert chain.apply("CUST") == "customer"

    def test_blank_keys_skipped(self):
        """Blank table keys produce no rule."""
        chain = RuleChain.from_table("t", {" ": "x", "a": "b"})
        assert len(chain) == 1

    def test_rules_apply_in_order(self):
        """Later rules see the output of earlier ones."""
        chain = RuleChain.from_table("t", {"cust": "customer", "customer": "client"})
        assert chain.apply("cust") == "client"

    def test_from_patterns_uses_group_references(self):
        """Regex tables support templates with group references."""
        chain = RuleChain.from_patterns("punct", {r"\s+([.!?])": r"\1"}, flags=0)
        assert chain.apply("done .") == "done."

    def test_extended_returns_new_chain(self):
        """extended() appends rules without touching the original."""
        chain = RuleChain.from_table("t", {"a": "b"})
        rule = SubstitutionRule("t:x", re.compile("x"), "y")
        longer = chain.extended(rule)
        assert len(chain) == 1
        assert len(longer) == 2
        assert longer.apply("a x") == "b y"


# ============================================================================
# SpanMask
# ============================================================================


class TestSpanMask:
    """Tests for SpanMask."""

    TEXT = "email a@b.com or call 555-123-4567 about contract #42"

    def test_detects_default_kinds(self):
        """Emails, phones and contract references are protected by default."""
        mask = SpanMask.detect(self.TEXT)
        assert [span.kind for span in mask.spans] == ["email", "phone", "contract"]
        assert [span.text for span in mask.spans] == ["a@b.com", "555-123-4567", "contract #42"]

    def test_apply_skips_protected_spans(self):
        """apply() only rewrites unprotected text."""
        mask = SpanMask.detect(self.TEXT)
        assert mask.apply(str.upper) == "EMAIL a@b.com OR CALL 555-123-4567 ABOUT contract #42"

    def test_segments_rebuild_text(self):
        """Segments concatenate back to the original text."""
        mask = SpanMask.detect(self.TEXT)
        assert "".join(piece for piece, _ in mask.segments()) == self.TEXT

    def test_overlaps(self):
        """overlaps() reports intersections with protected spans."""
        mask = SpanMask.detect(self.TEXT)
        assert mask.overlaps(0, 5) is False
        assert mask.overlaps(6, 7) is True

    def test_empty_mask(self):
        """Text without protected substrings gives a falsy mask."""
        mask = SpanMask.detect("show contract")
        assert not mask
        assert len(mask) == 0
        assert mask.apply(str.upper) == "SHOW CONTRACT"

    def test_custom_patterns(self):
        """Only the given patterns are used when passed explicitly."""
        mask = SpanMask.detect("see www.example.com or a@b.com", {"url": URL_PATTERN})
        assert [span.kind for span in mask.spans] == ["url"]

    def test_repeated_literals_restored_by_position(self):
        """Identical protected substrings are restored in place."""
        text = "a@b.com then a@b.com"
        assert SpanMask.detect(text).apply(str.upper) == "a@b.com THEN a@b.com"


# ============================================================================
# literal_pattern
# ============================================================================


class TestLiteralPattern:
    """Tests for literal_pattern()."""

    def test_matches_whole_phrases_ignoring_case(self):
        """Literals match case-insensitively on word boundaries."""
        pattern = literal_pattern(["John Smith"])
        assert pattern.search("contracts for JOHN SMITH").group(0) == "JOHN SMITH"
        assert pattern.search("contracts for John Smithson") is None

    def test_longest_phrase_wins(self):
        """A longer literal is preferred over its prefix."""
        pattern = literal_pattern(["ACME", "ACME Corp"])
        assert pattern.search("renew acme corp today").group(0) == "acme corp"

    def test_regex_characters_escaped(self):
        """Literal text is never read as a regex."""
        pattern = literal_pattern(["CT-2024-001", "a.b"])
        assert pattern.search("CT-2024-001").group(0) == "CT-2024-001"
        assert pattern.search("axb") is None

    def test_empty_literals(self):
        """Nothing to match gives no pattern."""
        assert literal_pattern([]) is None
        assert literal_pattern(["", "   "]) is None

    def test_usable_as_mask_pattern(self):
        """The pattern plugs into SpanMask.detect."""
        mask = SpanMask.detect("show John Smith", {"known_entity": literal_pattern(["John Smith"])})
        assert mask.apply(str.upper) == "SHOW John Smith"
