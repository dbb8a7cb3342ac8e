"""Immutable dictionary snapshot shared by every pipeline stage.

A Lexicon is built once (from the defaults in ``vocab.py``, optionally
overlaid with a YAML file) and handed to each component at construction.
Builder methods return a new snapshot; nothing is ever mutated in place, so
a lexicon can be shared freely between threads.

Example:
    lexicon = Lexicon.default().with_typo_correction("gearbx", "gearbox")
    pipeline = QueryPipeline(lexicon=lexicon)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from . import vocab
from .errors import LexiconError

logger = logging.getLogger(__name__)

# YAML sections accepted by Lexicon.from_yaml
YAML_SECTIONS = (
    "valid_words",
    "remove_valid_words",
    "typo_corrections",
    "abbreviations",
    "synonyms",
    "business_terms",
    "misspellings",
    "known_entities",
    "remove_known_entities",
)


def _clean(value: Any) -> str:
    return str(value).strip().lower() if value is not None else ""


def _target_words(targets: Any) -> set[str]:
    """Split correction targets ("contract number") into single words."""
    words: set[str] = set()
    for target in targets:
        for word in target.lower().split():
            if word.isalpha():
                words.add(word)
    return words


@dataclass(frozen=True)
class Lexicon:
    """Read-only collection of every runtime-extendable table.

    Attributes:
        valid_words: Words the typo corrector never changes
        domain_corrections: Misspelled domain word -> canonical word
        typo_suggestions: Common typo -> ordered candidate corrections
        typo_abbreviations: Short form expanded by the typo corrector
        contextual_corrections: Compound/bigram key -> replacement
        word_frequency: Relative frequency used to rank candidates
        semantic_clusters: Groups of related words for context scoring
        keyboard_adjacency: QWERTY neighbour map
        contractions: Normalizer contraction table
        slang: Normalizer slang table
        abbreviations: Normalizer abbreviation table
        domain_terms: Normalizer domain acronym table
        business_terms: Normalizer business acronym table
        misspellings: Normalizer static spelling table
        synonyms: Normalizer synonym table
        emoji: Emoji -> word table
        stop_words: Words removed when stop-word removal is enabled
        business_stop_words: Stop words that are always kept
        profanity: Words masked by the profanity filter
        status_values: Dictionary entries for STATUS entities
        priority_values: Dictionary entries for PRIORITY entities
        departments: Dictionary entries for DEPARTMENT entities
        currencies: Dictionary entries for CURRENCY entities
        context_business_terms: Words that raise entity context confidence
        known_entities: Curated entity text -> EntityType name
    """

    valid_words: frozenset[str] = frozenset()
    domain_corrections: dict[str, str] = field(default_factory=dict)
    typo_suggestions: dict[str, tuple[str, ...]] = field(default_factory=dict)
    typo_abbreviations: dict[str, str] = field(default_factory=dict)
    contextual_corrections: dict[str, str] = field(default_factory=dict)
    word_frequency: dict[str, float] = field(default_factory=dict)
    semantic_clusters: tuple[frozenset[str], ...] = ()
    keyboard_adjacency: dict[str, str] = field(default_factory=dict)

    contractions: dict[str, str] = field(default_factory=dict)
    slang: dict[str, str] = field(default_factory=dict)
    abbreviations: dict[str, str] = field(default_factory=dict)
    domain_terms: dict[str, str] = field(default_factory=dict)
    business_terms: dict[str, str] = field(default_factory=dict)
    misspellings: dict[str, str] = field(default_factory=dict)
    synonyms: dict[str, str] = field(default_factory=dict)
    emoji: dict[str, str] = field(default_factory=dict)
    stop_words: frozenset[str] = frozenset()
    business_stop_words: frozenset[str] = frozenset()
    profanity: frozenset[str] = frozenset()

    status_values: tuple[str, ...] = ()
    priority_values: tuple[str, ...] = ()
    departments: tuple[str, ...] = ()
    currencies: tuple[str, ...] = ()
    context_business_terms: tuple[str, ...] = ()
    known_entities: dict[str, str] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "Lexicon":
        """Build the default snapshot from the bundled tables."""
        corrections = dict(vocab.DOMAIN_CORRECTIONS)
        suggestions = dict(vocab.TYPO_SUGGESTIONS)
        abbreviations = dict(vocab.TYPO_ABBREVIATIONS)

        # Every correction target is itself valid, so correcting twice is a no-op
        valid = set(vocab.VALID_WORDS)
        valid |= _target_words(corrections.values())
        valid |= _target_words(abbreviations.values())
        for candidates in suggestions.values():
            valid |= _target_words(candidates)

        # Slang, acronyms and profanity are rewritten by later stages; the
        # typo corrector must not fuzzy-match them into other words first
        later_stages = set(vocab.SLANG) | set(vocab.QUERY_ABBREVIATIONS) | set(vocab.DOMAIN_TERMS)
        later_stages |= set(vocab.BUSINESS_TERMS) | set(vocab.PROFANITY)
        later_stages -= set(corrections) | set(suggestions) | set(abbreviations)
        valid |= {word for word in later_stages if word.isalpha()}

        return cls(
            valid_words=frozenset(valid),
            domain_corrections=corrections,
            typo_suggestions=suggestions,
            typo_abbreviations=abbreviations,
            contextual_corrections=dict(vocab.CONTEXTUAL_CORRECTIONS),
            word_frequency=dict(vocab.WORD_FREQUENCY),
            semantic_clusters=tuple(vocab.SEMANTIC_CLUSTERS),
            keyboard_adjacency=dict(vocab.KEYBOARD_ADJACENCY),
            contractions=dict(vocab.CONTRACTIONS),
            slang=dict(vocab.SLANG),
            abbreviations=dict(vocab.QUERY_ABBREVIATIONS),
            domain_terms=dict(vocab.DOMAIN_TERMS),
            business_terms=dict(vocab.BUSINESS_TERMS),
            misspellings=dict(vocab.MISSPELLINGS),
            synonyms=dict(vocab.SYNONYMS),
            emoji=dict(vocab.EMOJI),
            stop_words=vocab.STOP_WORDS,
            business_stop_words=vocab.BUSINESS_STOP_WORDS,
            profanity=vocab.PROFANITY,
            status_values=vocab.STATUS_VALUES,
            priority_values=vocab.PRIORITY_VALUES,
            departments=vocab.DEPARTMENTS,
            currencies=vocab.CURRENCIES,
            context_business_terms=vocab.CONTEXT_BUSINESS_TERMS,
            known_entities=dict(vocab.KNOWN_ENTITIES),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def frequency(self, word: str) -> float:
        """Relative frequency of a word (default for unknown words)."""
        return self.word_frequency.get(word, vocab.DEFAULT_WORD_FREQUENCY)

    def related(self, first: str, second: str) -> bool:
        """Check whether two words share a semantic cluster."""
        return any(first in cluster and second in cluster for cluster in self.semantic_clusters)

    # ------------------------------------------------------------------
    # Builders (each returns a new snapshot)
    # ------------------------------------------------------------------

    def with_valid_words(self, *words: str) -> "Lexicon":
        cleaned = {_clean(w) for w in words} - {""}
        if not cleaned:
            return self
        return replace(self, valid_words=self.valid_words | cleaned)

    def without_valid_words(self, *words: str) -> "Lexicon":
        cleaned = {_clean(w) for w in words} - {""}
        if not cleaned:
            return self
        return replace(self, valid_words=self.valid_words - cleaned)

    def with_typo_correction(self, typo: str, correction: str) -> "Lexicon":
        """Add a domain correction; the correction becomes a valid word."""
        typo, correction = _clean(typo), _clean(correction)
        if not typo or not correction:
            return self
        corrections = {**self.domain_corrections, typo: correction}
        valid = self.valid_words | _target_words([correction])
        return replace(self, domain_corrections=corrections, valid_words=valid)

    def with_abbreviation(self, abbreviation: str, expansion: str) -> "Lexicon":
        """Add an abbreviation for both the typo corrector and the normalizer."""
        abbreviation, expansion = _clean(abbreviation), _clean(expansion)
        if not abbreviation or not expansion:
            return self
        return replace(
            self,
            typo_abbreviations={**self.typo_abbreviations, abbreviation: expansion},
            abbreviations={**self.abbreviations, abbreviation: expansion},
            valid_words=self.valid_words | _target_words([expansion]),
        )

    def with_synonym(self, word: str, canonical: str) -> "Lexicon":
        word, canonical = _clean(word), _clean(canonical)
        if not word or not canonical:
            return self
        return replace(self, synonyms={**self.synonyms, word: canonical})

    def with_business_term(self, term: str, expansion: str) -> "Lexicon":
        term, expansion = _clean(term), _clean(expansion)
        if not term or not expansion:
            return self
        return replace(self, business_terms={**self.business_terms, term: expansion})

    def with_misspelling(self, wrong: str, right: str) -> "Lexicon":
        wrong, right = _clean(wrong), _clean(right)
        if not wrong or not right:
            return self
        return replace(self, misspellings={**self.misspellings, wrong: right})

    def with_known_entity(self, text: str, entity_type: Any) -> "Lexicon":
        """Register a curated entity.

        Known entity text keeps its case since names and identifiers are
        matched as written.

        Raises:
            LexiconError: If entity_type is not an EntityType name
        """
        from .entities import EntityType

        text = str(text).strip() if text is not None else ""
        if not text:
            return self
        type_name = entity_type.name if isinstance(entity_type, EntityType) else str(entity_type).strip().upper()
        if type_name not in EntityType.__members__:
            raise LexiconError(f"Unknown entity type for '{text}': {entity_type}")
        return replace(self, known_entities={**self.known_entities, text: type_name})

    def without_known_entity(self, text: str) -> "Lexicon":
        text = str(text).strip() if text is not None else ""
        if text not in self.known_entities:
            return self
        known = {k: v for k, v in self.known_entities.items() if k != text}
        return replace(self, known_entities=known)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def from_yaml(cls, path: Path, base: "Lexicon | None" = None) -> "Lexicon":
        """Overlay a YAML dictionary file on a base snapshot.

        Args:
            path: YAML file with any of the sections in YAML_SECTIONS
            base: Snapshot to extend (defaults to Lexicon.default())

        Returns:
            New Lexicon with the file's additions applied

        Raises:
            LexiconError: If the file is missing or malformed
        """
        from ruamel.yaml import YAML
        from ruamel.yaml.error import YAMLError

        path = Path(path)
        if not path.is_file():
            raise LexiconError(f"Lexicon file not found: {path}")

        try:
            with path.open(encoding="utf-8") as f:
                data = YAML(typ="safe").load(f)
        except (OSError, YAMLError) as e:
            raise LexiconError(f"Failed to read lexicon file {path}: {e}") from e

        lexicon = base if base is not None else cls.default()
        if data is None:
            return lexicon
        if not isinstance(data, dict):
            raise LexiconError(f"Lexicon file {path} must contain a mapping")

        unknown = set(data) - set(YAML_SECTIONS)
        if unknown:
            logger.warning(f"Ignoring unknown lexicon sections in {path}: {sorted(unknown)}")

        try:
            lexicon = lexicon.with_valid_words(*data.get("valid_words") or [])
            lexicon = lexicon.without_valid_words(*data.get("remove_valid_words") or [])
            for typo, correction in (data.get("typo_corrections") or {}).items():
                lexicon = lexicon.with_typo_correction(typo, correction)
            for abbreviation, expansion in (data.get("abbreviations") or {}).items():
                lexicon = lexicon.with_abbreviation(abbreviation, expansion)
            for word, canonical in (data.get("synonyms") or {}).items():
                lexicon = lexicon.with_synonym(word, canonical)
            for term, expansion in (data.get("business_terms") or {}).items():
                lexicon = lexicon.with_business_term(term, expansion)
            for wrong, right in (data.get("misspellings") or {}).items():
                lexicon = lexicon.with_misspelling(wrong, right)
            for text, entity_type in (data.get("known_entities") or {}).items():
                lexicon = lexicon.with_known_entity(text, entity_type)
            for text in data.get("remove_known_entities") or []:
                lexicon = lexicon.without_known_entity(text)
        except (AttributeError, TypeError) as e:
            raise LexiconError(f"Malformed section in lexicon file {path}: {e}") from e

        logger.debug(f"Loaded lexicon overlay from {path}")
        return lexicon

    def stats(self) -> dict[str, int]:
        """Size of every table."""
        return {
            "valid_words": len(self.valid_words),
            "domain_corrections": len(self.domain_corrections),
            "typo_suggestions": len(self.typo_suggestions),
            "typo_abbreviations": len(self.typo_abbreviations),
            "contextual_corrections": len(self.contextual_corrections),
            "contractions": len(self.contractions),
            "slang": len(self.slang),
            "abbreviations": len(self.abbreviations),
            "domain_terms": len(self.domain_terms),
            "business_terms": len(self.business_terms),
            "misspellings": len(self.misspellings),
            "synonyms": len(self.synonyms),
            "emoji": len(self.emoji),
            "stop_words": len(self.stop_words),
            "profanity": len(self.profanity),
            "status_values": len(self.status_values),
            "priority_values": len(self.priority_values),
            "departments": len(self.departments),
            "currencies": len(self.currencies),
            "known_entities": len(self.known_entities),
        }

    def to_dict(self) -> dict[str, Any]:
        """Export the snapshot as plain, YAML-serializable data."""
        return {
            "valid_words": sorted(self.valid_words),
            "domain_corrections": dict(self.domain_corrections),
            "typo_suggestions": {k: list(v) for k, v in self.typo_suggestions.items()},
            "typo_abbreviations": dict(self.typo_abbreviations),
            "contextual_corrections": dict(self.contextual_corrections),
            "contractions": dict(self.contractions),
            "slang": dict(self.slang),
            "abbreviations": dict(self.abbreviations),
            "domain_terms": dict(self.domain_terms),
            "business_terms": dict(self.business_terms),
            "misspellings": dict(self.misspellings),
            "synonyms": dict(self.synonyms),
            "stop_words": sorted(self.stop_words),
            "business_stop_words": sorted(self.business_stop_words),
            "profanity": sorted(self.profanity),
            "status_values": list(self.status_values),
            "priority_values": list(self.priority_values),
            "departments": list(self.departments),
            "currencies": list(self.currencies),
            "known_entities": dict(self.known_entities),
        }


__all__ = ["Lexicon", "YAML_SECTIONS"]
