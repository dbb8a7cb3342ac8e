"""Ordered substitution rules and the loop that runs them.

Every static phrase table in the pipeline (grammar fixes, typo context
rules, normalizer expansions) is compiled into a RuleChain: an ordered list
of (pattern, replacement) pairs applied one after another.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Mapping, Union

Replacement = Union[str, Callable[["re.Match[str]"], str]]

# A table key matches only as a whole word: not glued to other word
# characters, identifiers, decimals or emails
WORD_LEFT = r"(?<![\w$@#/.'-])"
WORD_RIGHT = r"(?![\w@%/-]|[.,']\w)"


def match_case(source: str, replacement: str) -> str:
    """Copy the case shape of source (ALL CAPS, Capitalized, lower) onto replacement."""
    if not replacement or not source:
        return replacement
    letters = [c for c in source if c.isalpha()]
    if len(letters) > 1 and all(c.isupper() for c in letters):
        return replacement.upper()
    if source[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


def phrase_pattern(key: str, anchored: bool = False, flags: int = re.IGNORECASE) -> re.Pattern[str]:
    """Compile a table key into a whole-word pattern.

    Multi-word keys match any run of whitespace between words. Anchored
    patterns only match when the key is the whole input, optionally led by
    "the" and followed by a terminal mark.
    """
    body = r"\s+".join(re.escape(part) for part in key.split())
    if anchored:
        return re.compile(rf"^\s*(?:the\s+)?{body}\s*[.!?]?\s*$", flags)
    return re.compile(f"{WORD_LEFT}{body}{WORD_RIGHT}", flags)


@dataclass(frozen=True)
class SubstitutionRule:
    """One rewrite step.

    Attributes:
        name: Identifier reported when the rule fires
        pattern: Compiled matcher
        replacement: re.sub template or callable taking the match
    """

    name: str
    pattern: re.Pattern[str]
    replacement: Replacement

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _literal(value: str, keep_case: bool) -> Callable[["re.Match[str]"], str]:
    if keep_case:
        return lambda m: match_case(m.group(0), value)
    return lambda m: value


@dataclass(frozen=True)
class RuleChain:
    """An ordered list of substitution rules.

    Attributes:
        name: Chain name (also used as the rule-name prefix)
        rules: Rules applied in order; later rules see earlier rewrites
    """

    name: str
    rules: tuple[SubstitutionRule, ...] = ()

    @classmethod
    def from_table(
        cls,
        name: str,
        table: Mapping[str, str],
        match_case: bool = True,
        anchored: bool = False,
    ) -> "RuleChain":
        """Compile a phrase table into a chain of whole-word rules.

        Args:
            name: Chain name
            table: phrase -> replacement, applied in insertion order
            match_case: Copy the matched text's case shape onto the replacement
            anchored: Only rewrite inputs that consist of the phrase alone

        Returns:
            RuleChain with one rule per table entry
        """
        rules = []
        for key, value in table.items():
            if not key.strip():
                continue
            rules.append(
                SubstitutionRule(
                    name=f"{name}:{key}",
                    pattern=phrase_pattern(key, anchored=anchored),
                    replacement=_literal(value, match_case),
                )
            )
        return cls(name, tuple(rules))

    @classmethod
    def from_patterns(cls, name: str, table: Mapping[str, str], flags: int = re.IGNORECASE) -> "RuleChain":
        """Compile a regex -> template table (templates may use group references)."""
        rules = tuple(
            SubstitutionRule(name=f"{name}:{pattern}", pattern=re.compile(pattern, flags), replacement=template)
            for pattern, template in table.items()
        )
        return cls(name, rules)

    def __len__(self) -> int:
        return len(self.rules)

    def extended(self, *rules: SubstitutionRule) -> "RuleChain":
        """Return a new chain with rules appended."""
        return RuleChain(self.name, self.rules + tuple(rules))

    def apply(self, text: str) -> str:
        """Run every rule in order."""
        for rule in self.rules:
            text = rule.apply(text)
        return text


__all__ = [
    "RuleChain",
    "SubstitutionRule",
    "WORD_LEFT",
    "WORD_RIGHT",
    "match_case",
    "phrase_pattern",
]
