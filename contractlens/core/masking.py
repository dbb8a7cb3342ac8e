"""Position-based protection of substrings that must survive rewriting.

Emails, phone numbers, URLs and identifiers are located once per stage and
recorded as character spans. Rewrites run only on the text between those
spans; the protected substrings are spliced back by offset, so repeated
literals can never be confused with each other.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Mapping

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
URL_PATTERN = re.compile(r"https?://[\w\-._~:/?#\[\]@!$&'()*+,;=%]+|\bwww\.[\w\-._~:/?#\[\]@!$&'()*+,;=%]+", re.IGNORECASE)
PHONE_PATTERN = re.compile(
    r"(?<![\w+])(?:\+?1[-.\s]?)?(?:\(\d{3}\)|\d{3})[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)"
)
CONTRACT_REF_PATTERN = re.compile(r"\b(?:contract|cont)\s*#\s*\d+\b", re.IGNORECASE)
NUMBER_PATTERN = re.compile(r"\b\d+(?:\.\d+)?\b")

# Detection order matters: the first pattern to claim a span keeps it
DEFAULT_PATTERNS: dict[str, re.Pattern[str]] = {
    "url": URL_PATTERN,
    "email": EMAIL_PATTERN,
    "phone": PHONE_PATTERN,
    "contract": CONTRACT_REF_PATTERN,
}


def literal_pattern(literals: Iterable[str]) -> re.Pattern[str] | None:
    """Case-insensitive whole-word pattern for a set of literal phrases.

    Longer phrases are tried first so "ACME Corp" wins over "ACME". Returns
    None when there is nothing to match.
    """
    unique = {literal.strip() for literal in literals if literal and literal.strip()}
    if not unique:
        return None
    phrases = sorted(unique, key=lambda p: (-len(p), p))
    alternation = "|".join(re.escape(phrase) for phrase in phrases)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


@dataclass(frozen=True)
class Span:
    """A protected substring."""

    start: int
    end: int
    kind: str
    text: str


class SpanMask:
    """Protected spans over one piece of text.

    Attributes:
        text: The text the spans refer to
        spans: Non-overlapping spans sorted by start offset
    """

    def __init__(self, text: str, spans: list[Span] | None = None) -> None:
        self.text = text
        self.spans = sorted(spans or [], key=lambda s: s.start)

    @classmethod
    def detect(
        cls,
        text: str,
        patterns: Mapping[str, re.Pattern[str]] | None = None,
    ) -> "SpanMask":
        """Find protected substrings in text.

        Args:
            text: Text to scan
            patterns: kind -> compiled pattern, tried in order
                (defaults to DEFAULT_PATTERNS)

        Returns:
            SpanMask over text
        """
        if patterns is None:
            patterns = DEFAULT_PATTERNS

        spans: list[Span] = []
        for kind, pattern in patterns.items():
            for match in pattern.finditer(text):
                start, end = match.span()
                if start == end:
                    continue
                if any(start < s.end and s.start < end for s in spans):
                    continue
                spans.append(Span(start, end, kind, match.group(0)))
        return cls(text, spans)

    def __bool__(self) -> bool:
        return bool(self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    def overlaps(self, start: int, end: int) -> bool:
        """Check whether [start, end) touches any protected span."""
        return any(start < s.end and s.start < end for s in self.spans)

    def segments(self) -> Iterator[tuple[str, Span | None]]:
        """Yield (text, span) pieces in order; span is None for free text."""
        cursor = 0
        for span in self.spans:
            if span.start > cursor:
                yield self.text[cursor : span.start], None
            yield span.text, span
            cursor = span.end
        if cursor < len(self.text):
            yield self.text[cursor:], None

    def apply(self, fn: Callable[[str], str]) -> str:
        """Rewrite the unprotected text, keeping protected spans verbatim.

        Args:
            fn: Rewrite applied to each unprotected segment

        Returns:
            Rewritten text with protected substrings spliced back in place
        """
        if not self.spans:
            return fn(self.text)
        parts = []
        for piece, span in self.segments():
            parts.append(piece if span is not None else fn(piece))
        return "".join(parts)


__all__ = [
    "CONTRACT_REF_PATTERN",
    "DEFAULT_PATTERNS",
    "EMAIL_PATTERN",
    "NUMBER_PATTERN",
    "PHONE_PATTERN",
    "Span",
    "SpanMask",
    "URL_PATTERN",
    "literal_pattern",
]
