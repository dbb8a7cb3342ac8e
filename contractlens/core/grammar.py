"""Table-driven grammar cleanup for business queries.

GrammarEnforcer rewrites a query by running fixed phrase tables in order:
business slang, common errors, subject-verb agreement, articles,
prepositions, verb forms and whole-sentence templates. It then fixes
capitalization and punctuation. Emails, URLs and phone numbers are masked
for the whole run.

The output is meant to be good enough for keyword and entity matching
downstream, not grammatically perfect.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from .masking import EMAIL_PATTERN, PHONE_PATTERN, URL_PATTERN, SpanMask
from .rules import RuleChain, SubstitutionRule, match_case

logger = logging.getLogger(__name__)

_MASK_PATTERNS = {"url": URL_PATTERN, "email": EMAIL_PATTERN, "phone": PHONE_PATTERN}

# ============================================================================
# Rewrite tables (applied in this order)
# ============================================================================

BUSINESS_PHRASES: dict[str, str] = {
    "gonna": "going to",
    "wanna": "want to",
    "gotta": "have to",
    "kinda": "kind of",
    "sorta": "sort of",
    "dunno": "don't know",
    "yeah": "yes",
    "nope": "no",
    "ok": "okay",
    "thru": "through",
    "u": "you",
    "ur": "your",
    "r": "are",
    "n": "and",
    "w/o": "without",
    "w/": "with",
    "b4": "before",
    "2": "to",
    "4": "for",
    "as per": "according to",
    "at this point in time": "now",
    "due to the fact that": "because",
    "in order to": "to",
    "for the purpose of": "to",
    "with regard to": "regarding",
    "in regard to": "regarding",
    "with respect to": "regarding",
    "in the event that": "if",
    "in the near future": "soon",
    "at the present time": "now",
    "please be advised": "please note",
    "please don't hesitate": "please",
}

COMMON_ERRORS: dict[str, str] = {
    "teh": "the",
    "your welcome": "you're welcome",
    "its a": "it's a",
    "there contract": "their contract",
    "they're contract": "their contract",
    "you're contract": "your contract",
    "who's contract": "whose contract",
    "loose the contract": "lose the contract",
    "effect the payment": "affect the payment",
    "less contracts": "fewer contracts",
    "amount of contracts": "number of contracts",
    "less customers": "fewer customers",
    "amount of customers": "number of customers",
    "between you and i": "between you and me",
    "myself will handle": "I will handle",
    "irregardless": "regardless",
    "could care less": "couldn't care less",
    "advance planning": "planning",
    "future plans": "plans",
    "past history": "history",
    "end result": "result",
    "final outcome": "outcome",
    "close proximity": "proximity",
    "completely finished": "finished",
}

SINGULAR_NOUNS = (
    "contract", "customer", "account", "invoice", "payment", "document",
    "record", "status", "information", "data",
)
PLURAL_NOUNS = ("contracts", "customers", "accounts", "invoices", "payments", "documents", "records")


def _subject_verb_table() -> dict[str, str]:
    table: dict[str, str] = {}
    for noun in SINGULAR_NOUNS:
        table[f"{noun} are"] = f"{noun} is"
        table[f"{noun} were"] = f"{noun} was"
    for noun in PLURAL_NOUNS:
        table[f"{noun} is"] = f"{noun} are"
        table[f"{noun} was"] = f"{noun} were"
    for noun in ("contract", "customer"):
        table[f"{noun} have"] = f"{noun} has"
        table[f"{noun} do"] = f"{noun} does"
    for noun in ("contracts", "customers"):
        table[f"{noun} has"] = f"{noun} have"
        table[f"{noun} does"] = f"{noun} do"
    return table


SUBJECT_VERB: dict[str, str] = _subject_verb_table()

ARTICLES: dict[str, str] = {
    **{
        f"a {word}": f"an {word}"
        for word in (
            "account", "invoice", "order", "email", "update", "error", "amount",
            "address", "organization", "employee",
        )
    },
    **{
        f"an {word}": f"a {word}"
        for word in (
            "contract", "customer", "payment", "document", "business", "company",
            "manager", "report", "user", "project",
        )
    },
    "show contract": "show the contract",
    "find customer": "find the customer",
    "get payment": "get the payment",
    "update account": "update the account",
    "delete record": "delete the record",
}

PREPOSITIONS: dict[str, str] = {
    "search for contract": "search for a contract",
    "look at contract": "look at the contract",
    "work in project": "work on the project",
    "depend of": "depend on",
    "different than": "different from",
    "comply to": "comply with",
    "agree to contract": "agree to the contract",
    "responsible of": "responsible for",
    "consist in": "consist of",
    "based in": "based on",
    "contract with number": "contract with the number",
    "payment for invoice": "payment for the invoice",
    "account of customer": "account for the customer",
    "information about contract": "information about the contract",
    "details of account": "details of the account",
}

VERB_FORMS: dict[str, str] = {
    "catched": "caught",
    "teached": "taught",
    "brang": "brought",
    "runned": "ran",
    "goed": "went",
    "comed": "came",
    "sended": "sent",
    "builded": "built",
    "don't got": "don't have",
    "doesn't got": "doesn't have",
    "ain't got": "don't have",
    "should of": "should have",
    "could of": "could have",
    "would of": "would have",
    "might of": "might have",
    "contract was expired": "contract has expired",
    "payment was processed": "payment has been processed",
    "account was created": "account has been created",
    "invoice was generated": "invoice has been generated",
}

# Whole-sentence templates; they only fire when the phrase is the entire input
SENTENCE_PATTERNS: dict[str, str] = {
    "what is contract": "What is the contract?",
    "where is customer": "Where is the customer?",
    "when is payment": "When is the payment?",
    "how is account": "How is the account?",
    "who is manager": "Who is the manager?",
    "show me contract": "Show me the contract.",
    "find customer": "Find the customer.",
    "get payment": "Get the payment.",
    "update account": "Update the account.",
    "delete record": "Delete the record.",
    "contract is active": "The contract is active.",
    "customer is new": "The customer is new.",
    "payment is pending": "The payment is pending.",
    "account is closed": "The account is closed.",
    "invoice is overdue": "The invoice is overdue.",
}

CONTRACT_LEGALESE: dict[str, str] = {
    "party of the first part": "first party",
    "party of the second part": "second party",
    "whereas": "given that",
    "heretofore": "previously",
    "hereinafter": "from now on",
    "aforementioned": "mentioned above",
    "pursuant to": "according to",
    "notwithstanding": "despite",
    "in lieu of": "instead of",
    "prior to": "before",
    "subsequent to": "after",
    "in accordance with": "according to",
}

PASSIVE_VERBS = (
    "created", "processed", "updated", "deleted", "generated", "sent",
    "received", "approved", "rejected", "completed",
)

PASSIVE_PHRASES: dict[str, str] = {
    "is being processed": "is processing",
    "are being reviewed": "are reviewing",
    "will be handled": "will handle",
    "can be found": "can find",
    "should be considered": "should consider",
}

WORDY_PHRASES: dict[str, str] = {
    "in order to": "to",
    "for the purpose of": "to",
    "with regard to": "regarding",
    "in regard to": "regarding",
    "with respect to": "regarding",
    "in connection with": "regarding",
    "in relation to": "regarding",
    "as a result of": "because of",
    "due to the fact that": "because",
    "in spite of the fact that": "although",
    "despite the fact that": "although",
    "in the event that": "if",
    "in the case that": "if",
    "under circumstances in which": "when",
    "at this point in time": "now",
    "at the present time": "now",
    "in the near future": "soon",
    "at an early date": "soon",
    "in the final analysis": "finally",
    "it is important to note that": "note that",
    "please be advised that": "please note",
    "please don't hesitate to": "please",
    "we would like to take this opportunity to": "we",
    "i am writing to inform you that": "",
    "this is to inform you that": "",
}

_WEAK_WORDS = re.compile(
    r"\b(?:very|really|quite|rather|somewhat|fairly|basically|essentially|actually|literally)\b\s*",
    re.IGNORECASE,
)

# Capitalization
TITLE_CASE_WORDS = frozenset({
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "january", "february", "march", "april", "june", "july", "august",
    "september", "october", "november", "december",
    "mr", "mrs", "ms", "dr", "prof",
    "president", "manager", "director", "supervisor", "coordinator", "administrator",
    "microsoft", "google", "apple", "amazon", "oracle", "salesforce",
})
ACRONYMS = frozenset({
    "ceo", "cfo", "cto", "vp", "sql", "api", "url", "http", "https", "xml", "json", "csv", "pdf",
})

QUESTION_WORDS = frozenset({
    "what", "where", "when", "why", "who", "how", "is", "are", "do", "does", "did",
    "will", "would", "can", "could", "should",
})

_PUNCTUATION_FIXES = RuleChain.from_patterns(
    "punctuation",
    {
        r"\s+([.!?,:;])": r"\1",
        r"([.!?])([A-Z])": r"\1 \2",
        r"([,:;])([A-Za-z])": r"\1 \2",
        r"\.{2,}": ".",
        r"!{2,}": "!",
        r"\?{2,}": "?",
        r"[ \t]{2,}": " ",
    },
    flags=0,
)


def article_for(word: str) -> str:
    """Pick "a" or "an" for the word that follows it."""
    lowered = word.lower()
    if lowered.startswith(("hour", "honest", "honor")):
        return "an"
    if lowered.startswith(("uni", "eu", "one", "use")):
        return "a"
    return "an" if lowered[:1] in ("a", "e", "i", "o", "u") else "a"


_VOWEL_SOUND_RULE = SubstitutionRule(
    name="articles:vowel-sound",
    pattern=re.compile(r"\b(an?)(\s+)([A-Za-z][\w'-]*)", re.IGNORECASE),
    replacement=lambda m: f"{match_case(m.group(1), article_for(m.group(3)))}{m.group(2)}{m.group(3)}",
)

_PASSIVE_WITH_AGENT = re.compile(
    r"\b(?P<object>(?:the\s+|a\s+|an\s+|this\s+|that\s+)?\w+)\s+(?:was|were)\s+"
    rf"(?P<verb>{'|'.join(PASSIVE_VERBS)})\s+by\s+"
    r"(?P<agent>(?:the\s+)?[A-Za-z][\w.]*(?:\s+[A-Z][\w.]*)?)",
    re.IGNORECASE,
)


# ============================================================================
# Suggestions
# ============================================================================


@dataclass(frozen=True)
class GrammarSuggestion:
    """A flagged grammar issue with a proposed fix."""

    original: str
    suggestion: str
    reason: str
    confidence: float
    rule: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "suggestion": self.suggestion,
            "reason": self.reason,
            "confidence": self.confidence,
            "rule": self.rule,
        }


@dataclass
class GrammarAnalysis:
    """Issue report for one text."""

    text: str
    corrected: str
    issues: list[GrammarSuggestion] = field(default_factory=list)
    score: float = 1.0
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "corrected": self.corrected,
            "issues": [i.to_dict() for i in self.issues],
            "score": self.score,
            "summary": self.summary,
        }


Checker = Callable[["re.Match[str]"], "GrammarSuggestion | None"]

_SUBJECTS = frozenset({
    "i", "you", "he", "she", "it", "we", "they", "this", "that",
    "contract", "customer", "account", "invoice", "payment",
})
_PREDICATES = frozenset({
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does",
    "did", "will", "would", "can", "could", "should", "may", "might", "must",
    "need", "needs", "want", "wants", "show", "shows", "get", "gets", "find",
    "expired", "expires", "failed", "fails",
})
_CONJUNCTIONS = re.compile(r"\b(?:and|but|or|so)\b", re.IGNORECASE)
_TO_SINGULAR_VERB = {"are": "is", "were": "was", "have": "has", "do": "does"}
_TO_PLURAL_VERB = {"is": "are", "was": "were", "has": "have", "does": "do"}


def _is_plural(word: str) -> bool:
    return word.endswith("s") and not word.endswith(("ss", "us", "is"))


def _check_subject_verb(match: "re.Match[str]") -> GrammarSuggestion | None:
    noun, verb = match.group(1).lower(), match.group(2).lower()
    fixed = SUBJECT_VERB.get(f"{noun} {verb}")
    if fixed is None:
        if noun in SINGULAR_NOUNS and verb in _TO_SINGULAR_VERB:
            fixed = f"{noun} {_TO_SINGULAR_VERB[verb]}"
        elif _is_plural(noun) and noun[:-1] in SINGULAR_NOUNS and verb in _TO_PLURAL_VERB:
            fixed = f"{noun} {_TO_PLURAL_VERB[verb]}"
        else:
            return None
    return GrammarSuggestion(
        original=match.group(0),
        suggestion=match_case(match.group(0), fixed),
        reason="Subject-verb agreement",
        confidence=0.9,
        rule="subject_verb",
    )


def _check_article(match: "re.Match[str]") -> GrammarSuggestion | None:
    article, word = match.group(1), match.group(2)
    expected = article_for(word)
    if article.lower() == expected:
        return None
    return GrammarSuggestion(
        original=match.group(0),
        suggestion=f"{match_case(article, expected)} {word}",
        reason="Article usage",
        confidence=0.85,
        rule="article",
    )


def _check_preposition(match: "re.Match[str]") -> GrammarSuggestion | None:
    words = match.group(0).split()
    for original in (" ".join(words), " ".join(words[:2])):
        fixed = PREPOSITIONS.get(original.lower())
        if fixed is not None:
            return GrammarSuggestion(
                original=original,
                suggestion=match_case(original, fixed),
                reason="Preposition usage",
                confidence=0.8,
                rule="preposition",
            )
    return None


def _check_double_negative(match: "re.Match[str]") -> GrammarSuggestion | None:
    fixed = re.sub(r"\s*\b(?:no|not|nothing|nobody|nowhere|never)\b", "", match.group(0), count=1)
    return GrammarSuggestion(
        original=match.group(0),
        suggestion=fixed.strip(),
        reason="Double negative",
        confidence=0.75,
        rule="double_negative",
    )


def _check_fragment(match: "re.Match[str]") -> GrammarSuggestion | None:
    words = {w.lower() for w in re.findall(r"[A-Za-z']+", match.group(0))}
    if words & _SUBJECTS and words & _PREDICATES:
        return None
    return GrammarSuggestion(
        original=match.group(0),
        suggestion=match.group(0),
        reason="Possible sentence fragment",
        confidence=0.6,
        rule="fragment",
    )


def _check_run_on(match: "re.Match[str]") -> GrammarSuggestion | None:
    if len(_CONJUNCTIONS.findall(match.group(0))) <= 2:
        return None
    return GrammarSuggestion(
        original=match.group(0),
        suggestion=match.group(0),
        reason="Possible run-on sentence",
        confidence=0.65,
        rule="run_on",
    )


SUGGESTION_RULES: tuple[tuple[str, re.Pattern[str], Checker], ...] = (
    (
        "subject_verb",
        re.compile(r"\b(\w+)\s+(is|are|was|were|have|has|do|does)\b", re.IGNORECASE),
        _check_subject_verb,
    ),
    ("article", re.compile(r"\b(an?)\s+([A-Za-z]\w*)\b", re.IGNORECASE), _check_article),
    (
        "preposition",
        re.compile(r"\b(\w+)\s+(in|on|at|by|for|with|from|to|of|than)\s+(\w+)\b", re.IGNORECASE),
        _check_preposition,
    ),
    (
        "double_negative",
        re.compile(
            r"\b(?:don't|doesn't|didn't|won't|wouldn't|can't|couldn't|shouldn't)\s+\w*\s*"
            r"(?:no|not|nothing|nobody|nowhere|never)\b",
            re.IGNORECASE,
        ),
        _check_double_negative,
    ),
    ("fragment", re.compile(r"^[A-Z][^.!?]*[.!?]$"), _check_fragment),
    ("run_on", re.compile(r"^[^.!?]{100,}[.!?]$"), _check_run_on),
)


# ============================================================================
# Enforcer
# ============================================================================


class GrammarEnforcer:
    """Applies the grammar tables, capitalization and punctuation cleanup.

    Attributes:
        chains: Ordered rewrite chains run by enforce_grammar
        min_suggestion_confidence: Floor for surfaced suggestions
        max_suggestions: Cap on surfaced suggestions
    """

    def __init__(self, min_suggestion_confidence: float = 0.7, max_suggestions: int = 3) -> None:
        self.min_suggestion_confidence = min_suggestion_confidence
        self.max_suggestions = max_suggestions

        articles = RuleChain.from_table("articles", ARTICLES)
        self.chains: tuple[RuleChain, ...] = (
            RuleChain.from_table("business_phrases", BUSINESS_PHRASES),
            RuleChain.from_table("common_errors", COMMON_ERRORS),
            RuleChain.from_table("subject_verb", SUBJECT_VERB),
            articles.extended(_VOWEL_SOUND_RULE),
            RuleChain.from_table("prepositions", PREPOSITIONS),
            RuleChain.from_table("verb_forms", VERB_FORMS),
            RuleChain.from_table("sentence_patterns", SENTENCE_PATTERNS, match_case=False, anchored=True),
        )
        self._formal = (
            RuleChain.from_table("business_phrases", BUSINESS_PHRASES),
            RuleChain.from_table("contract_legalese", CONTRACT_LEGALESE),
        )
        self._passive = RuleChain.from_table("passive", PASSIVE_PHRASES)
        self._wordy = RuleChain.from_table("wordy", WORDY_PHRASES)

    # ------------------------------------------------------------------
    # Rewriting
    # ------------------------------------------------------------------

    def enforce_grammar(self, text: str) -> str:
        """Rewrite text through every grammar table, then fix case and punctuation.

        Args:
            text: Query text

        Returns:
            Corrected text (blank input is returned unchanged)
        """
        if not text or not text.strip():
            return text or ""

        rewritten = self._run_chains(text.strip(), self.chains)
        rewritten = self._capitalize(rewritten)
        rewritten = self._punctuate(rewritten)
        if rewritten != text:
            logger.debug(f"Grammar: '{text}' -> '{rewritten}'")
        return rewritten

    def enforce_batch(self, texts: Iterable[str]) -> list[str]:
        return [self.enforce_grammar(text) for text in texts]

    def to_formal_business_language(self, text: str) -> str:
        """Replace casual phrases and legalese with plain business wording."""
        if not text or not text.strip():
            return text or ""
        rewritten = self._run_chains(text.strip(), self._formal)
        return self._punctuate(self._capitalize(rewritten))

    def convert_passive_to_active(self, text: str) -> str:
        """Turn "X was created by Y" style clauses into "Y created X"."""
        if not text or not text.strip():
            return text or ""

        def rewrite(segment: str) -> str:
            segment = _PASSIVE_WITH_AGENT.sub(self._activate, segment)
            return self._passive.apply(segment)

        rewritten = SpanMask.detect(text.strip(), _MASK_PATTERNS).apply(rewrite)
        if text.strip()[:1].isupper():
            rewritten = rewritten[:1].upper() + rewritten[1:]
        return rewritten

    def make_concise(self, text: str) -> str:
        """Shorten wordy phrases and drop intensifiers and filler words."""
        if not text or not text.strip():
            return text or ""

        def rewrite(segment: str) -> str:
            segment = self._wordy.apply(segment)
            return _WEAK_WORDS.sub("", segment)

        rewritten = SpanMask.detect(text.strip(), _MASK_PATTERNS).apply(rewrite)
        rewritten = re.sub(r"[ \t]{2,}", " ", rewritten)
        rewritten = re.sub(r"\s+([.!?,:;])", r"\1", rewritten).strip()
        return rewritten[:1].upper() + rewritten[1:] if rewritten else rewritten

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def suggestions(self, text: str) -> list[GrammarSuggestion]:
        """Flagged issues with confidence >= the floor, best first (at most max_suggestions)."""
        issues = [s for s in self._find_issues(text) if s.confidence >= self.min_suggestion_confidence]
        issues.sort(key=lambda s: s.confidence, reverse=True)
        return issues[: self.max_suggestions]

    def needs_correction(self, text: str) -> bool:
        if not text or not text.strip():
            return False
        return self.enforce_grammar(text) != text

    def grammar_confidence(self, original: str, corrected: str) -> float:
        """How much a correction is trusted (1.0 unchanged, 0.9 improved, 0.7 otherwise)."""
        if original == corrected:
            return 1.0
        before = len(self._find_issues(original))
        if before == 0:
            return 1.0
        if len(self._find_issues(corrected)) < before:
            return 0.9
        return 0.7

    def analyze(self, text: str) -> GrammarAnalysis:
        """Report every flagged issue with an overall quality score."""
        if not text or not text.strip():
            return GrammarAnalysis(text or "", text or "", [], 1.0, "No text to analyze.")

        issues = self._find_issues(text)
        corrected = self.enforce_grammar(text)
        if not issues:
            return GrammarAnalysis(
                text, corrected, [], 1.0, "No grammar issues detected. Text appears to be well-written."
            )

        words = max(1, len(text.split()))
        score = max(0.0, 1.0 - len(issues) / words * 10)
        score -= sum(1.0 - i.confidence for i in issues) / len(issues) * 0.5
        score = min(1.0, max(0.0, score))

        counts = Counter(i.reason for i in issues)
        details = ", ".join(f"{reason} ({count})" for reason, count in counts.items())
        summary = f"Found {len(issues)} grammar issue(s): {details}"
        return GrammarAnalysis(text, corrected, issues, round(score, 4), summary)

    def stats(self) -> dict[str, Any]:
        return {
            "chains": {chain.name: len(chain) for chain in self.chains},
            "contract_legalese": len(CONTRACT_LEGALESE),
            "passive_phrases": len(PASSIVE_PHRASES),
            "wordy_phrases": len(WORDY_PHRASES),
            "suggestion_rules": len(SUGGESTION_RULES),
            "proper_nouns": len(TITLE_CASE_WORDS),
            "acronyms": len(ACRONYMS),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _run_chains(text: str, chains: Iterable[RuleChain]) -> str:
        def rewrite(segment: str) -> str:
            for chain in chains:
                segment = chain.apply(segment)
            return segment

        return SpanMask.detect(text, _MASK_PATTERNS).apply(rewrite)

    @staticmethod
    def _activate(match: "re.Match[str]") -> str:
        agent = match.group("agent")
        obj = match.group("object")
        if obj[:1].isupper() and not obj.isupper():
            obj = obj[0].lower() + obj[1:]
        return f"{agent} {match.group('verb').lower()} {obj}"

    def _find_issues(self, text: str) -> list[GrammarSuggestion]:
        if not text or not text.strip():
            return []
        stripped = text.strip()
        found: list[GrammarSuggestion] = []
        for _, pattern, checker in SUGGESTION_RULES:
            for match in pattern.finditer(stripped):
                suggestion = checker(match)
                if suggestion is not None:
                    found.append(suggestion)
        return found

    def _capitalize(self, text: str) -> str:
        mask = SpanMask.detect(text, _MASK_PATTERNS)
        parts: list[str] = []
        cursor = 0
        sentence_start = True

        for match in re.finditer(r"\S+", text):
            parts.append(text[cursor : match.start()])
            cursor = match.end()
            token = match.group(0)

            if not mask.overlaps(match.start(), match.end()):
                token = self._capitalize_token(token, sentence_start)
            parts.append(token)
            sentence_start = token[-1] in ".!?"

        parts.append(text[cursor:])
        return "".join(parts)

    @staticmethod
    def _capitalize_token(token: str, sentence_start: bool) -> str:
        core_match = re.search(r"[A-Za-z][A-Za-z']*", token)
        if core_match is None:
            return token
        core = core_match.group(0)
        lowered = core.lower()

        if lowered in ACRONYMS:
            core = lowered.upper()
        elif lowered in TITLE_CASE_WORDS:
            core = lowered.capitalize()
        elif lowered == "i" or lowered.startswith(("i'm", "i'll", "i've", "i'd")):
            core = "I" + core[1:]
        elif sentence_start and core_match.start() == len(token) - len(token.lstrip("\"'(")):
            core = core[0].upper() + core[1:]

        return token[: core_match.start()] + core + token[core_match.end() :]

    @staticmethod
    def _punctuate(text: str) -> str:
        rewritten = SpanMask.detect(text, _MASK_PATTERNS).apply(_PUNCTUATION_FIXES.apply).strip()
        if not rewritten:
            return rewritten
        rewritten = rewritten.rstrip(",;:").rstrip()
        if rewritten and rewritten[-1] not in ".!?":
            first = re.match(r"[A-Za-z']+", rewritten)
            is_question = first is not None and first.group(0).lower() in QUESTION_WORDS
            rewritten += "?" if is_question else "."
        return rewritten


__all__ = [
    "GrammarAnalysis",
    "GrammarEnforcer",
    "GrammarSuggestion",
    "SUGGESTION_RULES",
    "article_for",
]
