"""Keyword sets, context patterns and the action table for intent classification.

Registration order matters everywhere in this module: context patterns are
tried first to last, keyword ties go to the intent listed first, and the
first action rule that matches decides the action.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .taxonomy import ActionType, QueryType

# Keywords counted per intent, in registration order
INTENT_KEYWORDS: dict[QueryType, frozenset[str]] = {
    QueryType.CONTRACT_INFO: frozenset(
        {"show", "contract", "details", "info", "information", "find", "get", "display"}
    ),
    QueryType.PARTS_INFO: frozenset(
        {"part", "parts", "specifications", "datasheet", "compatible", "stock", "manufacturer", "spec", "product"}
    ),
    QueryType.STATUS_CHECK: frozenset({"status", "expired", "active", "check", "state", "condition"}),
    QueryType.CUSTOMER_INFO: frozenset({"customer", "account", "client", "company", "organization"}),
    QueryType.HELP_CREATE_CONTRACT: frozenset({"create", "help", "how", "new", "want", "make", "generate"}),
    QueryType.FAILED_PARTS: frozenset({"failed", "filed", "defective", "broken", "issues", "problems"}),
    QueryType.USER_CONTRACT_QUERY: frozenset({"user", "person", "employee", "rep", "representative"}),
    QueryType.LIST_PARTS: frozenset({"list", "all", "show", "parts", "components"}),
}

_CONTRACT_REF = r"(?:(?:the\s+)?contract\s+)?"


@dataclass(frozen=True)
class ContextPattern:
    """A regex for a whole canonical phrase shape that fixes the intent."""

    name: str
    intent: QueryType
    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, name: str, intent: QueryType, regex: str | re.Pattern[str]) -> "ContextPattern":
        pattern = re.compile(regex, re.IGNORECASE) if isinstance(regex, str) else regex
        return cls(name, intent, pattern)

    def matches(self, query: str) -> bool:
        return self.pattern.search(query) is not None


# Most specific first
CONTEXT_PATTERNS: tuple[ContextPattern, ...] = (
    ContextPattern.compile(
        "failed_parts_context",
        QueryType.FAILED_PARTS,
        rf"\b(?:failed|filed|defective|broken|faulty)\s+(?:parts?|components?)\s+(?:in|for|of)\s+{_CONTRACT_REF}\d{{6}}\b",
    ),
    ContextPattern.compile(
        "user_contracts_context",
        QueryType.USER_CONTRACT_QUERY,
        r"\b(?:contracts?|agreements?)\s+(?:for|of|by)\s+(?:user|person|employee|rep)\s+\w+",
    ),
    ContextPattern.compile(
        "status_context",
        QueryType.STATUS_CHECK,
        rf"\bstatus\s+of\s+{_CONTRACT_REF}\d{{6}}\b",
    ),
    ContextPattern.compile(
        "contract_context",
        QueryType.CONTRACT_INFO,
        r"\b(?:show|display|get|find)\s+(?:the\s+)?contract\s+\d{6}\b",
    ),
    ContextPattern.compile(
        "parts_context",
        QueryType.PARTS_INFO,
        r"\b(?:specifications?|datasheet|manufacturer)\s+(?:of|for)\s+(?:the\s+)?[a-z0-9][a-z0-9-]*",
    ),
    ContextPattern.compile(
        "customer_context",
        QueryType.CUSTOMER_INFO,
        r"\b(?:customer|client|company)\s+(?:info|information|details)\s+(?:for|of)\s+\w+",
    ),
    ContextPattern.compile(
        "help_create_context",
        QueryType.HELP_CREATE_CONTRACT,
        r"\b(?:how\s+to|help\s+me|create|make|generate)\s+(?:new|a)\s+\w+",
    ),
)

USER_KEYWORDS = frozenset({"user", "person", "employee", "rep", "representative"})
CUSTOMER_KEYWORDS = frozenset({"customer", "client", "company", "organization"})
STATUS_TYPES = ("active", "inactive", "expired", "pending", "cancelled")

# Uppercased words that are never part numbers
PART_STOP_WORDS = frozenset(
    {
        "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HER", "WAS", "ONE",
        "OUR", "HAD", "WHAT", "SO", "UP", "OUT", "IF", "ABOUT", "WHO", "GET", "WHICH", "GO", "ME",
    }
)

CONTRACT_NUMBER_PATTERN = re.compile(r"\b\d{6}\b")
PART_NUMBER_PATTERN = re.compile(r"\b[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\b")
ACCOUNT_PATTERN = re.compile(r"\baccount\s+(?:(?:number|no\.?|num)\s+)?#?\s*([a-z0-9-]*\d[a-z0-9-]*)", re.IGNORECASE)


def is_part_number(candidate: str) -> bool:
    """3+ alphanumerics with a digit that are neither a contract number nor a stop word."""
    if len(candidate) < 3 or not any(ch.isdigit() for ch in candidate):
        return False
    if CONTRACT_NUMBER_PATTERN.fullmatch(candidate):
        return False
    return candidate.upper() not in PART_STOP_WORDS


@dataclass(frozen=True)
class ActionRule:
    """One row of the action decision table.

    A rule matches when every condition it sets holds: the intent equals
    ``intent``, any of ``words`` appears among the tokens, and the
    ParsedQuery field named by ``requires`` is filled.
    """

    action: ActionType
    intent: QueryType | None = None
    words: tuple[str, ...] = ()
    requires: str | None = None

    def matches(self, intent: QueryType, tokens: Iterable[str], fields: dict[str, str | None]) -> bool:
        if self.intent is not None and intent is not self.intent:
            return False
        if self.words and not any(token in self.words for token in tokens):
            return False
        if self.requires is not None and not fields.get(self.requires):
            return False
        return True


ACTION_RULES: tuple[ActionRule, ...] = (
    # Specific part requests
    ActionRule(ActionType.GET_SPECIFICATIONS, words=("specifications", "specification", "specs", "spec")),
    ActionRule(ActionType.GET_DATASHEET, words=("datasheet", "datasheets")),
    ActionRule(ActionType.GET_MANUFACTURER, words=("manufacturer", "manufacturers")),
    ActionRule(ActionType.CHECK_STOCK, words=("stock", "availability", "available")),
    ActionRule(ActionType.GET_COMPATIBLE, words=("compatible", "compatibility")),
    ActionRule(ActionType.GET_WARRANTY, words=("warranty",)),
    # Intent-specific rows
    ActionRule(ActionType.CHECK_ISSUES, intent=QueryType.FAILED_PARTS),
    ActionRule(ActionType.LIST_PARTS, intent=QueryType.LIST_PARTS, requires="contract_number"),
    ActionRule(ActionType.CREATE, intent=QueryType.HELP_CREATE_CONTRACT, words=("create", "make", "generate", "new")),
    ActionRule(ActionType.HELP, intent=QueryType.HELP_CREATE_CONTRACT),
    ActionRule(ActionType.CHECK_ACTIVE, intent=QueryType.STATUS_CHECK, words=("active",)),
    ActionRule(ActionType.CHECK_STATUS, intent=QueryType.STATUS_CHECK),
    # Verbs
    ActionRule(ActionType.SHOW, words=("show", "display")),
    ActionRule(ActionType.LIST, words=("list",)),
    ActionRule(ActionType.INFO, words=("info", "information")),
    ActionRule(ActionType.DETAILS, words=("details", "detail")),
    ActionRule(ActionType.CHECK_STATUS, words=("status", "check")),
    ActionRule(ActionType.HELP, words=("help",)),
    ActionRule(ActionType.CHECK_ISSUES, words=("issues", "problems")),
    # Intent defaults
    ActionRule(ActionType.DETAILS, intent=QueryType.CONTRACT_INFO, requires="contract_number"),
    ActionRule(ActionType.INFO, intent=QueryType.CONTRACT_INFO),
    ActionRule(ActionType.GET_SPECIFICATIONS, intent=QueryType.PARTS_INFO, requires="part_number"),
    ActionRule(ActionType.INFO, intent=QueryType.PARTS_INFO),
    ActionRule(ActionType.INFO, intent=QueryType.CUSTOMER_INFO),
    ActionRule(ActionType.LIST, intent=QueryType.USER_CONTRACT_QUERY),
    ActionRule(ActionType.LIST_PARTS, intent=QueryType.LIST_PARTS),
)


def derive_action(
    intent: QueryType,
    tokens: Iterable[str],
    fields: dict[str, str | None],
    rules: tuple[ActionRule, ...] = ACTION_RULES,
) -> ActionType:
    """First matching action for an intent, its tokens and extracted fields."""
    if intent is QueryType.UNKNOWN:
        return ActionType.UNKNOWN
    token_list = list(tokens)
    for rule in rules:
        if rule.matches(intent, token_list, fields):
            return rule.action
    return ActionType.INFO


__all__ = [
    "ACCOUNT_PATTERN",
    "ACTION_RULES",
    "CONTEXT_PATTERNS",
    "CONTRACT_NUMBER_PATTERN",
    "CUSTOMER_KEYWORDS",
    "ActionRule",
    "ContextPattern",
    "INTENT_KEYWORDS",
    "PART_NUMBER_PATTERN",
    "PART_STOP_WORDS",
    "STATUS_TYPES",
    "USER_KEYWORDS",
    "derive_action",
    "is_part_number",
]
