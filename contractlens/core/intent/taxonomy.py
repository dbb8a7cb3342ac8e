"""Intent taxonomy for contractlens.

This module defines the query types, action types and the structured
ParsedQuery record that downstream lookups act on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class QueryType(str, Enum):
    """What the caller is asking about."""

    CONTRACT_INFO = "CONTRACT_INFO"  # Look up a contract
    PARTS_INFO = "PARTS_INFO"  # Part specs, datasheets, stock
    STATUS_CHECK = "STATUS_CHECK"  # Active/expired/pending state
    CUSTOMER_INFO = "CUSTOMER_INFO"  # Customer or account details
    HELP_CREATE_CONTRACT = "HELP_CREATE_CONTRACT"  # How to create a contract
    FAILED_PARTS = "FAILED_PARTS"  # Failed or defective parts
    USER_CONTRACT_QUERY = "USER_CONTRACT_QUERY"  # Contracts owned by a user
    LIST_PARTS = "LIST_PARTS"  # Parts of a contract
    UNKNOWN = "UNKNOWN"


class ActionType(str, Enum):
    """Operation to perform for a query."""

    SHOW = "SHOW"
    LIST = "LIST"
    INFO = "INFO"
    DETAILS = "DETAILS"
    CHECK_STATUS = "CHECK_STATUS"
    GET_SPECIFICATIONS = "GET_SPECIFICATIONS"
    GET_DATASHEET = "GET_DATASHEET"
    GET_MANUFACTURER = "GET_MANUFACTURER"
    CHECK_STOCK = "CHECK_STOCK"
    GET_COMPATIBLE = "GET_COMPATIBLE"
    CREATE = "CREATE"
    HELP = "HELP"
    CHECK_ACTIVE = "CHECK_ACTIVE"
    GET_WARRANTY = "GET_WARRANTY"
    CHECK_ISSUES = "CHECK_ISSUES"
    LIST_PARTS = "LIST_PARTS"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class IntentClassification:
    """An intent label with its confidence."""

    intent: QueryType
    confidence: float

    @classmethod
    def unknown(cls) -> "IntentClassification":
        return cls(QueryType.UNKNOWN, 0.0)


@dataclass
class ParsedQuery:
    """Structured result of intent classification.

    Attributes:
        query_type: Classified intent
        action_type: Operation derived from intent and entities
        confidence: Confidence score 0.0-1.0
        contract_number: First 6-digit contract number, if any
        part_number: First part-number-shaped token, if any
        user_name: Proper noun found next to user keywords
        customer_name: Proper noun found next to customer keywords
        account_number: Identifier following "account"
        status_type: Status word (active, expired, ...)
        entities: Raw extractions (contract_numbers, part_numbers, proper_nouns, numbers)
        matched_keywords: Tokens that counted toward the chosen intent
        source: How the intent was found (context_pattern:<name>, keywords, context, none)
    """

    query_type: QueryType = QueryType.UNKNOWN
    action_type: ActionType = ActionType.UNKNOWN
    confidence: float = 0.0
    contract_number: str | None = None
    part_number: str | None = None
    user_name: str | None = None
    customer_name: str | None = None
    account_number: str | None = None
    status_type: str | None = None
    entities: dict[str, list[str]] = field(default_factory=dict)
    matched_keywords: list[str] = field(default_factory=list)
    source: str = "none"

    @classmethod
    def unknown(cls) -> "ParsedQuery":
        """Sentinel for empty or unclassifiable input."""
        return cls()

    @property
    def classification(self) -> IntentClassification:
        return IntentClassification(self.query_type, self.confidence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query_type": self.query_type.value,
            "action_type": self.action_type.value,
            "confidence": round(self.confidence, 4),
            "contract_number": self.contract_number,
            "part_number": self.part_number,
            "user_name": self.user_name,
            "customer_name": self.customer_name,
            "account_number": self.account_number,
            "status_type": self.status_type,
            "entities": {key: list(values) for key, values in self.entities.items()},
            "matched_keywords": list(self.matched_keywords),
            "source": self.source,
        }


__all__ = [
    "ActionType",
    "IntentClassification",
    "ParsedQuery",
    "QueryType",
]
