"""Static rule tables and the resolvers that query them."""

from .engine import (
    find_additional_documents,
    find_special_tax_rule,
    has_trade_agreement,
    top_suggestion,
)
from .loader import RuleTables, load_rule_tables

__all__ = [
    "RuleTables",
    "load_rule_tables",
    "find_additional_documents",
    "find_special_tax_rule",
    "has_trade_agreement",
    "top_suggestion",
]
