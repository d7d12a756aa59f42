from __future__ import annotations

from typing import Optional, Sequence

from bot_impo.models import Catalog, TariffSuggestion
from bot_impo.rules import RuleTables, load_rule_tables


def recommend_catalog(
    description: str,
    suggestions: Sequence[TariffSuggestion] | None,
    *,
    tables: RuleTables | None = None,
) -> Optional[Catalog]:
    """Return the first supplier catalog whose keyword appears in the product text."""
    tables = tables or load_rule_tables()
    top_description = suggestions[0].description if suggestions else ""
    text = f"{description} {top_description}".lower()
    for rule in tables.catalog_rules:
        if any(keyword in text for keyword in rule.keywords):
            return rule.catalog
    return None


__all__ = ["recommend_catalog"]
