# bot_impo/rules/engine.py
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from bot_impo.models import (
    AdditionalDocument,
    CertificationRule,
    SpecialTaxRule,
    TariffSuggestion,
)

# Only the most confident suggestion drives rule lookups.


def top_suggestion(suggestions: Sequence[TariffSuggestion] | None) -> Optional[TariffSuggestion]:
    if not suggestions:
        return None
    return suggestions[0]


def find_special_tax_rule(
    rules: Iterable[SpecialTaxRule],
    suggestions: Sequence[TariffSuggestion] | None,
) -> Optional[SpecialTaxRule]:
    """Return the first rule whose prefix matches the top tariff code."""
    top = top_suggestion(suggestions)
    if top is None:
        return None
    for rule in rules:
        if rule.matches(top.code):
            return rule
    return None


def find_additional_documents(
    rules: Iterable[CertificationRule],
    suggestions: Sequence[TariffSuggestion] | None,
) -> List[AdditionalDocument]:
    """Collect every certification keyed to the top code's chapter.

    Several regulators may cover one chapter (e.g. SEC and SUBTEL for 85),
    so all matches are returned in table order.
    """
    top = top_suggestion(suggestions)
    if top is None:
        return []
    chapter = top.chapter
    return [
        AdditionalDocument(
            organism=rule.organism,
            document=rule.document,
            reason=rule.description,
        )
        for rule in rules
        if chapter in rule.tariff_chapters
    ]


def has_trade_agreement(countries: Iterable[str], country: str) -> bool:
    return country in set(countries)


__all__ = [
    "top_suggestion",
    "find_special_tax_rule",
    "find_additional_documents",
    "has_trade_agreement",
]
