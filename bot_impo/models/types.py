"""Immutable records exchanged between the bot, the collaborators and the core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .enums import (
    AgentRequirement,
    AlertKind,
    ConfidenceLevel,
    InsuranceMethod,
    TaxCategory,
)


@dataclass(frozen=True)
class ShipmentInput:
    """Shipment form data, monetary values in USD.

    ``declared_insurance`` is ``None`` when the user did not declare it;
    ``0`` is a valid declaration.
    """

    description: str
    country: str
    fob_value: float
    freight: float
    declared_insurance: Optional[float] = None
    is_used: bool = False


@dataclass(frozen=True)
class TariffSuggestion:
    code: str
    description: str
    confidence: ConfidenceLevel = ConfidenceLevel.LOW

    @property
    def chapter(self) -> str:
        return self.code[:2]


@dataclass(frozen=True)
class SpecialTaxRule:
    sub_category: str
    category: TaxCategory
    rate: float
    rate_label: str
    tariff_prefixes: Tuple[str, ...]
    warning: Optional[str] = None

    def matches(self, code: str) -> bool:
        return any(code.startswith(prefix) for prefix in self.tariff_prefixes)


@dataclass(frozen=True)
class CertificationRule:
    organism: str
    category: str
    document: str
    tariff_chapters: Tuple[str, ...]
    description: str


@dataclass(frozen=True)
class Catalog:
    name: str
    url: str
    price: int


@dataclass(frozen=True)
class AdditionalDocument:
    organism: str
    document: str
    reason: str


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    message: str


@dataclass(frozen=True)
class AgentRecommendation:
    requirement: AgentRequirement
    message: str


@dataclass(frozen=True)
class CalculationResult:
    trade_agreement: str
    duty_rate: float
    duty_rate_display: str
    insurance: float
    insurance_method: InsuranceMethod
    cif: float
    base_duty: float
    used_surcharge: float
    total_duty: float
    special_tax_base: float
    special_tax_rate: Union[float, str]
    special_tax: float
    vat_base: float
    vat: float
    total_taxes: float
    total_usd: float
    exchange_rate: float
    total_clp: float
    agent_recommendation: AgentRecommendation
    special_tax_rule: Optional[SpecialTaxRule] = None
    documents: Tuple[AdditionalDocument, ...] = field(default_factory=tuple)
    alerts: Tuple[Alert, ...] = field(default_factory=tuple)


__all__ = [
    "ShipmentInput",
    "TariffSuggestion",
    "SpecialTaxRule",
    "CertificationRule",
    "Catalog",
    "AdditionalDocument",
    "Alert",
    "AgentRecommendation",
    "CalculationResult",
]
