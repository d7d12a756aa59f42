"""Model helpers and enumerations."""

from .enums import (
    AgentRequirement,
    AlertKind,
    ConfidenceLevel,
    InsuranceMethod,
    TaxCategory,
)
from .types import (
    AdditionalDocument,
    AgentRecommendation,
    Alert,
    CalculationResult,
    Catalog,
    CertificationRule,
    ShipmentInput,
    SpecialTaxRule,
    TariffSuggestion,
)

__all__ = [
    "AgentRequirement",
    "AlertKind",
    "ConfidenceLevel",
    "InsuranceMethod",
    "TaxCategory",
    "AdditionalDocument",
    "AgentRecommendation",
    "Alert",
    "CalculationResult",
    "Catalog",
    "CertificationRule",
    "ShipmentInput",
    "SpecialTaxRule",
    "TariffSuggestion",
]
