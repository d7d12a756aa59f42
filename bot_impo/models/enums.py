from __future__ import annotations

from enum import Enum


class ConfidenceLevel(str, Enum):
    HIGH = "Alto"
    MEDIUM = "Medio"
    LOW = "Bajo"


class TaxCategory(str, Enum):
    ALCOHOLIC_BEVERAGES = "Bebidas alcohólicas"
    DISTILLED_SPIRITS = "Licores destilados"
    LUXURY_GOODS = "Artículos de lujo"
    TOBACCO = "Tabaco"
    VEHICLES = "Vehículos"
    SOFT_DRINKS = "Bebidas no alcohólicas"
    FIREWORKS = "Pirotecnia"


class AlertKind(str, Enum):
    GENERAL_NOTICE = "Aviso General"
    REGULATED_GOODS = "Mercancía Regulada"
    CUSTOMS_RISK = "Riesgo Aduanero"
    INSURANCE = "Cálculo de Seguro"
    TRADE_AGREEMENT = "TLC Aplicado"
    USED_GOODS = "Producto Usado"
    SPECIAL_TAX = "Impuesto Especial"


class InsuranceMethod(str, Enum):
    DECLARED = "declarado"
    THEORETICAL = "teórico 2%"


class AgentRequirement(str, Enum):
    MANDATORY = "sí"
    RECOMMENDED = "recomendable"
    OPTIONAL = "no"


__all__ = [
    "ConfidenceLevel",
    "TaxCategory",
    "AlertKind",
    "InsuranceMethod",
    "AgentRequirement",
]
