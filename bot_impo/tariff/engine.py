"""Duty and tax estimation engine for imports into Chile.

Pure functions only: callers resolve the exchange rate and the tariff
classification beforehand and pass plain values in. Amounts are USD
floats and are never rounded here; rounding is a display concern.

Pipeline order::

    insurance -> CIF -> ad valorem duty (+ used-goods surcharge)
      -> special tax on CIF + duty -> VAT on CIF + duty + special tax
      -> totals -> CLP conversion
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple, Union

from bot_impo.models import (
    AdditionalDocument,
    AgentRecommendation,
    AgentRequirement,
    AlertKind,
    CalculationResult,
    InsuranceMethod,
    ShipmentInput,
    SpecialTaxRule,
    TariffSuggestion,
)
from bot_impo.rules import (
    RuleTables,
    find_additional_documents,
    find_special_tax_rule,
    has_trade_agreement,
    load_rule_tables,
)
from .alerts import (
    AlertLog,
    THEORETICAL_INSURANCE_NOTICE,
    TRADE_AGREEMENT_NOTICE,
    VAT_BASE_NOTICE,
)

logger = logging.getLogger(__name__)

THEORETICAL_INSURANCE_RATE = 0.02
GENERAL_DUTY_RATE = 0.06
USED_SURCHARGE_FACTOR = 0.5
VAT_RATE = 0.19
AGENT_MANDATORY_FOB_USD = 1000

NO_AGREEMENT_LABEL = "Sin TLC aplicable"

AGENT_MANDATORY_MESSAGE = (
    "Según normativa de Aduanas Chile, para importaciones con valor FOB superior a "
    "US$ 1.000 es obligatorio contratar un Agente de Aduanas."
)
AGENT_RECOMMENDED_MESSAGE = (
    "Aunque el valor es bajo, al ser una mercancía regulada se recomienda contratar "
    "un Agente de Aduanas para facilitar el proceso de certificación."
)
AGENT_OPTIONAL_MESSAGE = (
    'No es obligatorio. Puede realizar el trámite mediante un "Despacho Simplificado" '
    "con empresas de envío rápido (couriers)."
)


def format_percentage(rate: float) -> str:
    """Render a fraction as a percentage: ``0.06`` -> ``6%``, ``0.045`` -> ``4.5%``."""
    percentage = round(rate * 100, 6)
    if percentage.is_integer():
        return f"{int(percentage)}%"
    return f"{percentage:.1f}%"


def _non_negative(value: Optional[float], name: str) -> Optional[float]:
    if value is None:
        return None
    if value < 0:
        logger.warning("%s is negative (%s); treating it as 0", name, value)
        return 0.0
    return float(value)


def _two_percent_insurance(fob_value: float, freight: float) -> float:
    return (fob_value + freight) * THEORETICAL_INSURANCE_RATE


# Public API ---------------------------------------------------------------


def theoretical_insurance(fob_value: float, freight: float) -> Optional[float]:
    """Insurance applied when none is declared, or ``None`` with nothing to insure."""
    if fob_value <= 0 and freight <= 0:
        return None
    return _two_percent_insurance(fob_value, freight)


def resolve_insurance(
    fob_value: float,
    freight: float,
    declared_insurance: Optional[float],
) -> Tuple[float, InsuranceMethod]:
    """Return the insurance amount and how it was obtained.

    A declared value of ``0`` is honoured as-is; only a missing declaration
    falls back to 2 % of FOB + freight.
    """
    if declared_insurance is not None:
        return declared_insurance, InsuranceMethod.DECLARED
    return _two_percent_insurance(fob_value, freight), InsuranceMethod.THEORETICAL


def calc_cif(fob_value: float, freight: float, insurance: float) -> float:
    return fob_value + freight + insurance


def resolve_duty_rate(country: str, agreement_countries: Iterable[str]) -> Tuple[float, str, bool]:
    """Return ``(duty_rate, display_label, agreement_applied)`` for the origin country."""
    if has_trade_agreement(agreement_countries, country):
        label = f"Sí, existe TLC ({country}-Chile). Arancel 0% con origen válido."
        return 0.0, label, True
    return GENERAL_DUTY_RATE, NO_AGREEMENT_LABEL, False


def calc_used_surcharge(base_duty: float, is_used: bool) -> float:
    """Used goods pay an extra 50 % of the ad valorem duty."""
    return base_duty * USED_SURCHARGE_FACTOR if is_used else 0.0


def special_tax_display_rate(rule: Optional[SpecialTaxRule]) -> Union[float, str]:
    if rule is None:
        return 0
    if rule.rate > 0:
        return round(rule.rate * 100, 6)
    return rule.rate_label


def calc_vat(vat_base: float) -> float:
    return vat_base * VAT_RATE


def recommend_agent(
    fob_value: float,
    documents: Sequence[AdditionalDocument],
) -> AgentRecommendation:
    """Decide whether a customs broker is mandatory, recommended or optional."""
    if fob_value > AGENT_MANDATORY_FOB_USD:
        return AgentRecommendation(AgentRequirement.MANDATORY, AGENT_MANDATORY_MESSAGE)
    if documents:
        return AgentRecommendation(AgentRequirement.RECOMMENDED, AGENT_RECOMMENDED_MESSAGE)
    return AgentRecommendation(AgentRequirement.OPTIONAL, AGENT_OPTIONAL_MESSAGE)


def calculate_taxes(
    shipment: ShipmentInput,
    exchange_rate: float,
    suggestions: Sequence[TariffSuggestion] | None,
    *,
    tables: RuleTables | None = None,
) -> CalculationResult:
    """Full duty/tax breakdown for one shipment.

    Parameters
    ----------
    shipment : ShipmentInput
        Form data in USD. Negative amounts are treated as 0.
    exchange_rate : float
        CLP per USD, already resolved by the caller.
    suggestions : sequence of TariffSuggestion
        Ranked classifier output; only the first entry is used for the
        special-tax and certification lookups.
    tables : RuleTables, optional
        Rule tables to evaluate against, defaults to the bundled ones.

    Returns
    -------
    CalculationResult
        Immutable breakdown including documents, alerts and the customs
        agent recommendation.
    """
    tables = tables or load_rule_tables()
    fob_value = _non_negative(shipment.fob_value, "FOB value") or 0.0
    freight = _non_negative(shipment.freight, "Freight") or 0.0
    declared = _non_negative(shipment.declared_insurance, "Declared insurance")

    alerts = AlertLog()

    documents = find_additional_documents(tables.certification_rules, suggestions)
    alerts.add_documents(documents)

    insurance, insurance_method = resolve_insurance(fob_value, freight, declared)
    if insurance_method is InsuranceMethod.THEORETICAL:
        alerts.add(AlertKind.INSURANCE, THEORETICAL_INSURANCE_NOTICE)
    cif = calc_cif(fob_value, freight, insurance)

    duty_rate, agreement_label, agreement_applied = resolve_duty_rate(
        shipment.country, tables.trade_agreement_countries
    )
    if agreement_applied:
        alerts.add(AlertKind.TRADE_AGREEMENT, TRADE_AGREEMENT_NOTICE)

    base_duty = cif * duty_rate
    used_surcharge = calc_used_surcharge(base_duty, shipment.is_used)
    if shipment.is_used:
        surcharge_rate = duty_rate * USED_SURCHARGE_FACTOR
        alerts.add(
            AlertKind.USED_GOODS,
            f"Se aplicó una sobretasa del 50% al arancel ({format_percentage(surcharge_rate)} "
            "del CIF) por ser producto usado.",
        )
    total_duty = base_duty + used_surcharge
    effective_rate = duty_rate + (duty_rate * USED_SURCHARGE_FACTOR if shipment.is_used else 0)

    rule = find_special_tax_rule(tables.special_tax_rules, suggestions)
    if rule is not None and rule.warning:
        alerts.add(AlertKind.SPECIAL_TAX, rule.warning)
    special_tax_base = cif + total_duty
    special_tax = special_tax_base * (rule.rate if rule is not None else 0.0)

    vat_base = cif + total_duty + special_tax
    if special_tax > 0:
        alerts.add(AlertKind.SPECIAL_TAX, VAT_BASE_NOTICE)
    vat = calc_vat(vat_base)

    total_taxes = total_duty + special_tax + vat
    total_usd = cif + total_taxes
    total_clp = total_usd * exchange_rate

    result = CalculationResult(
        trade_agreement=agreement_label,
        duty_rate=duty_rate,
        duty_rate_display=format_percentage(effective_rate),
        insurance=insurance,
        insurance_method=insurance_method,
        cif=cif,
        base_duty=base_duty,
        used_surcharge=used_surcharge,
        total_duty=total_duty,
        special_tax_base=special_tax_base,
        special_tax_rate=special_tax_display_rate(rule),
        special_tax=special_tax,
        vat_base=vat_base,
        vat=vat,
        total_taxes=total_taxes,
        total_usd=total_usd,
        exchange_rate=exchange_rate,
        total_clp=total_clp,
        special_tax_rule=rule,
        documents=tuple(documents),
        alerts=alerts.freeze(),
        agent_recommendation=recommend_agent(fob_value, documents),
    )
    logger.debug(
        "Estimate for %r from %s: CIF=%.2f taxes=%.2f total=%.2f USD",
        shipment.description,
        shipment.country,
        cif,
        total_taxes,
        total_usd,
    )
    return result


__all__ = [
    "THEORETICAL_INSURANCE_RATE",
    "GENERAL_DUTY_RATE",
    "USED_SURCHARGE_FACTOR",
    "VAT_RATE",
    "AGENT_MANDATORY_FOB_USD",
    "format_percentage",
    "theoretical_insurance",
    "resolve_insurance",
    "calc_cif",
    "resolve_duty_rate",
    "calc_used_surcharge",
    "special_tax_display_rate",
    "calc_vat",
    "recommend_agent",
    "calculate_taxes",
]
