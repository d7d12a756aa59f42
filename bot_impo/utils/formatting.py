from __future__ import annotations

from html import escape
from typing import List, Optional, Sequence, Tuple, Union

from tabulate import tabulate

from bot_impo.constants import (
    LABEL_CIF,
    LABEL_DUTY,
    LABEL_EXCHANGE_RATE,
    LABEL_FOB,
    LABEL_FREIGHT,
    LABEL_INSURANCE,
    LABEL_SPECIAL_TAX,
    LABEL_TOTAL_CLP,
    LABEL_TOTAL_TAXES,
    LABEL_TOTAL_USD,
    LABEL_VAT,
)
from bot_impo.models import (
    CalculationResult,
    Catalog,
    ShipmentInput,
    TariffSuggestion,
)
from bot_impo.tariff import format_percentage


def fmt_money(value: float, code: str = "USD") -> str:
    """Format with Chilean separators: ``1234.5`` -> ``1.234,50 USD``."""
    s = f"{float(value):,.2f}"
    s = s.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{s} {code}"


def fmt_clp(value: float) -> str:
    s = f"{round(float(value)):,}".replace(",", ".")
    return f"$ {s} CLP"


def fmt_special_rate(rate: Union[float, str]) -> str:
    if isinstance(rate, str):
        return rate
    return format_percentage(rate / 100)


def breakdown_rows(result: CalculationResult, shipment: ShipmentInput) -> List[Tuple[str, str]]:
    """Label/amount pairs shared by the chat message and the PDF report."""
    return [
        (LABEL_FOB, fmt_money(shipment.fob_value)),
        (LABEL_FREIGHT, fmt_money(shipment.freight)),
        (LABEL_INSURANCE.format(method=result.insurance_method.value), fmt_money(result.insurance)),
        (LABEL_CIF, fmt_money(result.cif)),
        (LABEL_DUTY.format(rate=result.duty_rate_display), fmt_money(result.total_duty)),
        (
            LABEL_SPECIAL_TAX.format(rate=fmt_special_rate(result.special_tax_rate)),
            fmt_money(result.special_tax),
        ),
        (LABEL_VAT, fmt_money(result.vat)),
        (LABEL_TOTAL_TAXES, fmt_money(result.total_taxes)),
        (LABEL_TOTAL_USD, fmt_money(result.total_usd)),
        (LABEL_EXCHANGE_RATE, fmt_money(result.exchange_rate, "CLP")),
        (LABEL_TOTAL_CLP, fmt_clp(result.total_clp)),
    ]


def format_breakdown_table(result: CalculationResult, shipment: ShipmentInput) -> str:
    return tabulate(breakdown_rows(result, shipment), tablefmt="simple", colalign=("left", "right"))


def format_result_message(
    *,
    result: CalculationResult,
    shipment: ShipmentInput,
    suggestions: Sequence[TariffSuggestion],
    catalog: Optional[Catalog] = None,
) -> str:
    """Build the HTML answer sent to the user after a calculation."""
    lines: list[str] = ["\U0001F4CA <b>Resultado de la estimación</b>\n"]

    lines.append(f"\U0001F4E6 Producto: {escape(shipment.description)}")
    if suggestions:
        lines.append("\U0001F50D Códigos HS sugeridos:")
        for s in suggestions:
            lines.append(
                f"  • <code>{escape(s.code)}</code> {escape(s.description)} "
                f"(confianza: {s.confidence.value})"
            )
    else:
        lines.append("\U0001F50D No se obtuvieron códigos HS sugeridos.")
    lines.append(f"\U0001F310 TLC: {escape(result.trade_agreement)}")
    lines.append(f"\U0001F4C4 Arancel aplicado: {result.duty_rate_display}")
    lines.append(f"\U0001F6E1️ Seguro usado: {result.insurance_method.value}\n")

    lines.append(f"<pre>{escape(format_breakdown_table(result, shipment))}</pre>\n")

    if result.documents:
        lines.append("\U0001F4CB <b>Documentos adicionales</b>")
        for doc in result.documents:
            lines.append(f"  • {escape(doc.document)} ({escape(doc.organism)}): {escape(doc.reason)}")
        lines.append("")

    rec = result.agent_recommendation
    lines.append(f"\U0001F9D1‍⚖️ <b>Agente de Aduanas: {rec.requirement.value}</b>")
    lines.append(escape(rec.message) + "\n")

    lines.append("⚠️ <b>Alertas</b>")
    for alert in result.alerts:
        lines.append(f"  • <i>{escape(alert.kind.value)}</i>: {escape(alert.message)}")

    if catalog is not None:
        lines.append(
            f"\n\U0001F6CD️ {escape(catalog.name)} ({fmt_clp(catalog.price)}): {escape(catalog.url)}"
        )

    return "\n".join(lines)


__all__ = [
    "fmt_money",
    "fmt_clp",
    "fmt_special_rate",
    "breakdown_rows",
    "format_breakdown_table",
    "format_result_message",
]
