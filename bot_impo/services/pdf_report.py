"""PDF report of a calculation (fpdf2, latin-1 core fonts).

Spanish text fits in latin-1; anything outside it (emoji, symbols) is
dropped instead of crashing the request flow.
"""

from __future__ import annotations

import unicodedata
from typing import Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from bot_impo.constants import (
    PDF_CALC_TITLE,
    PDF_FIELD_CONDITION,
    PDF_FIELD_COUNTRY,
    PDF_FIELD_DESCRIPTION,
    PDF_FIELD_HS,
    PDF_PAGE_LABEL,
    PDF_SECTION_AGENT,
    PDF_SECTION_ALERTS,
    PDF_SECTION_DOCUMENTS,
    PDF_SECTION_SUMMARY,
)
from bot_impo.models import CalculationResult, ShipmentInput, TariffSuggestion
from bot_impo.utils.formatting import breakdown_rows

FONT = "Helvetica"


def _sanitize(text: object) -> str:
    """Remove characters unsupported by the latin-1 core fonts."""
    if not isinstance(text, str):
        text = str(text)
    normalized = unicodedata.normalize("NFKC", text)
    out: list[str] = []
    for ch in normalized:
        if ord(ch) > 0xFF:
            continue
        if unicodedata.category(ch).startswith("C"):
            continue
        out.append(ch)
    return "".join(out)


class PDFReport(FPDF):
    """FPDF subclass with a centred title header and page footer."""

    def header(self):
        self.set_font(FONT, "B", 14)
        self.cell(0, 10, _sanitize(self.title or ""), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(5)

    def footer(self):
        self.set_y(-15)
        self.set_font(FONT, "", 8)
        self.cell(0, 10, _sanitize(PDF_PAGE_LABEL.format(page=self.page_no())), align="C")

    def line_text(self, text: str, height: float = 7) -> None:
        self.multi_cell(0, height, _sanitize(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def section(self, title: str) -> None:
        self.ln(3)
        self.set_font(FONT, "B", 12)
        self.cell(0, 9, _sanitize(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font(FONT, "", 10)


def generate_calculation_pdf(
    result: CalculationResult,
    shipment: ShipmentInput,
    filename: str,
    suggestions: Sequence[TariffSuggestion] = (),
) -> None:
    """Write the calculation breakdown, documents and alerts to ``filename``."""
    pdf = PDFReport()
    pdf.set_title(_sanitize(PDF_CALC_TITLE))
    pdf.add_page()

    pdf.set_font(FONT, "", 11)
    pdf.line_text(f"{PDF_FIELD_DESCRIPTION}: {shipment.description}")
    pdf.line_text(f"{PDF_FIELD_COUNTRY}: {shipment.country} ({result.trade_agreement})")
    pdf.line_text(f"{PDF_FIELD_CONDITION}: {'Usado' if shipment.is_used else 'Nuevo'}")
    if suggestions:
        top = suggestions[0]
        pdf.line_text(f"{PDF_FIELD_HS}: {top.code} - {top.description} ({top.confidence.value})")

    pdf.section(PDF_SECTION_SUMMARY)
    for label, amount in breakdown_rows(result, shipment):
        pdf.cell(100, 8, _sanitize(label), border=1)
        pdf.cell(0, 8, _sanitize(amount), border=1, align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    if result.documents:
        pdf.section(PDF_SECTION_DOCUMENTS)
        for doc in result.documents:
            pdf.line_text(f"- {doc.document} ({doc.organism}): {doc.reason}")

    rec = result.agent_recommendation
    pdf.section(f"{PDF_SECTION_AGENT}: {rec.requirement.value}")
    pdf.line_text(rec.message)

    pdf.section(PDF_SECTION_ALERTS)
    for alert in result.alerts:
        pdf.line_text(f"- {alert.kind.value}: {alert.message}")

    pdf.output(filename)


__all__ = ["PDFReport", "generate_calculation_pdf"]
