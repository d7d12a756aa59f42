"""Ordered collection of user notices emitted while computing an estimate."""

from __future__ import annotations

from typing import List, Tuple

from bot_impo.models import AdditionalDocument, Alert, AlertKind

DISCLAIMER = "Este es un cálculo estimado y no reemplaza una liquidación aduanera formal."
CUSTOMS_RISK_NOTICE = (
    "La falta de certificaciones requeridas puede resultar en multas o el rechazo de la mercancía."
)
THEORETICAL_INSURANCE_NOTICE = "Seguro teórico (2% de FOB+Flete) aplicado por no ser proporcionado."
TRADE_AGREEMENT_NOTICE = "Se aplicó arancel 0% por TLC. Requiere certificado de origen válido."
VAT_BASE_NOTICE = (
    "Importante: Según la normativa, el IVA se calcula sobre la base que incluye "
    "los impuestos especiales."
)


class AlertLog:
    """Append-only alert list; the disclaimer is always the first entry."""

    def __init__(self) -> None:
        self._alerts: List[Alert] = [Alert(AlertKind.GENERAL_NOTICE, DISCLAIMER)]

    def add(self, kind: AlertKind, message: str) -> None:
        self._alerts.append(Alert(kind, message))

    def add_documents(self, documents: List[AdditionalDocument]) -> None:
        if not documents:
            return
        for doc in documents:
            self.add(
                AlertKind.REGULATED_GOODS,
                f"Este producto podría requerir {doc.document} del organismo {doc.organism}.",
            )
        self.add(AlertKind.CUSTOMS_RISK, CUSTOMS_RISK_NOTICE)

    def freeze(self) -> Tuple[Alert, ...]:
        return tuple(self._alerts)

    def __len__(self) -> int:
        return len(self._alerts)


__all__ = [
    "AlertLog",
    "DISCLAIMER",
    "CUSTOMS_RISK_NOTICE",
    "THEORETICAL_INSURANCE_NOTICE",
    "TRADE_AGREEMENT_NOTICE",
    "VAT_BASE_NOTICE",
]
