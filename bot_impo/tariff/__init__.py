"""Tariff calculation utilities."""

from .engine import (
    calculate_taxes,
    format_percentage,
    recommend_agent,
    theoretical_insurance,
)
from .alerts import AlertLog

__all__ = [
    "AlertLog",
    "calculate_taxes",
    "format_percentage",
    "recommend_agent",
    "theoretical_insurance",
]
