"""Collaborators consumed around the tax engine."""

from .catalog import recommend_catalog
from .classifier import classify_product, describe_image
from .rates import close_rates_session, get_dolar_observado

__all__ = [
    "recommend_catalog",
    "classify_product",
    "describe_image",
    "get_dolar_observado",
    "close_rates_session",
]
