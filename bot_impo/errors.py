"""Domain exceptions raised by the estimator and its collaborators."""

from __future__ import annotations


class ImpoError(Exception):
    """Base class for all bot_impo errors.

    ``user_message`` is the Spanish text shown to the bot user.
    """

    default_message = "Ocurrió un error inesperado."

    def __init__(self, user_message: str | None = None):
        self.user_message = user_message or self.default_message
        super().__init__(self.user_message)


class RulesConfigError(ImpoError):
    """Static rule tables are malformed (misordered prefixes, bad fields)."""

    default_message = "Las tablas de reglas arancelarias son inválidas."


class ClassifierError(ImpoError):
    """Tariff classification service is unreachable or answered garbage."""

    default_message = "No se pudo clasificar el producto desde el servicio de IA."


class ExchangeRateError(ImpoError):
    """USD/CLP exchange rate could not be obtained."""

    default_message = (
        "No se pudo obtener el tipo de cambio del Banco Central de Chile. "
        "Inténtalo de nuevo."
    )


__all__ = ["ImpoError", "RulesConfigError", "ClassifierError", "ExchangeRateError"]
