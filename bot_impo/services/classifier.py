"""Tariff classification through the Gemini ``generateContent`` REST API.

Calls are blocking (``requests``); bot handlers run them in a worker
thread. Every failure surfaces as :class:`ClassifierError` carrying a
message that can be shown to the user as-is.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ValidationError

from bot_impo.errors import ClassifierError
from bot_impo.models import ConfidenceLevel, TariffSuggestion
from bot_impo.settings import get_settings

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 3

INVALID_KEY_MESSAGE = "La clave API no es válida. Por favor, verifica la configuración."
MISSING_KEY_MESSAGE = "La clave API no está configurada. Por favor, verifica la configuración."
CLASSIFY_FAILED_MESSAGE = "No se pudo clasificar el producto desde el servicio de IA."
DESCRIBE_FAILED_MESSAGE = "No se pudo generar la descripción desde la imagen."

CLASSIFIER_INSTRUCTION = (
    "Eres un experto clasificador arancelario de la aduana de Chile. Tu única función es: "
    "1. Analizar la descripción del producto y/o la imagen proporcionada. Si hay una imagen, "
    "es la fuente principal de verdad; la descripción textual es contexto. "
    "2. Proponer de 1 a 3 códigos HS a 6 dígitos según el Arancel Aduanero Chileno, con un "
    "nivel de confianza ('Alto', 'Medio', 'Bajo'). "
    "3. Devolver tu respuesta exclusivamente en el formato JSON solicitado, sin texto "
    "introductorio ni markdown."
)

DESCRIBE_PROMPT = (
    "Eres un experto en clasificación arancelaria e identificación de mercancías. A partir de "
    "la imagen, describe brevemente el PRODUCTO que aparece. No inventes características que no "
    "se ven. El texto final debe ser simple, corto y útil para una calculadora de importación. "
    'Ejemplos: "zapatillas deportivas usadas", "taladro eléctrico portátil", "escopetas usadas".'
)

CLASSIFICATION_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "sugerencias": {
            "type": "ARRAY",
            "description": "Una lista de 1 a 3 sugerencias de códigos arancelarios.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "codigo": {
                        "type": "STRING",
                        "description": "El código HS de 6 dígitos. Ejemplo: '6402.99'",
                    },
                    "descripcion": {
                        "type": "STRING",
                        "description": "La descripción oficial del código HS en español.",
                    },
                    "nivel_confianza": {
                        "type": "STRING",
                        "enum": [level.value for level in ConfidenceLevel],
                    },
                },
                "required": ["codigo", "descripcion", "nivel_confianza"],
            },
        },
    },
    "required": ["sugerencias"],
}


class _Suggestion(BaseModel):
    codigo: str
    descripcion: str = ""
    nivel_confianza: Optional[str] = None


class _Classification(BaseModel):
    sugerencias: List[_Suggestion]


def _confidence(raw: Optional[str]) -> ConfidenceLevel:
    try:
        return ConfidenceLevel(raw)
    except ValueError:
        return ConfidenceLevel.LOW


def _image_part(image: bytes, mime_type: str) -> Dict[str, Any]:
    return {
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(image).decode("ascii"),
        }
    }


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _generate_content(
    parts: List[Dict[str, Any]],
    *,
    generation_config: Dict[str, Any],
    failure_message: str,
    system_instruction: str | None = None,
) -> str:
    """POST to Gemini and return the text of the first candidate."""
    settings = get_settings()
    if not settings.GEMINI_API_KEY:
        raise ClassifierError(MISSING_KEY_MESSAGE)

    body: Dict[str, Any] = {
        "contents": [{"parts": parts}],
        "generationConfig": generation_config,
    }
    if system_instruction:
        body["systemInstruction"] = {"parts": [{"text": system_instruction}]}

    url = f"{settings.GEMINI_URL}/{settings.GEMINI_MODEL}:generateContent"
    try:
        response = requests.post(
            url,
            params={"key": settings.GEMINI_API_KEY},
            headers={"content-type": "application/json"},
            json=body,
            timeout=settings.HTTP_TIMEOUT,
        )
    except requests.RequestException as exc:
        logger.error("Gemini call error (%s): %s", settings.GEMINI_MODEL, exc)
        raise ClassifierError(failure_message) from exc

    if response.status_code != 200:
        logger.error(
            "Gemini API error (%s): %s - %s",
            settings.GEMINI_MODEL,
            response.status_code,
            response.text[:200],
        )
        if "API key not valid" in response.text:
            raise ClassifierError(INVALID_KEY_MESSAGE)
        raise ClassifierError(failure_message)

    try:
        data = response.json()
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        logger.error("Unexpected Gemini payload: %s", exc)
        raise ClassifierError(failure_message) from exc
    return _strip_fences(text)


def parse_suggestions(text: str) -> List[TariffSuggestion]:
    """Turn the model's JSON answer into at most three suggestions."""
    try:
        parsed = json.loads(text)
    except ValueError as exc:
        logger.error("Classifier answered invalid JSON: %s", text[:200])
        raise ClassifierError(CLASSIFY_FAILED_MESSAGE) from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("sugerencias"), list):
        logger.warning("Classifier answer lacks suggestions: %s", parsed)
        return []
    try:
        payload = _Classification.model_validate(parsed)
    except ValidationError as exc:
        logger.error("Malformed classifier suggestions: %s", exc)
        raise ClassifierError(CLASSIFY_FAILED_MESSAGE) from exc

    return [
        TariffSuggestion(
            code=s.codigo.strip(),
            description=s.descripcion.strip(),
            confidence=_confidence(s.nivel_confianza),
        )
        for s in payload.sugerencias[:MAX_SUGGESTIONS]
    ]


def classify_product(
    description: str,
    image: bytes | None = None,
    mime_type: str = "image/jpeg",
) -> List[TariffSuggestion]:
    """Return 0-3 tariff code suggestions ordered by descending confidence."""
    parts: List[Dict[str, Any]] = []
    prompt = f'Analiza la siguiente descripción de producto para importación a Chile: "{description}"'
    if image:
        parts.append(_image_part(image, mime_type))
        prompt = (
            "Analiza el producto en la imagen para importación a Chile. La descripción "
            f'proporcionada por el usuario es: "{description}". Prioriza la evidencia de la imagen.'
        )
    parts.append({"text": prompt})

    text = _generate_content(
        parts,
        system_instruction=CLASSIFIER_INSTRUCTION,
        generation_config={
            "temperature": 0.2,
            "responseMimeType": "application/json",
            "responseSchema": CLASSIFICATION_SCHEMA,
        },
        failure_message=CLASSIFY_FAILED_MESSAGE,
    )
    suggestions = parse_suggestions(text)
    logger.info("Classified %r as %s", description, [s.code for s in suggestions])
    return suggestions


def describe_image(image: bytes, mime_type: str = "image/jpeg") -> str:
    """Short Spanish product description generated from a photo."""
    text = _generate_content(
        [{"text": DESCRIBE_PROMPT}, _image_part(image, mime_type)],
        generation_config={"temperature": 0.1},
        failure_message=DESCRIBE_FAILED_MESSAGE,
    )
    if not text:
        raise ClassifierError(DESCRIBE_FAILED_MESSAGE)
    return text


__all__ = [
    "MAX_SUGGESTIONS",
    "classify_product",
    "describe_image",
    "parse_suggestions",
]
