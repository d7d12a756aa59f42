import base64
import json

import pytest
import requests

from bot_impo.errors import ClassifierError
from bot_impo.models import ConfidenceLevel
from bot_impo.services import classifier
from bot_impo.settings import Settings


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload or {})

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


def gemini_answer(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def api(monkeypatch):
    """Patch settings and ``requests.post``; returns the list of captured calls."""
    calls = []
    replies = []

    monkeypatch.setattr(
        classifier, "get_settings", lambda: Settings(GEMINI_API_KEY="test-key", _env_file=None)
    )

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        reply = replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(classifier.requests, "post", fake_post)
    return calls, replies


def test_classify_product_parses_suggestions(api):
    calls, replies = api
    suggestions = {
        "sugerencias": [
            {"codigo": "6402.99", "descripcion": "Calzado", "nivel_confianza": "Alto"},
            {"codigo": "6404.11", "descripcion": "Calzado deportivo", "nivel_confianza": "Medio"},
            {"codigo": "6405.90", "descripcion": "Los demás", "nivel_confianza": "raro"},
            {"codigo": "6403.99", "descripcion": "Cuero", "nivel_confianza": "Bajo"},
        ]
    }
    replies.append(FakeResponse(payload=gemini_answer(json.dumps(suggestions))))

    result = classifier.classify_product("zapatillas deportivas")

    assert [s.code for s in result] == ["6402.99", "6404.11", "6405.90"]
    assert [s.confidence for s in result] == [
        ConfidenceLevel.HIGH,
        ConfidenceLevel.MEDIUM,
        ConfidenceLevel.LOW,
    ]
    url, kwargs = calls[0]
    assert url.endswith("/gemini-2.5-flash:generateContent")
    assert kwargs["params"] == {"key": "test-key"}
    body = kwargs["json"]
    assert body["generationConfig"]["temperature"] == 0.2
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert "systemInstruction" in body
    assert "zapatillas deportivas" in body["contents"][0]["parts"][0]["text"]


def test_classify_product_sends_image_first(api):
    calls, replies = api
    replies.append(FakeResponse(payload=gemini_answer('{"sugerencias": []}')))

    assert classifier.classify_product("taladro", image=b"\x89PNG", mime_type="image/png") == []

    parts = calls[0][1]["json"]["contents"][0]["parts"]
    assert parts[0]["inlineData"]["mimeType"] == "image/png"
    assert base64.b64decode(parts[0]["inlineData"]["data"]) == b"\x89PNG"
    assert "Prioriza la evidencia de la imagen" in parts[1]["text"]


def test_missing_suggestions_key_returns_empty(api):
    _, replies = api
    replies.append(FakeResponse(payload=gemini_answer('{"resultado": "nada"}')))
    assert classifier.classify_product("algo") == []


def test_fenced_json_is_accepted(api):
    _, replies = api
    text = '```json\n{"sugerencias": [{"codigo": "8517.12", "descripcion": "Teléfonos"}]}\n```'
    replies.append(FakeResponse(payload=gemini_answer(text)))
    result = classifier.classify_product("celular")
    assert result[0].code == "8517.12"
    assert result[0].confidence is ConfidenceLevel.LOW


def test_invalid_json_fails(api):
    _, replies = api
    replies.append(FakeResponse(payload=gemini_answer("no es json")))
    with pytest.raises(ClassifierError) as exc:
        classifier.classify_product("algo")
    assert exc.value.user_message == classifier.CLASSIFY_FAILED_MESSAGE


def test_invalid_api_key_has_own_message(api):
    _, replies = api
    replies.append(
        FakeResponse(status_code=400, text='{"error": {"message": "API key not valid. Please pass a valid API key."}}')
    )
    with pytest.raises(ClassifierError) as exc:
        classifier.classify_product("algo")
    assert exc.value.user_message == classifier.INVALID_KEY_MESSAGE


def test_server_error_fails(api):
    _, replies = api
    replies.append(FakeResponse(status_code=500, text="internal"))
    with pytest.raises(ClassifierError) as exc:
        classifier.classify_product("algo")
    assert exc.value.user_message == classifier.CLASSIFY_FAILED_MESSAGE


def test_transport_error_fails(api):
    _, replies = api
    replies.append(requests.ConnectionError("down"))
    with pytest.raises(ClassifierError):
        classifier.classify_product("algo")


def test_unexpected_envelope_fails(api):
    _, replies = api
    replies.append(FakeResponse(payload={"candidates": []}))
    with pytest.raises(ClassifierError):
        classifier.classify_product("algo")


def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(classifier, "get_settings", lambda: Settings(GEMINI_API_KEY="", _env_file=None))

    def fail_post(*args, **kwargs):
        raise AssertionError("no request expected")

    monkeypatch.setattr(classifier.requests, "post", fail_post)
    with pytest.raises(ClassifierError) as exc:
        classifier.classify_product("algo")
    assert exc.value.user_message == classifier.MISSING_KEY_MESSAGE


def test_describe_image(api):
    calls, replies = api
    replies.append(FakeResponse(payload=gemini_answer("  zapatillas deportivas usadas \n")))

    assert classifier.describe_image(b"jpeg-bytes") == "zapatillas deportivas usadas"

    body = calls[0][1]["json"]
    assert body["generationConfig"] == {"temperature": 0.1}
    assert body["contents"][0]["parts"][1]["inlineData"]["mimeType"] == "image/jpeg"


def test_describe_image_empty_answer(api):
    _, replies = api
    replies.append(FakeResponse(payload=gemini_answer("   ")))
    with pytest.raises(ClassifierError) as exc:
        classifier.describe_image(b"jpeg-bytes")
    assert exc.value.user_message == classifier.DESCRIBE_FAILED_MESSAGE


def test_parse_suggestions_rejects_malformed_items():
    with pytest.raises(ClassifierError):
        classifier.parse_suggestions('{"sugerencias": [{"descripcion": "sin código"}]}')
