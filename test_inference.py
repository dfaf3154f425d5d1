"""Tests for the Gemini inference client (no network)."""
import base64

import pytest
import requests

from plant_report import inference
from plant_report.exceptions import InferenceAuthenticationError, InferenceError
from plant_report.inference import GeminiAnalyzer


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def analyzer():
    return GeminiAnalyzer(api_key="test-key", model="gemini-test")


def patch_post(monkeypatch, response=None, error=None):
    calls = []

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(inference.requests, "post", fake_post)
    return calls


def test_missing_api_key_is_rejected(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(ValueError):
        GeminiAnalyzer()


def test_analyze_sends_prompt_and_inline_image(monkeypatch, analyzer):
    payload = {"candidates": [{"content": {"parts": [{"text": "Species: Ficus lyrata."}, {"text": " Healthy."}]}}]}
    calls = patch_post(monkeypatch, FakeResponse(payload=payload))

    text = analyzer.analyze(b"\xff\xd8jpeg", "image/jpeg")

    assert text == "Species: Ficus lyrata. Healthy."
    url, kwargs = calls[0]
    assert url.endswith("/models/gemini-test:generateContent")
    assert kwargs["params"] == {"key": "test-key"}
    parts = kwargs["json"]["contents"][0]["parts"]
    assert parts[0]["text"] == analyzer.prompt
    assert parts[1]["inline_data"]["mime_type"] == "image/jpeg"
    assert base64.b64decode(parts[1]["inline_data"]["data"]) == b"\xff\xd8jpeg"


def test_auth_failure(monkeypatch, analyzer):
    patch_post(monkeypatch, FakeResponse(status_code=403, payload={"error": {"message": "denied"}}))
    with pytest.raises(InferenceAuthenticationError):
        analyzer.analyze(b"img", "image/png")


def test_api_error_keeps_status_code(monkeypatch, analyzer):
    patch_post(monkeypatch, FakeResponse(status_code=500, payload={"error": {"message": "backend unavailable"}}))

    with pytest.raises(InferenceError) as excinfo:
        analyzer.analyze(b"img", "image/png")

    assert excinfo.value.status_code == 500
    assert "backend unavailable" in str(excinfo.value)


def test_transport_error_is_wrapped(monkeypatch, analyzer):
    patch_post(monkeypatch, error=requests.ConnectionError("connection refused"))
    with pytest.raises(InferenceError):
        analyzer.analyze(b"img", "image/png")


def test_empty_answer_is_an_error(monkeypatch, analyzer):
    patch_post(monkeypatch, FakeResponse(payload={"candidates": []}))
    with pytest.raises(InferenceError):
        analyzer.analyze(b"img", "image/png")
