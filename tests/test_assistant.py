"""Tests for the AI assistant. requests.post is always patched."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from mortgage_crm.errors import IntegrationFailure
from mortgage_crm.services import assistant_service, note_service


@pytest.fixture
def gemini_configured(app):
    app.config["GEMINI_API_KEY"] = "test-gemini-key"
    yield
    app.config["GEMINI_API_KEY"] = None


def _gemini_response(text):
    resp = MagicMock()
    resp.raise_for_status.return_value = None
    resp.json.return_value = {
        "candidates": [{"content": {"parts": [{"text": text}]}}]
    }
    return resp


class TestAssistantService:

    def test_not_configured(self, db_session):
        with pytest.raises(IntegrationFailure) as exc:
            assistant_service.ask("What documents does a refinance need?")
        assert exc.value.status_code == 503
        assert exc.value.configured is False

    def test_reply(self, db_session, gemini_configured):
        with patch(
            "mortgage_crm.services.assistant_service.requests.post",
            return_value=_gemini_response("Send the NOA and pay stubs."),
        ) as mock_post:
            reply = assistant_service.ask("What should I chase next?")

        assert reply == "Send the NOA and pay stubs."
        args, kwargs = mock_post.call_args
        assert args[0].endswith("/models/gemini-1.5-flash-latest:generateContent")
        assert kwargs["params"] == {"key": "test-gemini-key"}
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "What should I chase next?"

    def test_lead_context_included(self, make_lead, gemini_configured):
        lead = make_lead(monthly_income=9000)
        note_service.create_note(lead.id, "Prefers email contact")

        with patch(
            "mortgage_crm.services.assistant_service.requests.post",
            return_value=_gemini_response("ok"),
        ) as mock_post:
            assistant_service.ask("Summarize this lead", lead_id=lead.id)

        context = mock_post.call_args.kwargs["json"]["systemInstruction"]["parts"][0]["text"]
        assert "Jane Doe" in context
        assert "monthly_income: 9000" in context
        assert "Prefers email contact" in context

    def test_provider_error(self, db_session, gemini_configured):
        with patch(
            "mortgage_crm.services.assistant_service.requests.post",
            side_effect=requests.ConnectionError("down"),
        ):
            with pytest.raises(IntegrationFailure) as exc:
                assistant_service.ask("Hello?")
        assert exc.value.status_code == 502

    def test_empty_reply(self, db_session, gemini_configured):
        resp = MagicMock()
        resp.raise_for_status.return_value = None
        resp.json.return_value = {"candidates": []}
        with patch("mortgage_crm.services.assistant_service.requests.post", return_value=resp):
            with pytest.raises(IntegrationFailure):
                assistant_service.ask("Hello?")


class TestAssistantAPI:

    def test_not_configured_returns_503(self, client, api_headers):
        resp = client.post("/api/assistant", json={"prompt": "Hi"}, headers=api_headers)
        assert resp.status_code == 503
        assert "GEMINI_API_KEY" in resp.get_json()["error"]

    def test_empty_prompt(self, client, api_headers):
        resp = client.post("/api/assistant", json={"prompt": ""}, headers=api_headers)
        assert resp.status_code == 400

    def test_reply(self, client, api_headers, gemini_configured):
        with patch(
            "mortgage_crm.services.assistant_service.requests.post",
            return_value=_gemini_response("Hello!"),
        ):
            resp = client.post("/api/assistant", json={"prompt": "Hi"}, headers=api_headers)
        assert resp.status_code == 200
        assert resp.get_json() == {"reply": "Hello!"}
