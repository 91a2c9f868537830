import pytest
from fastapi.testclient import TestClient

import server
from agents.field_assistant import FieldAssistant, TEMPERATURE_RESPONSE


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(server, "assistant", FieldAssistant(api_key=""))
    return TestClient(server.app)


def test_chatbot_returns_fallback_reply(client):
    response = client.post("/chatbot", json={"message": "temperature check", "user_id": "user-1"})
    assert response.status_code == 200
    assert response.json() == {"response": TEMPERATURE_RESPONSE}


@pytest.mark.parametrize("body", [{"message": "hi"}, {"user_id": "user-1"}, {"message": "", "user_id": "user-1"}])
def test_chatbot_rejects_missing_fields(client, body):
    response = client.post("/chatbot", json=body)
    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
