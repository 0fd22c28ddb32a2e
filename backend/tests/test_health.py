# backend/tests/test_health.py
from fastapi.testclient import TestClient
from contact_relay.main import app

client = TestClient(app)


def test_health():
    """Health endpoint always reports healthy."""
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_health_ignores_rate_limit(transport):
    for _ in range(101):
        client.post("/send-email", json={"name": "", "email": "nope", "message": ""})

    assert client.post("/send-email", json={}).status_code == 429
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}
    assert transport.sent == []
