from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)

def test_404_not_found():
    response = client.get("/non-existent-route")
    assert response.status_code == 404
    data = response.json()
    assert "error" in data
    assert data["code"] == "HTTP_ERROR"

def test_invalid_event_payload(monkeypatch, users_collection, slack):
    from app.core.config import settings
    monkeypatch.setattr(settings, "VERIFY_SIGNATURES", False)

    response = client.post("/kretes/events", content="not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"

def test_custom_exception():
    from app.core.exceptions import ResourceNotFoundError

    @app.get("/test-custom-error")
    def trigger_custom_error():
        raise ResourceNotFoundError(message="Item not found")

    response = client.get("/test-custom-error")
    assert response.status_code == 404
    data = response.json()
    assert data["code"] == "NOT_FOUND"
    assert data["error"] == "Item not found"

def test_unhandled_exception_is_500():
    local_client = TestClient(app, raise_server_exceptions=False)

    @app.get("/test-unhandled-error")
    def trigger_unhandled_error():
        raise RuntimeError("boom")

    response = local_client.get("/test-unhandled-error")
    assert response.status_code == 500
    assert response.json()["code"] == "INTERNAL_ERROR"
