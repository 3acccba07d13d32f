from fastapi.testclient import TestClient

from msa_lending.main import app

client = TestClient(app)


def test_health_returns_200():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["pipeline"]["status"] in ("not_started", "running", "ready", "failed")


def test_unknown_route_404():
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
