"""
Tests for health and readiness endpoints.

- /health: Liveness probe
- /ready: Readiness probe with a database check
"""
import sqlite3


def test_health_endpoint(client):
    """Test the /health liveness endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert data["timestamp"].endswith("Z")


def test_ready_endpoint(client):
    """Test the /ready readiness endpoint."""
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert "timestamp" in data

    database = data["dependencies"][0]
    assert database["name"] == "database"
    assert database["status"] == "ok"
    assert database["latency_ms"] >= 0


def test_ready_endpoint_database_down(client, temp_db, monkeypatch):
    """Readiness reports 503 when SQLite cannot be reached."""
    def broken_connection():
        raise sqlite3.OperationalError("unable to open database file")

    monkeypatch.setattr(temp_db, "get_connection", broken_connection)

    response = client.get("/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    assert data["dependencies"][0]["status"] == "unavailable"
    assert data["dependencies"][0]["message"] == "Connection failed: OperationalError"
