"""
Tests for the health check endpoint.
"""


def test_health_check_returns_200(client):
    response = client.get("/health")
    assert response.status_code == 200


def test_health_check_returns_service_name(client):
    """
    Monitoring parses this field, so a rename is a breaking change.
    """
    response = client.get("/health")
    assert response.json()["service"] == "garment-pool"


def test_health_check_reports_database_status(client):
    data = client.get("/health").json()
    assert data["database"] == "healthy"
    assert data["status"] == "healthy"
