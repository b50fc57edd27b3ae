"""
Integration tests for health, root and middleware behaviour.
"""


def test_health_reports_record_count(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == {"connected": True, "recordCount": 6}
    assert body["uptime"] >= 0
    assert "timestamp" in body
    assert "version" in body


def test_health_unhealthy_when_database_fails(failing_client, connection_error):
    client = failing_client(connection_error)

    response = client.get("/api/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "unhealthy"
    assert body["database"]["connected"] is False
    assert body["database"]["error"] == "Database connection error during product search"
    assert "recordCount" not in body["database"]


def test_health_is_not_rate_limited(client, rate_limiter):
    rate_limiter.max_requests = 1

    statuses = {client.get("/api/health").status_code for _ in range(3)}

    assert statuses == {200}


def test_root_lists_endpoints(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["search"] == "/api/products/search"


def test_responses_carry_timing_and_request_id(client):
    response = client.get("/api/companies", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


def test_unknown_route_is_404(client):
    response = client.get("/api/unknown")

    assert response.status_code == 404
