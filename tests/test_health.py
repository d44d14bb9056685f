from fastapi import status


def test_health_check(client):
    """Test the /health endpoint returns 200 and up status."""
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "up"
    assert "version" in data
    assert "timestamp" in data


def test_readiness_check(client):
    """Test the /readiness endpoint returns 200 and database status."""
    response = client.get("/readiness")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "ready"
    assert data["components"]["database"] == "connected"


def test_root_endpoint(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "Appraisal Manager API" in response.json()["message"]


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"


def test_json_log_records_carry_request_id():
    import json
    import logging
    from appraisal_manager.core.logging import CustomJsonFormatter, request_id_var

    formatter = CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)")
    record = logging.LogRecord("appraisal_manager.test", logging.INFO, __file__, 1, "hello", None, None)
    token = request_id_var.set("trace-456")
    try:
        payload = json.loads(formatter.format(record))
    finally:
        request_id_var.reset(token)

    assert payload["request_id"] == "trace-456"
    assert payload["level"] == "INFO"
    assert payload["service"] == "Appraisal Manager"
    assert payload["message"] == "hello"
