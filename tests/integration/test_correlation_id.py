import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestCorrelationIdMiddleware:
    def test_api_response_echoes_request_id(self, api_client_with_correlation):
        client, cid = api_client_with_correlation
        response = client.get("/api/v1/products/")
        assert response.status_code == 200
        assert response["X-Request-ID"] == cid

    def test_error_responses_carry_request_id(self, api_client_with_correlation):
        client, cid = api_client_with_correlation
        response = client.get("/api/v1/orders/")
        assert response.status_code == 401
        assert response["X-Request-ID"] == cid

    def test_generates_uuid_when_no_request_id(self, api_client):
        response = api_client.get("/api/v1/categories/")
        request_id = response["X-Request-ID"]
        parsed = uuid.UUID(request_id, version=4)
        assert str(parsed) == request_id

    def test_each_request_gets_its_own_id(self, api_client):
        first = api_client.get("/health")["X-Request-ID"]
        second = api_client.get("/health")["X-Request-ID"]
        assert first != second

    def test_request_finished_logged_with_status(self, client, caplog):
        custom_id = "log-test-correlation-789"
        with caplog.at_level(logging.INFO):
            client.get("/api/v1/categories/", HTTP_X_REQUEST_ID=custom_id)
        messages = [record.getMessage() for record in caplog.records]
        finished = [m for m in messages if "request_finished" in m and custom_id in m]
        assert finished, f"request_finished not logged: {messages}"
        assert "200" in finished[0]
