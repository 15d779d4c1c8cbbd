"""
Comprehensive error handling and edge case tests.

This test suite covers the common error envelope and identity checks:
- Missing, malformed and unknown X-User-Id headers (401)
- Wrong role for an endpoint (403)
- Request validation failures (400)
- Unknown routes and unexpected exceptions
- ServiceError serialization helpers
"""

import uuid
from decimal import Decimal

from fastapi.testclient import TestClient

from main import app
from api.dependencies import get_llm
from api.middleware import make_serializable, _first_message
from app.exceptions import (
    ConflictError,
    NotFoundError,
    ServiceError,
    ServiceValidationError,
)
from test_fixtures import client, auth, register


def assert_envelope(resp, status_code: int, code: str):
    assert resp.status_code == status_code
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == code
    assert body["error"]["message"]
    assert "timestamp" in body
    return body["error"]


# =============================================================================
# IDENTITY
# =============================================================================


def test_missing_identity_header():
    error = assert_envelope(client.get("/users/me"), 401, "UNAUTHORIZED")
    assert error["message"] == "Missing X-User-Id header"


def test_malformed_identity_header():
    resp = client.get("/users/me", headers={"X-User-Id": "not-a-uuid"})
    error = assert_envelope(resp, 401, "UNAUTHORIZED")
    assert error["message"] == "Invalid X-User-Id header"


def test_unknown_identity():
    resp = client.get("/users/me", headers={"X-User-Id": str(uuid.uuid4())})
    error = assert_envelope(resp, 401, "UNAUTHORIZED")
    assert error["message"] == "Unknown user"


def test_wrong_role():
    client_user = register("client")
    specialist = register("specialist")

    error = assert_envelope(client.get("/dishes", headers=auth(client_user)), 403, "FORBIDDEN")
    assert error["message"] == "Specialist role required"

    error = assert_envelope(
        client.get("/assignments/mine", headers=auth(specialist)), 403, "FORBIDDEN"
    )
    assert error["message"] == "Client role required"


# =============================================================================
# VALIDATION
# =============================================================================


def test_validation_error_envelope():
    specialist = register("specialist")
    resp = client.post("/dishes", json={"category": "brunch"}, headers=auth(specialist))

    error = assert_envelope(resp, 400, "VALIDATION_ERROR")
    fields = {tuple(e["loc"]) for e in error["details"]["errors"]}
    assert ("body", "title") in fields
    assert ("body", "category") in fields


def test_malformed_path_id():
    specialist = register("specialist")
    resp = client.get("/dishes/not-a-uuid", headers=auth(specialist))
    assert_envelope(resp, 400, "VALIDATION_ERROR")


def test_invalid_json_body():
    resp = client.post(
        "/users", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert_envelope(resp, 400, "VALIDATION_ERROR")


def test_first_message_formatting():
    assert _first_message([]) == "Request validation failed"
    assert _first_message([{"msg": "Value error, title is required", "loc": ["body"]}]) == (
        "title is required"
    )
    assert _first_message([{"msg": "Field required", "loc": ["body", "menu_id"]}]) == (
        "menu_id: Field required"
    )


# =============================================================================
# ROUTING AND UNEXPECTED ERRORS
# =============================================================================


def test_unknown_route():
    assert_envelope(client.get("/no-such-route"), 404, "HTTP_404")


def test_health_check():
    resp = client.get("/health-check")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["service"] == "NutriCoach"


def test_unexpected_exception_is_hidden():
    def broken():
        raise RuntimeError("database password is hunter2")

    app.dependency_overrides[get_llm] = broken
    user = register("client")
    safe_client = TestClient(app, raise_server_exceptions=False)

    resp = safe_client.post("/ai/dish-draft", json={"title": "Soup"}, headers=auth(user))
    error = assert_envelope(resp, 500, "INTERNAL_SERVER_ERROR")
    assert error["message"] == "An unexpected error occurred"
    assert "hunter2" not in resp.text


def test_request_id_header():
    resp = client.get("/health-check")
    assert resp.headers["X-Request-ID"]


# =============================================================================
# SERVICE ERRORS
# =============================================================================


def test_service_error_defaults():
    err = NotFoundError()
    assert err.message == "Not found"
    assert err.code == "NOT_FOUND"
    assert err.http_status == 404
    assert err.to_dict() == {"code": "NOT_FOUND", "message": "Not found"}
    assert str(err) == "Not found"


def test_service_error_details_and_code():
    err = ServiceValidationError("bad menu", details={"dish_ids": ["a"]}, code="MENU_INVALID")
    assert err.to_dict() == {
        "code": "MENU_INVALID",
        "message": "bad menu",
        "details": {"dish_ids": ["a"]},
    }
    assert ConflictError().http_status == 409
    assert ServiceError().http_status == 500


def test_make_serializable():
    data = {"a": Decimal("1.5"), "b": [Decimal("2"), ValueError("boom")], "c": ("x",)}
    assert make_serializable(data) == {"a": 1.5, "b": [2.0, "boom"], "c": ["x"]}
