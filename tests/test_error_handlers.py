import pytest
from fastapi.testclient import TestClient

from app.core.error_handlers import _field_path, error_body
from app.db.database import get_db
from main import app


@pytest.mark.parametrize(
    "loc, expected",
    [
        (("body", "email"), "email"),
        (("body", 0, "email"), "[0].email"),
        (("body", 2, "className"), "[2].className"),
        (("query", "page"), "page"),
        (("path", "student_id"), "student_id"),
        (("body",), "body"),
        ((), "body"),
    ],
)
def test_field_path(loc, expected):
    assert _field_path(loc) == expected


def test_error_body_omits_empty_details():
    body = error_body(404, "资源未找到", "x")
    assert set(body) == {"status", "error", "message", "timestamp"}

    body = error_body(400, "参数验证失败", "x", {"age": "bad"})
    assert body["details"] == {"age": "bad"}


def test_unknown_route_uses_error_envelope(client):
    r = client.get("/api/no-such-thing")
    assert r.status_code == 404
    body = r.json()
    assert body["status"] == 404
    assert body["error"] == "资源未找到"
    assert "timestamp" in body


def test_method_not_allowed_uses_error_envelope(client):
    r = client.patch("/api/students/count")
    assert r.status_code == 405
    assert r.json()["error"] == "请求方法不支持"


def test_non_integer_path_id_is_bad_request(client):
    r = client.get("/api/students/abc")
    assert r.status_code == 400
    assert "student_id" in r.json()["details"]


def test_unexpected_error_is_generic_500():
    async def broken_db():
        raise RuntimeError("connection string leaked: postgres://secret")
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = broken_db
    try:
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/api/students/count")
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "系统内部错误"
    assert body["message"] == "服务器发生未知错误，请稍后重试"
    assert "details" not in body
    assert "secret" not in r.text


def test_request_id_is_echoed(client):
    r = client.get("/ping", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"

    r = client.get("/ping")
    assert len(r.headers["X-Request-ID"]) == 32


def test_security_headers_present(client):
    r = client.get("/ping")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"


def test_health_reports_database(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["checks"]["database"] == "healthy"


def test_health_is_503_when_database_unreachable(client, monkeypatch):
    import main

    class _BrokenSession:
        async def __aenter__(self):
            raise ConnectionError("database down")

        async def __aexit__(self, *exc):
            return False

    monkeypatch.setattr(main, "AsyncSessionLocal", _BrokenSession)
    r = client.get("/health")
    assert r.status_code == 503
    assert r.json()["status"] == "unhealthy"
