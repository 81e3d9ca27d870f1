"""Tests for application wiring and error responses."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from knowbase.conftest import ADMIN_HEADERS
from knowbase.config import AppSettings, set_app_settings
from knowbase.main import app, get_version, run


def test_root_and_healthcheck():
    client = TestClient(app)

    for path in ["/", "/healthcheck"]:
        response = client.get(path)
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


def test_version_from_pyproject():
    assert get_version() == "0.1.0"


def test_unknown_route_uses_error_shape():
    response = TestClient(app).get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_admin_key_must_be_configured(dynamodb_tables):
    set_app_settings(AppSettings(kb_admin_api_key=None, table_prefix="test-"))

    response = TestClient(app).post(
        "/api/contacts", json={"name": "x"}, headers=ADMIN_HEADERS
    )

    assert response.status_code == 403


def test_table_names_use_prefix():
    assert AppSettings(table_prefix="kb-").table_name("Manuals") == "kb-Manuals"


def test_run_serves_app_with_uvicorn():
    set_app_settings(AppSettings(environment="prod", host="127.0.0.1", port=9000))

    with patch("knowbase.main.uvicorn.run") as uvicorn_run:
        run()

    uvicorn_run.assert_called_once_with(
        "knowbase.main:app", host="127.0.0.1", port=9000, reload=False
    )
    set_app_settings(None)
