"""Tests for contact routes."""

from knowbase.conftest import ADMIN_HEADERS


def test_create_generates_id_and_lists_by_name(client):
    for name in ["Suzuki", "Abe"]:
        response = client.post("/api/contacts", json={"name": name}, headers=ADMIN_HEADERS)
        assert response.status_code == 200
        assert response.json()["contact"]["contactId"]

    contacts = client.get("/api/contacts").json()["contacts"]

    assert [c["name"] for c in contacts] == ["Abe", "Suzuki"]


def test_upsert_with_existing_id(client):
    client.post(
        "/api/contacts",
        json={"contactId": "c1", "name": "Abe", "email": "abe@example.com"},
        headers=ADMIN_HEADERS,
    )
    client.post(
        "/api/contacts",
        json={"contactId": "c1", "name": "Abe", "email": "abe2@example.com", "tags": "hr,it"},
        headers=ADMIN_HEADERS,
    )

    contacts = client.get("/api/contacts").json()["contacts"]

    assert len(contacts) == 1
    assert contacts[0]["email"] == "abe2@example.com"
    assert contacts[0]["tags"] == ["hr", "it"]


def test_name_required(client):
    response = client.post("/api/contacts", json={"email": "x@example.com"}, headers=ADMIN_HEADERS)

    assert response.status_code == 400


def test_delete(client):
    client.post("/api/contacts", json={"contactId": "c1", "name": "Abe"}, headers=ADMIN_HEADERS)

    assert client.delete("/api/contacts?contactId=c1", headers=ADMIN_HEADERS).status_code == 200
    assert client.get("/api/contacts").json()["contacts"] == []
    assert client.delete("/api/contacts", headers=ADMIN_HEADERS).status_code == 400
