"""Tests for session and self-service account endpoints."""

import pytest

from knowbase.auth.passwords import (
    generate_temporary_password,
    hash_password,
    password_policy_error,
    verify_password,
)
from knowbase.db.constants import Entity

CURRENT_PASSWORD = "Current-pass-1"


@pytest.fixture
def account(dynamodb_tables):
    table = dynamodb_tables[Entity.USERS]
    table.put_item(
        Item={
            "userId": "u1",
            "email": "me@example.com",
            "name": "Me",
            "passwordHash": hash_password(CURRENT_PASSWORD),
            "mustChangePassword": True,
        }
    )
    return table


@pytest.fixture
def signed_in(client):
    client.cookies.set("kb_user", "me@example.com")
    return client


def record(table):
    return table.get_item(Key={"userId": "u1"})["Item"]


class TestPasswords:
    def test_temporary_password_mixes_classes(self):
        for _ in range(20):
            password = generate_temporary_password()
            assert len(password) == 12
            assert any(c.islower() for c in password)
            assert any(c.isupper() for c in password)
            assert any(c.isdigit() for c in password)
            assert not set(password) & set("0O1lI")

    def test_hash_and_verify(self):
        hashed = hash_password("Secret-123")

        assert verify_password("Secret-123", hashed)
        assert not verify_password("secret-123", hashed)
        assert not verify_password("Secret-123", "not-a-bcrypt-hash")
        assert not verify_password("Secret-123", None)

    def test_policy_lengths(self):
        assert password_policy_error("short") is not None
        assert password_policy_error("x" * 65) is not None
        assert password_policy_error("x" * 8) is None


class TestMe:
    def test_signed_out(self, client):
        assert client.get("/api/me").json() == {"ok": True, "email": None, "isAdmin": False}

    def test_signed_in_admin(self, client):
        client.cookies.set("kb_user", "boss@example.com")
        client.cookies.set("kb_admin", "1")

        assert client.get("/api/me").json() == {
            "ok": True,
            "email": "boss@example.com",
            "isAdmin": True,
        }


class TestChangeName:
    def test_requires_session(self, client, account):
        response = client.post("/api/account/name", json={"name": "New"})

        assert response.status_code == 401

    def test_trims_full_width_spaces(self, signed_in, account):
        response = signed_in.post("/api/account/name", json={"name": "　山田 太郎 　"})

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "山田 太郎"
        assert record(account)["name"] == "山田 太郎"

    @pytest.mark.parametrize("name", ["", "　 ", "x" * 41])
    def test_rejects_invalid_names(self, signed_in, account, name):
        response = signed_in.post("/api/account/name", json={"name": name})

        assert response.status_code == 400

    def test_unknown_user(self, client, account):
        client.cookies.set("kb_user", "ghost@example.com")

        response = client.post("/api/account/name", json={"name": "Ghost"})

        assert response.status_code == 404

    def test_inactive_user(self, signed_in, account):
        account.update_item(
            Key={"userId": "u1"},
            UpdateExpression="SET isActive = :f",
            ExpressionAttributeValues={":f": False},
        )

        response = signed_in.post("/api/account/name", json={"name": "Me"})

        assert response.status_code == 400


class TestChangePassword:
    def change(self, client, current, new, confirm=None):
        return client.post(
            "/api/account/password",
            json={
                "currentPassword": current,
                "newPassword": new,
                "newPassword2": new if confirm is None else confirm,
            },
        )

    def test_success_clears_forced_change(self, signed_in, account):
        response = self.change(signed_in, CURRENT_PASSWORD, "Brand-new-2")

        assert response.status_code == 200
        stored = record(account)
        assert stored["mustChangePassword"] is False
        assert verify_password("Brand-new-2", stored["passwordHash"])

    def test_wrong_current_password(self, signed_in, account):
        response = self.change(signed_in, "Wrong-pass-1", "Brand-new-2")

        assert response.status_code == 400
        assert verify_password(CURRENT_PASSWORD, record(account)["passwordHash"])

    @pytest.mark.parametrize(
        "new,confirm",
        [
            ("short", None),
            ("x" * 65, None),
            ("Brand-new-2", "Brand-new-3"),
            (CURRENT_PASSWORD, None),
        ],
    )
    def test_rejects_invalid_new_password(self, signed_in, account, new, confirm):
        response = self.change(signed_in, CURRENT_PASSWORD, new, confirm)

        assert response.status_code == 400

    def test_requires_session(self, client, account):
        assert self.change(client, CURRENT_PASSWORD, "Brand-new-2").status_code == 401
