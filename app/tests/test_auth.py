"""
Tests for authentication endpoints
"""
import bcrypt
import pytest
from fastapi import status

from app.core.config import settings
from app.core.security import create_access_token, decode_token, hash_password, verify_password
from app.models.user import User
from app.tests.conftest import auth_headers, create_user_with_permissions, make_employee


@pytest.fixture
def accountant(db):
    """Active user holding one role with two permissions"""
    return create_user_with_permissions(
        db, "nora@example.ma", ["READ_COMPANIES", "VIEW_COMPANY"],
        password="Compta2026!", role_name="ACCOUNTANT",
    )


def test_login_success(client, accountant):
    response = client.post("/api/auth/login", json={
        "email": "nora@example.ma",
        "password": "Compta2026!",
    })

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["expires_at"].endswith("Z")
    assert data["user"]["email"] == "nora@example.ma"
    assert data["user"]["roles"] == ["ACCOUNTANT"]
    assert data["user"]["permissions"] == ["READ_COMPANIES", "VIEW_COMPANY"]

    claims = decode_token(data["token"])
    assert claims["uid"] == str(accountant.id)
    assert claims["email"] == "nora@example.ma"
    assert claims["iss"] == settings.JWT_ISSUER
    assert claims["permissions"] == ["READ_COMPANIES", "VIEW_COMPANY"]


def test_login_email_is_case_insensitive(client, accountant):
    response = client.post("/api/auth/login", json={
        "email": "  NORA@Example.ma ",
        "password": "Compta2026!",
    })
    assert response.status_code == status.HTTP_200_OK


def test_login_wrong_password(client, accountant):
    response = client.post("/api/auth/login", json={
        "email": "nora@example.ma",
        "password": "wrong",
    })

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid email or password"


def test_login_unknown_email_has_same_message(client):
    response = client.post("/api/auth/login", json={
        "email": "nobody@example.ma",
        "password": "whatever",
    })

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid email or password"


def test_login_inactive_user(client, db):
    create_user_with_permissions(db, "off@example.ma", password="Secret123!", is_active=False)

    response = client.post("/api/auth/login", json={
        "email": "off@example.ma",
        "password": "Secret123!",
    })
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_login_missing_fields(client):
    response = client.post("/api/auth/login", json={"email": "nora@example.ma"})
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_bootstrap_admin_can_log_in(client, admin_user):
    response = client.post("/api/auth/login", json={
        "email": settings.INITIAL_ADMIN_EMAIL,
        "password": settings.INITIAL_ADMIN_PASSWORD,
    })

    assert response.status_code == status.HTTP_200_OK
    user = response.json()["user"]
    assert user["roles"] == ["ADMIN"]
    assert "MANAGE_PERMISSIONS" in user["permissions"]
    assert "CREATE_MARITAL_STATUSES" in user["permissions"]


def test_bootstrap_only_runs_on_empty_database(db, admin_user):
    from app.db.init_db import bootstrap_initial_admin

    assert bootstrap_initial_admin(db) is None
    assert db.query(User).count() == 1


def test_me_returns_identity_and_company(client, db, company):
    employee = make_employee(db, company, "Nora", "Bennis")
    user = create_user_with_permissions(db, "nora.b@example.ma", ["READ_EMPLOYEES"])
    user.employee_id = employee.id
    db.commit()

    response = client.get("/api/auth/me", headers=auth_headers(user))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == user.id
    assert data["first_name"] == "Nora"
    assert data["last_name"] == "Bennis"
    assert data["company_id"] == company.id
    assert data["is_cabinet_expert"] is False
    assert data["permissions"] == ["READ_EMPLOYEES"]


def test_me_requires_token(client):
    response = client.get("/api/auth/me")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_expired_token_is_rejected(client, accountant):
    token = create_access_token(user_id=accountant.id, email=accountant.email, expires_minutes=-1)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout_is_stateless(client):
    response = client.post("/api/auth/logout")
    assert response.status_code == status.HTTP_200_OK
    assert "discard" in response.json()["message"]


def test_password_hashes():
    hashed = hash_password("Secret123!")
    assert hashed.startswith("$argon2")
    assert verify_password("Secret123!", hashed)
    assert not verify_password("secret123!", hashed)
    assert not verify_password("Secret123!", None)

    # Hashes carried over from a bcrypt store still verify
    legacy = bcrypt.hashpw(b"Legacy42!", bcrypt.gensalt()).decode("utf-8")
    assert verify_password("Legacy42!", legacy)
    assert not verify_password("Legacy43!", legacy)
