"""
Tests for user account endpoints
"""
from fastapi import status

from app.core.security import verify_password
from app.models.user import User
from app.tests.conftest import auth_headers, create_user_with_permissions, make_employee


def test_create_user_generates_temporary_password(client, db, admin_headers):
    response = client.post("/api/users", json={"email": "Sara.Idrissi@Example.ma"}, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "sara.idrissi@example.ma"
    assert data["username"] == "sara.idrissi"
    assert data["roles"] == []
    temp = data["temporary_password"]
    assert temp and len(temp) >= 8

    user = db.query(User).filter(User.id == data["id"]).one()
    assert user.password_hash != temp
    assert verify_password(temp, user.password_hash)


def test_create_user_with_password_returns_no_temporary_password(client, admin_headers):
    response = client.post("/api/users", json={
        "email": "omar@example.ma",
        "username": "omar",
        "password": "ChosenPass1",
    }, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["temporary_password"] is None


def test_create_user_short_password_rejected(client, admin_headers):
    response = client.post("/api/users", json={"email": "x@example.ma", "password": "short"}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_user_username_from_employee(client, db, admin_headers, company):
    employee = make_employee(db, company, "Yasmine", "Ouali")
    response = client.post("/api/users", json={
        "email": "y.ouali@example.ma",
        "employee_id": employee.id,
    }, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["username"] == "yasmine.ouali"
    assert response.json()["employee_id"] == employee.id

    # One account per employee
    response = client.post("/api/users", json={
        "email": "other@example.ma",
        "employee_id": employee.id,
    }, headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_duplicate_email_conflict(client, admin_headers):
    client.post("/api/users", json={"email": "dup@example.ma"}, headers=admin_headers)
    response = client.post("/api/users", json={"email": "DUP@example.ma"}, headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_list_and_get_users(client, db, admin_user, admin_headers):
    create_user_with_permissions(db, "zed@example.ma", role_name="VIEWER")

    users = client.get("/api/users", headers=admin_headers).json()
    assert [u["username"] for u in users] == ["admin", "zed"]
    assert users[1]["roles"] == ["VIEWER"]

    response = client.get(f"/api/users/{admin_user.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["roles"] == ["ADMIN"]

    assert client.get("/api/users/999", headers=admin_headers).status_code == 404


def test_update_user(client, db, admin_headers):
    created = client.post("/api/users", json={"email": "upd@example.ma"}, headers=admin_headers).json()

    response = client.put(f"/api/users/{created['id']}", json={
        "username": "updated",
        "is_active": False,
    }, headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["username"] == "updated"
    assert response.json()["is_active"] is False
    assert response.json()["email"] == "upd@example.ma"


def test_cannot_deactivate_or_delete_self(client, admin_user, admin_headers):
    response = client.put(f"/api/users/{admin_user.id}", json={"is_active": False}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.delete(f"/api/users/{admin_user.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "own account" in response.json()["message"]


def test_delete_blocked_while_roles_are_assigned(client, db, admin_headers):
    holder = create_user_with_permissions(db, "holder@example.ma", role_name="HOLDER")

    response = client.delete(f"/api/users/{holder.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "active roles" in response.json()["message"]


def test_delete_user_without_roles(client, db, admin_headers):
    created = client.post("/api/users", json={"email": "bye@example.ma"}, headers=admin_headers).json()

    response = client.delete(f"/api/users/{created['id']}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/users/{created['id']}", headers=admin_headers).status_code == 404

    # The email is free again once the account is deleted
    response = client.post("/api/users", json={"email": "bye@example.ma"}, headers=admin_headers)
    assert response.status_code == status.HTTP_201_CREATED


def test_user_endpoints_require_permissions(client, db):
    reader = create_user_with_permissions(db, "reader@example.ma", ["READ_USERS"])
    headers = auth_headers(reader)

    assert client.get("/api/users", headers=headers).status_code == status.HTTP_200_OK
    response = client.post("/api/users", json={"email": "n@example.ma"}, headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["requiredPermissions"] == ["CREATE_USERS"]
