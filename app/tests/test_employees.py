"""
Tests for employee endpoints and their event trail
"""
import pytest
from fastapi import status

from app.core.security import verify_password
from app.models.event_log import EmployeeEventLog
from app.models.referential import Status
from app.models.user import User
from app.tests.conftest import make_company, make_employee


@pytest.fixture
def employee_payload(company):
    return {
        "first_name": "Meryem",
        "last_name": "El Fassi",
        "cin_number": "BK123456",
        "date_of_birth": "1992-05-14",
        "phone": "+212661000000",
        "email": "Meryem.ElFassi@Example.ma",
        "company_id": company.id,
    }


@pytest.fixture
def statuses(db):
    rows = {}
    for name in ("Active", "En congé"):
        row = Status(name=name)
        db.add(row)
        db.flush()
        rows[name] = row
    db.commit()
    return rows


def _events(db, employee_id):
    return (
        db.query(EmployeeEventLog)
        .filter(EmployeeEventLog.employee_id == employee_id)
        .order_by(EmployeeEventLog.id)
        .all()
    )


def test_create_employee(client, db, admin_headers, employee_payload):
    response = client.post("/api/employees", json=employee_payload, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "meryem.elfassi@example.ma"
    assert data["company_name"] == "Atlas Conseil"
    assert data["user_id"] is None
    assert data["temporary_password"] is None

    events = _events(db, data["id"])
    assert [(e.event_name, e.new_value) for e in events] == [("Employee_Created", "Meryem El Fassi")]


def test_create_employee_with_account(client, db, admin_headers, employee_payload):
    response = client.post("/api/employees", json={**employee_payload, "create_user_account": True},
                           headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["username"] == "meryem.elfassi"
    temp = data["temporary_password"]

    user = db.query(User).filter(User.id == data["user_id"]).one()
    assert user.employee_id == data["id"]
    assert user.email == "meryem.elfassi@example.ma"
    assert verify_password(temp, user.password_hash)


def test_account_conflict_rolls_back_employee(client, db, admin_headers, employee_payload):
    db.add(User(email="meryem.elfassi@example.ma", username="taken", password_hash="x"))
    db.commit()

    response = client.post("/api/employees", json={**employee_payload, "create_user_account": True},
                           headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert client.get("/api/employees", headers=admin_headers).json() == []
    assert db.query(EmployeeEventLog).count() == 0


def test_cin_is_unique(client, db, admin_headers, employee_payload, company):
    make_employee(db, company, "Ali", "Naciri", cin_number="BK123456")

    response = client.post("/api/employees", json=employee_payload, headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "CIN" in response.json()["message"]


def test_create_requires_existing_references(client, admin_headers, employee_payload):
    response = client.post("/api/employees", json={**employee_payload, "company_id": 999}, headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND

    response = client.post("/api/employees", json={**employee_payload, "gender_id": 999}, headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert "Gender" in response.json()["message"]


def test_update_scalar_fields_are_logged(client, db, admin_headers, company):
    employee = make_employee(db, company, "Driss", "Lahlou")

    response = client.put(f"/api/employees/{employee.id}", json={
        "phone": "+212662000000",
        "date_of_birth": "1985-12-31",
    }, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK

    events = {e.event_name: e for e in _events(db, employee.id)}
    assert set(events) == {"Phone_Changed", "DateOfBirth_Changed"}
    assert events["Phone_Changed"].old_value == "+212600000000"
    assert events["DateOfBirth_Changed"].old_value == "1990-01-01"
    assert events["DateOfBirth_Changed"].new_value == "1985-12-31"


def test_update_status_logs_relation_event(client, db, admin_headers, company, statuses):
    employee = make_employee(db, company, "Driss", "Lahlou", status_id=statuses["Active"].id)

    response = client.put(f"/api/employees/{employee.id}", json={"status_id": statuses["En congé"].id},
                          headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status_name"] == "En congé"

    event = _events(db, employee.id)[0]
    assert event.event_name == "Status_Changed"
    assert (event.old_value_id, event.old_value) == (statuses["Active"].id, "Active")
    assert (event.new_value_id, event.new_value) == (statuses["En congé"].id, "En congé")


def test_update_manager_and_company(client, db, admin_headers, company):
    boss = make_employee(db, company, "Aicha", "Berrada")
    employee = make_employee(db, company, "Driss", "Lahlou")
    other = make_company(db, "Rif Services")

    response = client.put(f"/api/employees/{employee.id}", json={
        "manager_id": boss.id,
        "company_id": other.id,
    }, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["manager_full_name"] == "Aicha Berrada"
    assert response.json()["company_name"] == "Rif Services"

    events = {e.event_name: e for e in _events(db, employee.id)}
    assert (events["Manager_Changed"].old_value, events["Manager_Changed"].new_value) == (None, "Aicha Berrada")
    assert events["Manager_Changed"].new_value_id == boss.id
    assert (events["Company_Changed"].old_value, events["Company_Changed"].new_value) == (
        "Atlas Conseil", "Rif Services",
    )


def test_manager_cycle_is_rejected(client, db, admin_headers, company):
    top = make_employee(db, company, "Aicha", "Berrada")
    middle = make_employee(db, company, "Driss", "Lahlou", manager_id=top.id)
    bottom = make_employee(db, company, "Sami", "Zaki", manager_id=middle.id)

    response = client.put(f"/api/employees/{top.id}", json={"manager_id": bottom.id}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(f"/api/employees/{top.id}", json={"manager_id": top.id}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    assert _events(db, top.id) == []


def test_update_cin_conflict(client, db, admin_headers, company):
    first = make_employee(db, company, "Aicha", "Berrada")
    second = make_employee(db, company, "Driss", "Lahlou")

    response = client.put(f"/api/employees/{second.id}", json={"cin_number": first.cin_number.lower()},
                          headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_list_employees_by_company(client, db, admin_headers, company):
    other = make_company(db, "Rif Services")
    make_employee(db, company, "Zineb", "Amrani")
    make_employee(db, company, "Adam", "Amrani")
    make_employee(db, other, "Badr", "Tazi")

    response = client.get(f"/api/employees?company_id={company.id}", headers=admin_headers)
    assert [e["first_name"] for e in response.json()] == ["Adam", "Zineb"]
    assert len(client.get("/api/employees", headers=admin_headers).json()) == 3


def test_delete_blocked_while_managing(client, db, admin_headers, company):
    boss = make_employee(db, company, "Aicha", "Berrada")
    make_employee(db, company, "Driss", "Lahlou", manager_id=boss.id)

    response = client.delete(f"/api/employees/{boss.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_delete_employee(client, db, admin_headers, company):
    employee = make_employee(db, company, "Driss", "Lahlou")

    response = client.delete(f"/api/employees/{employee.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/employees/{employee.id}", headers=admin_headers).status_code == 404

    assert [e.event_name for e in _events(db, employee.id)] == ["Employee_Deleted"]


def test_employee_history(client, db, admin_headers, company):
    employee = make_employee(db, company, "Driss", "Lahlou")
    client.put(f"/api/employees/{employee.id}", json={"cnss_number": "CN1"}, headers=admin_headers)

    history = client.get(f"/api/employees/{employee.id}/history", headers=admin_headers).json()
    assert [h["description"] for h in history] == ["CNSS_Changed : <empty> → CN1"]
    assert client.get("/api/employees/999/history", headers=admin_headers).status_code == 404
