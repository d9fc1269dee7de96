"""
Tests for job positions, contract types, employee contracts and their event trail
"""
from datetime import date

import pytest
from fastapi import status

from app.constants import READ_EMPLOYEES
from app.models.contract import ContractType, EmployeeSalary, JobPosition
from app.models.event_log import EmployeeEventLog
from app.tests.conftest import (
    auth_headers,
    create_user_with_permissions,
    make_company,
    make_contract,
    make_employee,
)


def _events(db, employee_id):
    return (
        db.query(EmployeeEventLog)
        .filter(EmployeeEventLog.employee_id == employee_id)
        .order_by(EmployeeEventLog.id)
        .all()
    )


@pytest.fixture
def contract_payload(employee, job_position, contract_type):
    return {
        "employee_id": employee.id,
        "job_position_id": job_position.id,
        "contract_type_id": contract_type.id,
        "start_date": "2024-03-01",
    }


def test_create_contract(client, db, admin_headers, employee, company, contract_payload):
    response = client.post("/api/employee-contracts", json=contract_payload, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["company_id"] == company.id
    assert data["company_name"] == "Atlas Conseil"
    assert data["employee_full_name"] == "Youssef Bennani"
    assert data["job_position_name"] == "Comptable"
    assert data["contract_type_name"] == "CDI"
    assert data["end_date"] is None

    events = _events(db, employee.id)
    assert [(e.event_name, e.new_value, e.new_value_id) for e in events] == [
        ("Contract_Created", "Comptable (CDI)", data["id"]),
    ]


def test_create_contract_already_ended_is_logged_as_terminated(
    client, db, admin_headers, employee, contract_payload
):
    response = client.post(
        "/api/employee-contracts",
        json={**contract_payload, "end_date": "2024-08-31"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert [(e.event_name, e.new_value) for e in _events(db, employee.id)][-1] == (
        "Contract_Terminated", "2024-08-31",
    )


def test_create_contract_end_before_start(client, admin_headers, contract_payload):
    response = client.post(
        "/api/employee-contracts",
        json={**contract_payload, "end_date": "2024-01-01"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_create_contract_missing_employee(client, admin_headers, contract_payload):
    response = client.post(
        "/api/employee-contracts",
        json={**contract_payload, "employee_id": 9999},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_contract_with_position_of_another_company(client, db, admin_headers, contract_payload):
    other = make_company(db, "Rif Audit")
    foreign = JobPosition(name="Auditeur", company_id=other.id)
    db.add(foreign)
    db.commit()

    response = client.post(
        "/api/employee-contracts",
        json={**contract_payload, "job_position_id": foreign.id},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "does not belong" in response.json()["message"]


def test_create_contract_for_another_company(client, db, admin_headers, contract_payload):
    other = make_company(db, "Rif Audit")

    response = client.post(
        "/api/employee-contracts",
        json={**contract_payload, "company_id": other.id},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_contract_logs_each_change(
    client, db, admin_headers, company, employee, job_position, contract_type
):
    contract = make_contract(db, employee, job_position, contract_type)
    promoted = JobPosition(name="Chef comptable", company_id=company.id)
    db.add(promoted)
    db.commit()

    response = client.put(
        f"/api/employee-contracts/{contract.id}",
        json={"job_position_id": promoted.id, "end_date": "2025-12-31"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["job_position_name"] == "Chef comptable"
    assert response.json()["end_date"] == "2025-12-31"

    events = [
        (e.event_name, e.old_value, e.old_value_id, e.new_value, e.new_value_id)
        for e in _events(db, employee.id)
    ]
    assert events == [
        ("JobPosition_Changed", "Comptable", job_position.id, "Chef comptable", promoted.id),
        ("Contract_Terminated", None, None, "2025-12-31", None),
    ]


def test_changing_end_date_again_is_an_update(client, db, admin_headers, employee, job_position, contract_type):
    contract = make_contract(db, employee, job_position, contract_type, end_date=date(2025, 6, 30))

    response = client.put(
        f"/api/employee-contracts/{contract.id}",
        json={"end_date": "2025-09-30"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    assert [(e.event_name, e.old_value, e.new_value) for e in _events(db, employee.id)] == [
        ("Contract_Updated", "2025-06-30", "2025-09-30"),
    ]


def test_update_contract_rejects_end_before_start(client, db, admin_headers, employee, job_position, contract_type):
    contract = make_contract(db, employee, job_position, contract_type, start_date=date(2024, 5, 1))

    response = client.put(
        f"/api/employee-contracts/{contract.id}",
        json={"end_date": "2024-04-30"},
        headers=admin_headers,
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert _events(db, employee.id) == []


def test_list_contracts_of_employee(client, db, admin_headers, company, employee, job_position, contract_type):
    make_contract(db, employee, job_position, contract_type, start_date=date(2022, 1, 1))
    make_contract(db, employee, job_position, contract_type, start_date=date(2024, 1, 1))
    other = make_employee(db, company, "Salma", "Tazi")
    make_contract(db, other, job_position, contract_type)

    response = client.get(f"/api/employee-contracts/employee/{employee.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert [c["start_date"] for c in response.json()] == ["2024-01-01", "2022-01-01"]


def test_list_contracts_of_missing_employee(client, admin_headers):
    response = client.get("/api/employee-contracts/employee/9999", headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_contract_blocked_by_active_salary(
    client, db, admin_headers, employee, job_position, contract_type
):
    contract = make_contract(db, employee, job_position, contract_type)
    db.add(EmployeeSalary(
        employee_id=employee.id, contract_id=contract.id,
        base_salary=9000, effective_date=date(2024, 1, 1),
    ))
    db.commit()

    response = client.delete(f"/api/employee-contracts/{contract.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "salaries" in response.json()["message"]


def test_delete_contract(client, db, admin_headers, employee, job_position, contract_type):
    contract = make_contract(db, employee, job_position, contract_type)

    response = client.delete(f"/api/employee-contracts/{contract.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert client.get(f"/api/employee-contracts/{contract.id}", headers=admin_headers).status_code == 404
    assert [(e.event_name, e.old_value, e.old_value_id) for e in _events(db, employee.id)] == [
        ("Contract_Deleted", "Comptable (CDI)", contract.id),
    ]


def test_employee_with_contract_cannot_be_deleted(client, db, admin_headers, employee, job_position, contract_type):
    make_contract(db, employee, job_position, contract_type)

    response = client.delete(f"/api/employees/{employee.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "contracts" in response.json()["message"]


def test_contract_endpoints_require_permission(client, db):
    user = create_user_with_permissions(db, "reader@example.ma", [READ_EMPLOYEES])
    response = client.get("/api/employee-contracts", headers=auth_headers(user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_contract_type_name_is_unique_per_company(client, db, admin_headers, company, contract_type):
    payload = {"contract_type_name": "cdi", "company_id": company.id}
    response = client.post("/api/contract-types", json=payload, headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    other = make_company(db, "Rif Audit")
    response = client.post(
        "/api/contract-types",
        json={**payload, "company_id": other.id},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED


def test_contract_type_in_use_cannot_be_deleted(client, db, admin_headers, employee, job_position, contract_type):
    make_contract(db, employee, job_position, contract_type)

    response = client.delete(f"/api/contract-types/{contract_type.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert db.query(ContractType).filter(ContractType.id == contract_type.id).one().deleted_at is None


def test_job_positions_by_company(client, db, admin_headers, company, job_position):
    other = make_company(db, "Rif Audit")
    db.add(JobPosition(name="Auditeur", company_id=other.id))
    db.commit()

    response = client.get(f"/api/job-positions/by-company/{company.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert [p["name"] for p in response.json()] == ["Comptable"]
    assert client.get("/api/job-positions/by-company/9999", headers=admin_headers).status_code == 404


def test_job_position_requires_existing_company(client, admin_headers):
    response = client.post("/api/job-positions", json={"name": "Paie", "company_id": 9999}, headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_company_with_job_positions_cannot_be_deleted(client, db, admin_headers, company, job_position):
    response = client.delete(f"/api/companies/{company.id}", headers=admin_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "job positions" in response.json()["message"]
