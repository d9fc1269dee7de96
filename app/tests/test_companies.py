"""
Tests for company endpoints and their event trail
"""
import pytest
from fastapi import status

from app.models.event_log import CompanyEventLog
from app.tests.conftest import make_employee


@pytest.fixture
def company_payload(city, country):
    return {
        "company_name": "Sahara Tech",
        "company_address": "12 Rue Atlas",
        "city_id": city.id,
        "country_id": country.id,
        "ice_number": "ICE123",
        "cnss_number": "CNSS123",
        "if_number": "IF123",
        "rc_number": "RC123",
        "rib_number": "RIB123",
        "phone_number": "+212522000000",
        "email": "Contact@SaharaTech.ma",
    }


def test_create_company_logs_creation(client, db, admin_user, admin_headers, company_payload):
    response = client.post("/api/companies", json=company_payload, headers=admin_headers)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["email"] == "contact@saharatech.ma"
    assert data["city_name"] == "Casablanca"
    assert data["country_name"] == "Morocco"
    assert data["employee_count"] == 0
    assert data["is_cabinet_expert"] is False

    events = db.query(CompanyEventLog).filter(CompanyEventLog.company_id == data["id"]).all()
    assert [(e.event_name, e.old_value, e.new_value) for e in events] == [
        ("Company_Created", None, "Sahara Tech"),
    ]
    assert events[0].created_by == admin_user.id


def test_create_company_duplicates(client, admin_headers, company_payload, company):
    response = client.post("/api/companies", json={**company_payload, "company_name": "atlas conseil"},
                           headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    response = client.post("/api/companies", json={**company_payload, "email": company.email},
                           headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_company_city_outside_country(client, admin_headers, company_payload):
    other = client.post("/api/countries", json={
        "country_name": "France", "country_code": "FR", "country_phone_code": "+33", "nationality": "French",
    }, headers=admin_headers).json()

    response = client.post("/api/companies", json={**company_payload, "country_id": other["id"]},
                           headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "does not belong" in response.json()["message"]

    response = client.post("/api/companies", json={**company_payload, "city_id": 999}, headers=admin_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_create_company_missing_fields(client, admin_headers):
    response = client.post("/api/companies", json={"company_name": "Half"}, headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_update_logs_one_event_per_changed_field(client, db, admin_headers, company):
    response = client.put(f"/api/companies/{company.id}", json={
        "email": "hello@atlas.ma",
        "phone_number": "+212611000000",
        "ice_number": company.ice_number,
    }, headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "hello@atlas.ma"

    events = {
        e.event_name: e
        for e in db.query(CompanyEventLog).filter(CompanyEventLog.company_id == company.id).all()
    }
    assert set(events) == {"Email_Changed", "Phone_Changed"}
    assert events["Email_Changed"].old_value == "atlasconseil@example.ma"
    assert events["Email_Changed"].new_value == "hello@atlas.ma"


def test_update_city_logs_relation_event(client, db, admin_headers, company, city, country):
    rabat = client.post("/api/cities", json={"city_name": "Rabat", "country_id": country.id},
                        headers=admin_headers).json()

    response = client.put(f"/api/companies/{company.id}", json={"city_id": rabat["id"]}, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["city_name"] == "Rabat"

    event = db.query(CompanyEventLog).filter(CompanyEventLog.event_name == "City_Changed").one()
    assert (event.old_value_id, event.old_value) == (city.id, "Casablanca")
    assert (event.new_value_id, event.new_value) == (rabat["id"], "Rabat")


def test_update_without_changes_logs_nothing(client, db, admin_headers, company):
    response = client.put(f"/api/companies/{company.id}", json={"company_name": "Atlas Conseil"},
                          headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert db.query(CompanyEventLog).count() == 0


def test_update_rejects_taken_name(client, db, admin_headers, company, company_payload):
    client.post("/api/companies", json=company_payload, headers=admin_headers)

    response = client.put(f"/api/companies/{company.id}", json={"company_name": "SAHARA TECH"},
                          headers=admin_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_history_is_newest_first_with_description(client, admin_headers, company):
    client.put(f"/api/companies/{company.id}", json={"rc_number": "RC002"}, headers=admin_headers)
    client.put(f"/api/companies/{company.id}", json={"rc_number": "RC003"}, headers=admin_headers)

    response = client.get(f"/api/companies/{company.id}/history", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    history = response.json()
    assert [h["description"] for h in history] == [
        "RC_Changed : RC002 → RC003",
        "RC_Changed : RC001 → RC002",
    ]
    assert history[0]["creator_full_name"] == "admin"


def test_list_companies_with_counts(client, db, admin_headers, company):
    make_employee(db, company, "Ilyas", "Rami")
    make_employee(db, company, "Hind", "Saber")

    companies = client.get("/api/companies", headers=admin_headers).json()
    assert len(companies) == 1
    assert companies[0]["employee_count"] == 2
    assert companies[0]["city_name"] == "Casablanca"

    response = client.get(f"/api/companies/{company.id}", headers=admin_headers)
    assert response.json()["employee_count"] == 2


def test_delete_blocked_by_employees(client, db, admin_headers, company):
    make_employee(db, company, "Ilyas", "Rami")

    response = client.delete(f"/api/companies/{company.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "active employees" in response.json()["message"]
    assert db.query(CompanyEventLog).count() == 0


def test_delete_company(client, db, admin_headers, company):
    response = client.delete(f"/api/companies/{company.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT

    assert client.get(f"/api/companies/{company.id}", headers=admin_headers).status_code == 404
    assert client.get("/api/companies", headers=admin_headers).json() == []

    event = db.query(CompanyEventLog).one()
    assert (event.event_name, event.old_value, event.new_value) == ("Company_Deleted", "Atlas Conseil", None)
