"""
Tests for dashboard aggregates
"""
from fastapi import status

from app.models.referential import Status
from app.services.dashboard_service import average, bucket_label, build_distribution, map_status, percentage
from app.tests.conftest import make_company, make_employee


def _staff(db, company, count, prefix):
    return [make_employee(db, company, f"{prefix}{i}", "Staff") for i in range(count)]


def test_bucket_boundaries():
    assert bucket_label(0) == "1-10"
    assert bucket_label(10) == "1-10"
    assert bucket_label(11) == "11-50"
    assert bucket_label(50) == "11-50"
    assert bucket_label(51) == "51-200"
    assert bucket_label(200) == "51-200"
    assert bucket_label(201) == ">200"


def test_zero_totals_do_not_divide():
    assert percentage(0, 0) == 0.0
    assert average(0, 0) == 0.0
    assert percentage(1, 3) == 33.3
    assert average(10, 3) == 3.33

    buckets = build_distribution([])
    assert [b.range for b in buckets] == ["1-10", "11-50", "51-200", ">200"]
    assert all(b.companies_count == 0 and b.percentage == 0.0 for b in buckets)


def test_summary_with_no_data(client, admin_headers):
    response = client.get("/api/dashboard/summary", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["total_companies"] == 0
    assert body["total_employees"] == 0
    assert body["avg_employees_per_company"] == 0.0
    assert body["recent_companies"] == []
    assert len(body["employee_distribution"]) == 4


def test_summary_distribution_10_vs_11(client, db, admin_headers):
    ten = make_company(db, "Ten Co")
    eleven = make_company(db, "Eleven Co", is_cabinet_expert=True)
    make_company(db, "Empty Co")
    _staff(db, ten, 10, "T")
    _staff(db, eleven, 11, "E")

    body = client.get("/api/dashboard/summary", headers=admin_headers).json()

    assert body["total_companies"] == 3
    assert body["total_employees"] == 21
    assert body["accounting_firms_count"] == 1
    assert body["avg_employees_per_company"] == 7.0

    buckets = {b["range"]: b for b in body["employee_distribution"]}
    assert buckets["1-10"]["companies_count"] == 2
    assert buckets["1-10"]["employees_count"] == 10
    assert buckets["1-10"]["percentage"] == 47.6
    assert buckets["11-50"]["companies_count"] == 1
    assert buckets["11-50"]["employees_count"] == 11
    assert buckets["11-50"]["percentage"] == 52.4
    assert buckets["51-200"]["companies_count"] == 0
    assert buckets[">200"]["percentage"] == 0.0

    recent = {c["company_name"]: c for c in body["recent_companies"]}
    assert recent["Eleven Co"]["employee_count"] == 11
    assert recent["Empty Co"]["employee_count"] == 0


def test_summary_ignores_soft_deleted_rows(client, db, admin_headers):
    from app.utils.datetime_utils import now_utc

    kept = make_company(db, "Kept Co")
    gone = make_company(db, "Gone Co")
    staff = _staff(db, kept, 3, "K")
    staff[0].deleted_at = now_utc()
    gone.deleted_at = now_utc()
    db.commit()

    body = client.get("/api/dashboard/summary", headers=admin_headers).json()
    assert body["total_companies"] == 1
    assert body["total_employees"] == 2
    assert [c["company_name"] for c in body["recent_companies"]] == ["Kept Co"]


def test_recent_companies_limited_to_five(client, db, admin_headers):
    for i in range(7):
        make_company(db, f"Company {i}")

    body = client.get("/api/dashboard/summary", headers=admin_headers).json()
    assert len(body["recent_companies"]) == 5


def test_status_mapping():
    assert map_status("Active") == "active"
    assert map_status("En congé") == "on_leave"
    assert map_status("Licencié") == "terminated"
    assert map_status("Suspendu") == "inactive"
    assert map_status(None) == "inactive"


def test_employees_overview(client, db, admin_headers, company):
    statuses = {}
    for name in ("Active", "En congé", "Licencié"):
        row = Status(name=name)
        db.add(row)
        db.flush()
        statuses[name] = row.id
    db.commit()

    boss = make_employee(db, company, "Amina", "Bennani", status_id=statuses["Active"])
    make_employee(db, company, "Karim", "Idrissi", status_id=statuses["En congé"], manager_id=boss.id)
    make_employee(db, company, "Omar", "Tazi", status_id=statuses["Licencié"])
    make_employee(db, company, "Youssef", "Filali")

    response = client.get("/api/dashboard/employees", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    body = response.json()

    assert body["total_employees"] == 4
    assert body["active_employees"] == 1
    by_name = {e["first_name"]: e for e in body["employees"]}
    assert [e["first_name"] for e in body["employees"]] == ["Amina", "Karim", "Omar", "Youssef"]
    assert by_name["Amina"]["status"] == "active"
    assert by_name["Karim"]["status"] == "on_leave"
    assert by_name["Karim"]["manager"] == "Amina Bennani"
    assert by_name["Omar"]["status"] == "terminated"
    assert by_name["Youssef"]["status"] == "inactive"
    assert by_name["Youssef"]["company_name"] == "Atlas Conseil"
