"""
Tests for the merged event feed
"""
from datetime import datetime, timedelta, timezone

from fastapi import status

from app.models.event_log import CompanyEventLog, EmployeeEventLog
from app.schemas.event_log import EventFeedItem
from app.services.event_feed_service import describe_event, sort_feed
from app.tests.conftest import auth_headers, create_user_with_permissions, make_employee

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _item(item_id, source, created_at):
    return EventFeedItem(
        id=item_id, source=source, event_name="X", created_at=created_at, created_by=1
    )


def test_sort_feed_newest_first():
    items = [
        _item(1, "company", T0),
        _item(2, "employee", T0 + timedelta(minutes=5)),
        _item(3, "company", T0 + timedelta(minutes=1)),
    ]
    assert [(i.source, i.id) for i in sort_feed(items)] == [
        ("employee", 2), ("company", 3), ("company", 1),
    ]


def test_sort_feed_ties_company_first_then_id_desc():
    items = [
        _item(5, "employee", T0),
        _item(2, "company", T0),
        _item(9, "employee", T0),
        _item(4, "company", T0),
    ]
    assert [(i.source, i.id) for i in sort_feed(items)] == [
        ("company", 4), ("company", 2), ("employee", 9), ("employee", 5),
    ]


def test_sort_feed_mixes_naive_and_aware_timestamps():
    """Naive timestamps read back from SQLite are treated as UTC"""
    items = [
        _item(1, "company", T0.replace(tzinfo=None)),
        _item(2, "employee", T0 + timedelta(seconds=1)),
    ]
    assert [i.id for i in sort_feed(items)] == [2, 1]


def test_describe_event():
    assert describe_event("Email_Changed", "a@x.ma", "b@x.ma") == "Email_Changed : a@x.ma → b@x.ma"
    assert describe_event("Company_Created", None, "Atlas") == "Company_Created : <empty> → Atlas"


def test_feed_endpoint_merges_and_enriches(client, db, company, admin_user):
    employee = make_employee(db, company, "Rachid", "Amrani")
    db.add_all([
        CompanyEventLog(
            company_id=company.id, event_name="Email_Changed",
            old_value="a@x.ma", new_value="b@x.ma", created_at=T0, created_by=admin_user.id,
        ),
        EmployeeEventLog(
            employee_id=employee.id, event_name="Phone_Changed",
            old_value="1", new_value="2", created_at=T0 + timedelta(hours=1), created_by=admin_user.id,
        ),
        CompanyEventLog(
            company_id=company.id, event_name="Phone_Changed",
            old_value="3", new_value="4", created_at=T0 + timedelta(hours=1), created_by=admin_user.id,
        ),
    ])
    db.commit()

    response = client.get("/api/events", headers=auth_headers(admin_user))
    assert response.status_code == status.HTTP_200_OK
    body = response.json()

    assert body["count"] == 3
    assert [(i["source"], i["event_name"]) for i in body["items"]] == [
        ("company", "Phone_Changed"),
        ("employee", "Phone_Changed"),
        ("company", "Email_Changed"),
    ]
    employee_item = body["items"][1]
    assert employee_item["employee_full_name"] == "Rachid Amrani"
    assert employee_item["company_id"] == company.id
    assert employee_item["company_name"] == "Atlas Conseil"
    # Bootstrap admin has no employee record
    assert employee_item["creator_full_name"] == "admin"
    assert body["items"][2]["created_at"].endswith("Z")


def test_feed_limit(client, db, company, admin_headers):
    for i in range(4):
        db.add(CompanyEventLog(
            company_id=company.id, event_name="Phone_Changed",
            created_at=T0 + timedelta(minutes=i), created_by=1,
        ))
    db.commit()

    body = client.get("/api/events?limit=2", headers=admin_headers).json()
    assert body["count"] == 2
    assert [i["id"] for i in body["items"]] == [4, 3]


def test_creator_name_prefers_linked_employee(client, db, company, admin_headers):
    employee = make_employee(db, company, "Leila", "Sefrioui")
    author = create_user_with_permissions(db, "leila@example.ma")
    author.employee_id = employee.id
    db.commit()

    db.add(CompanyEventLog(
        company_id=company.id, event_name="Address_Changed", created_at=T0, created_by=author.id,
    ))
    db.commit()

    item = client.get("/api/events", headers=admin_headers).json()["items"][0]
    assert item["creator_full_name"] == "Leila Sefrioui"


def test_feed_requires_read_events(client, db):
    user = create_user_with_permissions(db, "noevents@example.ma", ["VIEW_DASHBOARD"])
    response = client.get("/api/events", headers=auth_headers(user))
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["requiredPermissions"] == ["READ_EVENTS"]
