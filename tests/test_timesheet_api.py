from datetime import date

from fastapi import status


def test_submit_draft_timesheet(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"], hours=10, status="draft")

    response = client.post(f"/api/timesheets/{timesheet.id}/submit", headers=auth_headers(people["carol"]))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["status"] == "submitted"
    assert data["regular_hours"] == 8.0
    assert data["overtime_hours"] == 2.0


def test_submit_someone_elses_timesheet(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"], status="draft")

    response = client.post(f"/api/timesheets/{timesheet.id}/submit", headers=auth_headers(people["dan"]))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_resubmit_is_invalid_state(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"])

    response = client.post(f"/api/timesheets/{timesheet.id}/submit", headers=auth_headers(people["carol"]))

    assert response.status_code == status.HTTP_409_CONFLICT


def test_approve_timesheet(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"], hours=9)

    response = client.post(
        f"/api/timesheets/{timesheet.id}/approve",
        json={"comment": "Thanks"},
        headers=auth_headers(people["erin"]),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()["data"]
    assert data["status"] == "approved"
    assert data["reviewed_by"] == people["erin"].id
    assert data["overtime_hours"] == 1.0


def test_reject_timesheet_then_audit(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["frank"])

    response = client.post(
        f"/api/timesheets/{timesheet.id}/reject",
        json={"reason": "Clock-out missing"},
        headers=auth_headers(people["grace"]),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["comments"] == "Clock-out missing"

    audit = client.get(f"/api/timesheets/{timesheet.id}/audit", headers=auth_headers(people["frank"]))
    assert [e["new_status"] for e in audit.json()["data"]] == ["rejected"]


def test_approving_draft_is_invalid_state(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"], status="draft")

    response = client.post(f"/api/timesheets/{timesheet.id}/approve", headers=auth_headers(people["bob"]))

    assert response.status_code == status.HTTP_409_CONFLICT


def test_outside_department_cannot_read(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"])

    response = client.get(f"/api/timesheets/{timesheet.id}", headers=auth_headers(people["frank"]))

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_timesheets_by_status(client, people, make_timesheet, auth_headers):
    make_timesheet(people["carol"], status="draft")
    submitted = make_timesheet(people["carol"])

    response = client.get("/api/timesheets", params={"status": "submitted"}, headers=auth_headers(people["bob"]))

    assert [t["id"] for t in response.json()["data"]] == [submitted.id]


def test_bulk_approve_timesheets(client, people, make_timesheet, auth_headers):
    sheets = [make_timesheet(people["frank"]) for _ in range(3)]

    response = client.post(
        "/api/timesheets/bulk-approve",
        json={"ids": [t.id for t in sheets]},
        headers=auth_headers(people["grace"]),
    )

    data = response.json()["data"]
    assert data["succeeded"] == [t.id for t in sheets]
    assert data["failed"] == []


def test_create_draft_timesheet(client, people, auth_headers):
    response = client.post(
        "/api/timesheets",
        json={"date": "2025-03-10", "hours": 8, "clock_in": "09:00", "clock_out": "17:00"},
        headers=auth_headers(people["carol"]),
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()["data"]
    assert data["status"] == "draft"
    assert data["employee_id"] == people["carol"].id
    assert data["department"] == "Engineering"
    assert data["hours"] == 8


def test_create_then_submit_notifies_reviewers(client, people, auth_headers):
    created = client.post("/api/timesheets", json={"date": "2025-03-10", "hours": 9},
                          headers=auth_headers(people["frank"]))
    timesheet_id = created.json()["data"]["id"]

    submitted = client.post(f"/api/timesheets/{timesheet_id}/submit", headers=auth_headers(people["frank"]))
    assert submitted.json()["data"]["status"] == "submitted"

    inbox = client.get("/api/notifications", headers=auth_headers(people["grace"])).json()["data"]
    assert [n["related_entity_id"] for n in inbox] == [timesheet_id]
    assert inbox[0]["type"] == "approval_required"


def test_create_timesheet_hours_out_of_range(client, people, auth_headers):
    response = client.post("/api/timesheets", json={"date": "2025-03-10", "hours": 30},
                           headers=auth_headers(people["carol"]))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["code"] == "VALIDATION_ERROR"


def test_create_timesheet_bad_clock_format(client, people, auth_headers):
    response = client.post("/api/timesheets", json={"date": "2025-03-10", "hours": 8, "clock_in": "9am"},
                           headers=auth_headers(people["carol"]))

    assert response.status_code == 422
    assert response.json()["errors"][0]["field"] == "clock_in"


def test_update_draft_timesheet(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"], hours=8, status="draft", day=date(2025, 3, 10))

    response = client.put(f"/api/timesheets/{timesheet.id}", json={"hours": 6.5},
                          headers=auth_headers(people["carol"]))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["data"]["hours"] == 6.5
    assert response.json()["data"]["status"] == "draft"


def test_update_submitted_timesheet_is_invalid_state(client, people, make_timesheet, auth_headers):
    timesheet = make_timesheet(people["carol"])

    response = client.put(f"/api/timesheets/{timesheet.id}", json={"hours": 6.5},
                          headers=auth_headers(people["carol"]))

    assert response.status_code == status.HTTP_409_CONFLICT


def test_manager_page_is_filled_from_reporting_line(client, people, make_timesheet, auth_headers):
    mine = make_timesheet(people["carol"])
    make_timesheet(people["frank"], day=date(2026, 10, 13))
    make_timesheet(people["frank"], day=date(2026, 10, 14))

    response = client.get("/api/timesheets", params={"limit": 1}, headers=auth_headers(people["bob"]))

    body = response.json()
    assert [t["id"] for t in body["data"]] == [mine.id]
    assert body["metadata"]["total"] == 1
