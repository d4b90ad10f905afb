import pytest
from django.utils import timezone

from bakery.models_attendance import SessionStatus, WorkSession
from bakery.services import attendance_service


CLOCK = "/api/employee/clock/"
BREAK = "/api/employee/break/"
STATUS = "/api/employee/status/"
ADMIN_SESSIONS = "/api/admin/work-sessions/"
ALERTS = "/api/admin/alerts/"


@pytest.mark.django_db
def test_clock_requires_authentication(api_client):
    resp = api_client.post(CLOCK, {"action": "checkin"}, format="json")
    assert resp.status_code == 401


@pytest.mark.django_db
def test_check_in_twice_returns_typed_error(employee_api_client):
    resp = employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")
    assert resp.status_code == 201
    assert resp.json()["workSession"]["session_number"] == 1

    resp = employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "already_clocked_in"
    assert body["error"]


@pytest.mark.django_db
def test_checkout_requires_exit_type(employee_api_client):
    employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")

    resp = employee_api_client.post(CLOCK, {"action": "checkout"}, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "invalid"
    assert "exitType" in resp.json()["details"]


@pytest.mark.django_db
def test_unknown_exit_type_is_rejected(employee_api_client):
    employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")

    resp = employee_api_client.post(CLOCK, {"action": "checkout", "exitType": "vacation"}, format="json")

    assert resp.status_code == 400


@pytest.mark.django_db
def test_meal_flow_through_clock_endpoint(employee_api_client, employee):
    employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")

    resp = employee_api_client.post(CLOCK, {"action": "checkout", "exitType": "meal"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["breakSession"]["break_type"] == "meal"

    resp = employee_api_client.get(STATUS)
    assert resp.json()["status"] == "on_meal_break"
    assert resp.json()["mealTakenToday"] is True

    resp = employee_api_client.post(CLOCK, {"action": "return_from_break"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["type"] == "meal_return"

    resp = employee_api_client.post(CLOCK, {"action": "checkout", "exitType": "meal"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "meal_already_taken"


@pytest.mark.django_db
def test_final_checkout_returns_hours(employee_api_client, employee):
    employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")

    resp = employee_api_client.post(CLOCK, {"action": "checkout", "exitType": "final"}, format="json")

    assert resp.status_code == 200
    body = resp.json()
    assert "hoursWorked" in body
    assert "netHoursWorked" in body
    assert body["workSession"]["status"] == SessionStatus.FINISHED


@pytest.mark.django_db
def test_break_endpoint_defaults_to_meal(employee_api_client):
    employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")

    resp = employee_api_client.post(BREAK, {"action": "start"}, format="json")
    assert resp.status_code == 201
    assert resp.json()["breakSession"]["break_type"] == "meal"
    assert resp.json()["breakSession"]["max_allowed"] == 60

    resp = employee_api_client.post(BREAK, {"action": "start", "breakType": "break"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "break_already_active"

    resp = employee_api_client.post(BREAK, {"action": "end"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["breakSession"]["end_time"] is not None


@pytest.mark.django_db
def test_end_break_without_break(employee_api_client):
    employee_api_client.post(CLOCK, {"action": "checkin"}, format="json")

    resp = employee_api_client.post(BREAK, {"action": "end"}, format="json")

    assert resp.status_code == 400
    assert resp.json()["code"] == "no_active_break"


@pytest.mark.django_db
def test_status_before_check_in(employee_api_client):
    resp = employee_api_client.get(STATUS)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "not_checked_in"
    assert body["currentSession"] is None
    assert body["alerts"] == []


# ---------- admin ----------
@pytest.mark.django_db
def test_employee_cannot_use_admin_work_sessions(employee_api_client):
    resp = employee_api_client.get(ADMIN_SESSIONS)
    assert resp.status_code == 403


@pytest.mark.django_db
def test_manager_checks_employee_in_and_out(manager_api_client, employee):
    resp = manager_api_client.post(ADMIN_SESSIONS, {"action": "checkin", "employeeId": employee.id}, format="json")
    assert resp.status_code == 201
    assert resp.json()["workSession"]["is_open"] is True
    assert WorkSession.objects.filter(user=employee, status=SessionStatus.OPEN).exists()

    resp = manager_api_client.get(ADMIN_SESSIONS)
    assert resp.status_code == 200
    assert resp.json()["stats"]["activeEmployees"] == 1
    assert len(resp.json()["activeSessions"]) == 1

    resp = manager_api_client.post(
        ADMIN_SESSIONS, {"action": "checkout", "employeeId": employee.id, "notes": "forgot to clock out"}, format="json"
    )
    assert resp.status_code == 200
    assert resp.json()["exitType"] == "final"
    assert resp.json()["workSession"]["is_open"] is False
    assert resp.json()["workSession"]["notes"] == "forgot to clock out"
    assert not WorkSession.objects.filter(user=employee, status=SessionStatus.OPEN).exists()


@pytest.mark.django_db
def test_admin_action_for_unknown_employee(manager_api_client):
    resp = manager_api_client.post(ADMIN_SESSIONS, {"action": "checkin", "employeeId": 999999}, format="json")

    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


@pytest.mark.django_db
def test_admin_sessions_rejects_bad_date(manager_api_client):
    resp = manager_api_client.get(ADMIN_SESSIONS, {"date": "yesterday"})

    assert resp.status_code == 400


@pytest.mark.django_db
def test_employee_cannot_see_alerts(employee_api_client):
    assert employee_api_client.get(ALERTS).status_code == 403


@pytest.mark.django_db
def test_alerts_board_reports_late_arrival(manager_api_client, employee, at):
    attendance_service.check_in(employee, now=at(8, 40, day=timezone.localdate()))

    resp = manager_api_client.get(ALERTS)

    assert resp.status_code == 200
    body = resp.json()
    assert body["summary"] == {"total": 1, "errors": 1, "warnings": 0, "info": 0}
    alert = body["alerts"][0]
    assert alert["type"] == "late_arrival"
    assert alert["minutesLate"] == 40
    assert alert["employee"] == {"id": employee.id, "name": employee.name, "email": employee.email}
