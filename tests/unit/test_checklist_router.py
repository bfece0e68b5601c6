"""HTTP tests for the checklist and employee routes."""

import pytest

from checklist.core.errors import NotFoundError
from checklist.interface.dependencies import SESSION_COOKIE, issue_session_token
from checklist.services import template_service
from tests.unit.helpers import MONDAY_0935, auth_headers


@pytest.mark.unit
class TestAuthentication:
    """Tests for session and role gating."""

    async def test_missing_session_is_401(self, api_client):
        """Test unauthenticated callers get the error envelope."""
        response = api_client.get("/checklist/my-tasks")

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required", "code": "ERR_UNAUTHORIZED"}

    async def test_employee_cannot_manage_templates(self, api_client, employee):
        """Test management routes require a leader role."""
        response = api_client.get("/checklist/tasks", headers=auth_headers(employee))

        assert response.status_code == 403
        assert response.json()["code"] == "ERR_FORBIDDEN"

    async def test_session_cookie_is_accepted(self, api_client, employee):
        """Test the session cookie works without a header."""
        response = api_client.get(
            "/checklist/my-tasks", headers={"Cookie": f"{SESSION_COOKIE}={issue_session_token(employee.id)}"}
        )

        assert response.status_code == 200


@pytest.mark.unit
class TestMyTasks:
    """Tests for GET /checklist/my-tasks."""

    async def test_defaults_to_today(self, api_client, make_template, assign, employee):
        """Test the request clock picks the day."""
        await assign(await make_template(title="Wipe counters"), employee)

        response = api_client.get("/checklist/my-tasks", headers=auth_headers(employee))

        assert response.status_code == 200
        body = response.json()
        assert body["date"] == "2026-10-19"
        assert [item["task"]["title"] for item in body["tasks"]] == ["Wipe counters"]
        assert body["tasks"][0]["status"] == "pending"
        assert body["summary"] == {"total": 1, "completed": 0, "pending": 1}

    async def test_explicit_date(self, api_client, make_template, assign, employee):
        """Test a weekly task only appears on its weekday."""
        await assign(await make_template(title="Tuesday audit", frequency="weekly", scheduled_day=2), employee)

        monday = api_client.get("/checklist/my-tasks", params={"date": "2026-10-19"}, headers=auth_headers(employee))
        tuesday = api_client.get("/checklist/my-tasks", params={"date": "2026-10-20"}, headers=auth_headers(employee))

        assert monday.json()["tasks"] == []
        assert [item["task"]["title"] for item in tuesday.json()["tasks"]] == ["Tuesday audit"]

    @pytest.mark.parametrize("value", ["2026-13-01", "19/10/2026", "2026-2-3", "tomorrow"])
    async def test_bad_date_is_400(self, api_client, employee, value):
        """Test malformed dates are rejected."""
        response = api_client.get("/checklist/my-tasks", params={"date": value}, headers=auth_headers(employee))

        assert response.status_code == 400
        assert response.json()["code"] == "ERR_VALIDATION"

    async def test_unexpected_failure_is_500(self, api_client, employee, monkeypatch):
        """Test internal errors are hidden behind a generic message."""

        async def _explode(**_kwargs):
            raise RuntimeError("database is locked")

        monkeypatch.setattr("checklist.services.daily_tasks_service.tasks_for_date", _explode)

        response = api_client.get("/checklist/my-tasks", headers=auth_headers(employee))

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error", "code": "ERR_INTERNAL"}


@pytest.mark.unit
class TestComplete:
    """Tests for POST and PATCH /checklist/complete."""

    async def test_on_time_completion(self, api_client, make_template, assign, employee):
        """Test completing within the grace window."""
        template = await make_template(title="Open store", scheduled_time="09:00")
        assignment = await assign(template, employee)

        response = api_client.post(
            "/checklist/complete", json={"assignmentId": assignment.id, "notes": "Done"}, headers=auth_headers(employee)
        )

        assert response.status_code == 200
        body = response.json()
        assert body["assignmentId"] == assignment.id
        assert body["completedOnTime"] is True
        assert body["notes"] == "Done"
        assert body["status"] == "completed"

    async def test_late_completion(self, api_client, clock, make_template, assign, employee):
        """Test completing after the grace window."""
        assignment = await assign(await make_template(title="Open store", scheduled_time="09:00"), employee)
        clock["now"] = MONDAY_0935

        response = api_client.post(
            "/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee)
        )

        assert response.json()["completedOnTime"] is False

    async def test_completion_shows_in_my_tasks(self, api_client, make_template, assign, employee):
        """Test a completion flips the task's status for that day."""
        assignment = await assign(await make_template(title="Wipe counters"), employee)
        api_client.post("/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee))

        body = api_client.get("/checklist/my-tasks", headers=auth_headers(employee)).json()

        assert body["tasks"][0]["status"] == "completed"
        assert body["summary"]["completed"] == 1

    async def test_missing_photo_is_400(self, api_client, make_template, assign, employee, patched_db):
        """Test photo-required tasks reject submissions without a photo."""
        assignment = await assign(await make_template(title="Photo the display", requires_photo=True), employee)

        response = api_client.post(
            "/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee)
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Photo evidence is required for this task", "code": "ERR_VALIDATION"}
        assert patched_db.count("task_completions") == 0

    async def test_missing_assignment_id_is_400(self, api_client, employee):
        """Test the body is validated."""
        response = api_client.post("/checklist/complete", json={}, headers=auth_headers(employee))

        assert response.status_code == 400
        assert "assignmentId" in response.json()["error"]

    async def test_other_employees_assignment_is_403(self, api_client, make_template, assign, employee, other_employee):
        """Test employees can only complete their own assignments."""
        assignment = await assign(await make_template(title="Wipe counters"), other_employee)

        response = api_client.post(
            "/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee)
        )

        assert response.status_code == 403

    async def test_unknown_assignment_is_404(self, api_client, employee):
        """Test completing a missing assignment."""
        response = api_client.post("/checklist/complete", json={"assignmentId": "9999"}, headers=auth_headers(employee))

        assert response.status_code == 404
        assert response.json()["code"] == "ERR_NOT_FOUND"

    async def test_leader_completing_unknown_assignment_is_403(self, api_client, leader):
        """Test the role check runs before the assignment lookup."""
        headers = auth_headers(leader)

        response = api_client.post("/checklist/complete", json={"assignmentId": "9999"}, headers=headers)

        assert response.status_code == 403
        assert response.json()["code"] == "ERR_FORBIDDEN"

    async def test_patch_updates_evidence(self, api_client, make_template, assign, employee):
        """Test PATCH changes notes and keeps the on-time flag."""
        assignment = await assign(await make_template(title="Wipe counters"), employee)
        created = api_client.post(
            "/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee)
        ).json()

        response = api_client.patch(
            "/checklist/complete",
            json={"completionId": created["id"], "notes": "Used the blue cloth"},
            headers=auth_headers(employee),
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "Used the blue cloth"
        assert response.json()["completedOnTime"] == created["completedOnTime"]

    async def test_patch_someone_elses_completion_is_403(
        self, api_client, make_template, assign, employee, other_employee
    ):
        """Test only the owner may patch a completion."""
        assignment = await assign(await make_template(title="Wipe counters"), employee)
        created = api_client.post(
            "/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee)
        ).json()

        response = api_client.patch(
            "/checklist/complete",
            json={"completionId": created["id"], "notes": "x"},
            headers=auth_headers(other_employee),
        )

        assert response.status_code == 403


@pytest.mark.unit
class TestStatistics:
    """Tests for the statistics routes."""

    async def test_own_statistics(self, api_client, make_template, assign, employee):
        """Test employees see their own compliance."""
        assignment = await assign(await make_template(title="Wipe counters"), employee)
        api_client.post("/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee))

        response = api_client.get("/checklist/statistics", headers=auth_headers(employee))

        assert response.status_code == 200
        body = response.json()
        assert body["daily"] == {"total": 1, "completed": 1, "pending": 0, "compliance": 100}
        assert body["onTimeRate"] == 100
        assert body["period"]["weekStart"] == "2026-10-19"

    async def test_other_employee_statistics_is_403(self, api_client, employee, other_employee):
        """Test non-admins cannot read someone else's statistics."""
        response = api_client.get(
            "/checklist/statistics", params={"employeeId": other_employee.id}, headers=auth_headers(employee)
        )

        assert response.status_code == 403

    async def test_admin_reads_any_employee(self, api_client, admin, employee):
        """Test admins can pick the employee."""
        response = api_client.get(
            "/checklist/statistics", params={"employeeId": employee.id}, headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert response.json()["employee"]["id"] == employee.id

    async def test_team_report_admin_only(self, api_client, make_template, assign, admin, leader, employee):
        """Test the team report is restricted to admins."""
        await assign(await make_template(title="Wipe counters"), employee)

        denied = api_client.get("/checklist/statistics/team", headers=auth_headers(leader))
        allowed = api_client.get("/checklist/statistics/team", headers=auth_headers(admin))

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()["summary"] == {"totalEmployees": 1, "averageCompliance": 0}


@pytest.mark.unit
class TestTemplateRoutes:
    """Tests for the /checklist/tasks routes."""

    async def test_create_and_list(self, api_client, leader):
        """Test leaders create templates and see them with schedule info."""
        created = api_client.post(
            "/checklist/tasks",
            json={"title": "Receive delivery", "frequency": "weekly", "scheduledDay": 1, "scheduledTime": "09:00"},
            headers=auth_headers(leader),
        )

        assert created.status_code == 200
        assert created.json()["createdById"] == leader.id
        assert created.json()["scheduleLabel"] == "every Monday at 9:00 AM"

        listed = api_client.get("/checklist/tasks", headers=auth_headers(leader)).json()
        assert [template["title"] for template in listed] == ["Receive delivery"]
        assert listed[0]["assignments"] == []

    async def test_out_of_range_day_is_400(self, api_client, leader):
        """Test weekly templates reject day 7."""
        response = api_client.post(
            "/checklist/tasks",
            json={"title": "Receive delivery", "frequency": "weekly", "scheduledDay": 7},
            headers=auth_headers(leader),
        )

        assert response.status_code == 400
        assert "scheduledDay" in response.json()["error"]

    async def test_detail_includes_recent_completions(self, api_client, make_template, assign, leader, employee):
        """Test the detail view nests each assignment's completions."""
        template = await make_template(title="Wipe counters")
        assignment = await assign(template, employee)
        api_client.post("/checklist/complete", json={"assignmentId": assignment.id}, headers=auth_headers(employee))

        response = api_client.get(f"/checklist/tasks/{template.id}", headers=auth_headers(leader))

        body = response.json()
        assert body["assignments"][0]["employee"]["id"] == employee.id
        assert len(body["assignments"][0]["recentCompletions"]) == 1

    async def test_patch_and_delete(self, api_client, make_template, leader):
        """Test partial update then deletion."""
        template = await make_template(title="Mop")

        patched = api_client.patch(
            f"/checklist/tasks/{template.id}", json={"priority": "high"}, headers=auth_headers(leader)
        )
        deleted = api_client.delete(f"/checklist/tasks/{template.id}", headers=auth_headers(leader))

        assert patched.json()["priority"] == "high"
        assert patched.json()["title"] == "Mop"
        assert deleted.json() == {"success": True}
        with pytest.raises(NotFoundError):
            await template_service.get_template(template_id=template.id)

    async def test_unknown_template_is_404(self, api_client, leader):
        """Test reading a missing template."""
        response = api_client.get("/checklist/tasks/9999", headers=auth_headers(leader))

        assert response.status_code == 404


@pytest.mark.unit
class TestAssignmentRoutes:
    """Tests for the /checklist/assignments routes."""

    async def test_assign_and_list(self, api_client, make_template, leader, employee):
        """Test a single assignment round trip."""
        template = await make_template(title="Mop")

        created = api_client.post(
            "/checklist/assignments",
            json={"taskTemplateId": template.id, "employeeId": employee.id},
            headers=auth_headers(leader),
        )
        listed = api_client.get(
            "/checklist/assignments", params={"taskTemplateId": template.id}, headers=auth_headers(leader)
        )

        assert created.status_code == 200
        assert created.json()["employee"]["name"] == "Ana Employee"
        assert [a["id"] for a in listed.json()] == [created.json()["id"]]

    async def test_bulk(self, api_client, make_template, leader, employee, other_employee):
        """Test bulk assignment reports created and skipped counts."""
        template = await make_template(title="Mop")
        api_client.post(
            "/checklist/assignments",
            json={"taskTemplateId": template.id, "employeeId": employee.id},
            headers=auth_headers(leader),
        )

        response = api_client.post(
            "/checklist/assignments/bulk",
            json={"taskTemplateId": template.id, "employeeIds": [employee.id, other_employee.id]},
            headers=auth_headers(leader),
        )

        body = response.json()
        assert body["success"] is True
        assert body["created"] == 1
        assert body["skipped"] == 1

    async def test_bulk_empty_list_is_400(self, api_client, make_template, leader):
        """Test bulk assignment needs at least one employee."""
        template = await make_template(title="Mop")

        response = api_client.post(
            "/checklist/assignments/bulk",
            json={"taskTemplateId": template.id, "employeeIds": []},
            headers=auth_headers(leader),
        )

        assert response.status_code == 400

    async def test_delete_requires_assignment_id(self, api_client, leader):
        """Test DELETE without assignmentId is a validation error."""
        response = api_client.delete("/checklist/assignments", headers=auth_headers(leader))

        assert response.status_code == 400
        assert response.json()["code"] == "ERR_VALIDATION"

    async def test_delete(self, api_client, make_template, assign, leader, employee):
        """Test removing an assignment."""
        assignment = await assign(await make_template(title="Mop"), employee)

        response = api_client.delete(
            "/checklist/assignments", params={"assignmentId": assignment.id}, headers=auth_headers(leader)
        )

        assert response.json() == {"success": True}


@pytest.mark.unit
class TestEmployeesRoute:
    """Tests for GET /employees."""

    async def test_lists_by_name(self, api_client, leader, employee, other_employee, admin):
        """Test the directory is sorted by name and exposes no roles."""
        response = api_client.get("/employees", headers=auth_headers(leader))

        assert [user["name"] for user in response.json()] == [
            "Adrian Admin",
            "Ana Employee",
            "Bruno Employee",
            "Lucia Leader",
        ]
        assert set(response.json()[0]) == {"id", "name", "email"}

    async def test_role_filter(self, api_client, leader, employee, other_employee):
        """Test filtering by role."""
        response = api_client.get("/employees", params={"role": "employee"}, headers=auth_headers(leader))

        assert [user["id"] for user in response.json()] == [employee.id, other_employee.id]

    async def test_employee_is_forbidden(self, api_client, employee):
        """Test employees cannot browse the directory."""
        response = api_client.get("/employees", headers=auth_headers(employee))

        assert response.status_code == 403


@pytest.mark.unit
def test_health_check(api_client):
    """Test the health endpoint needs no session."""
    response = api_client.get("/health")

    assert response.json() == {"status": "healthy"}
