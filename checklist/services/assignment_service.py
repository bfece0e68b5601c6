"""Assignment lifecycle: binding templates to employees."""

import logging
from datetime import datetime

from checklist.core import db_client
from checklist.core.db_client import sanitize_param
from checklist.core.errors import InvalidInputError, NotFoundError
from checklist.core.logging import span
from checklist.domain.assignment import TaskAssignment
from checklist.domain.template import TaskTemplate
from checklist.models.service_models import AssignmentDetail, BulkAssignmentResult
from checklist.services import template_service, user_service


logger = logging.getLogger(__name__)


async def get_assignment(*, assignment_id: str) -> TaskAssignment:
    """Fetch an assignment by ID.

    Raises:
        NotFoundError: If the assignment does not exist
    """
    try:
        record = await db_client.get_record(collection="task_assignments", record_id=assignment_id)
    except KeyError as e:
        raise NotFoundError(f"Assignment not found: {assignment_id}") from e
    return TaskAssignment(**record)


async def _find_assignment(*, task_template_id: str, employee_id: str) -> TaskAssignment | None:
    record = await db_client.get_first_record(
        collection="task_assignments",
        filter_query=(
            f'task_template_id = "{sanitize_param(task_template_id)}" && employee_id = "{sanitize_param(employee_id)}"'
        ),
    )
    return TaskAssignment(**record) if record else None


async def assign_task(*, task_template_id: str, employee_id: str, now: datetime) -> AssignmentDetail:
    """Assign one template to one employee.

    Raises:
        NotFoundError: If the template or employee does not exist
        InvalidInputError: If the pair is already assigned
    """
    with span("assignment_service.assign_task"):
        template = await template_service.get_template(template_id=task_template_id)
        employee = await user_service.get_user(user_id=employee_id)

        if await _find_assignment(task_template_id=task_template_id, employee_id=employee_id):
            raise InvalidInputError("Task is already assigned to this employee")

        record = await db_client.create_record(
            collection="task_assignments",
            data={
                "task_template_id": task_template_id,
                "employee_id": employee_id,
                "is_active": True,
                "assigned_at": now.isoformat(),
            },
        )
        logger.info("Assigned template %s to employee %s", task_template_id, employee_id)

        return AssignmentDetail(
            **record,
            employee=user_service.to_summary(employee),
            task_template=template,
        )


async def bulk_assign(*, task_template_id: str, employee_ids: list[str], now: datetime) -> BulkAssignmentResult:
    """Assign one template to several employees, skipping pairs that already exist.

    Raises:
        InvalidInputError: If employee_ids is empty
        NotFoundError: If the template or any employee does not exist
    """
    with span("assignment_service.bulk_assign"):
        if not employee_ids:
            raise InvalidInputError("employeeIds array cannot be empty")

        requested = list(dict.fromkeys(employee_ids))
        await template_service.get_template(template_id=task_template_id)

        employees = await user_service.get_users_by_ids(user_ids=requested)
        missing = [employee_id for employee_id in requested if employee_id not in employees]
        if missing:
            raise NotFoundError(f"One or more employees not found: {', '.join(missing)}")

        existing = await db_client.list_all_records(
            collection="task_assignments",
            filter_query=f'task_template_id = "{sanitize_param(task_template_id)}"',
        )
        already_assigned = {record["employee_id"] for record in existing}

        created = 0
        for employee_id in requested:
            if employee_id in already_assigned:
                continue
            await db_client.create_record(
                collection="task_assignments",
                data={
                    "task_template_id": task_template_id,
                    "employee_id": employee_id,
                    "is_active": True,
                    "assigned_at": now.isoformat(),
                },
            )
            created += 1

        records = await db_client.list_all_records(
            collection="task_assignments",
            filter_query=f'task_template_id = "{sanitize_param(task_template_id)}"',
        )
        assignments = [
            AssignmentDetail(**record, employee=user_service.to_summary(employees[record["employee_id"]]))
            for record in records
            if record["employee_id"] in employees
        ]

        logger.info(
            "Bulk assigned template %s: %d created, %d skipped",
            task_template_id,
            created,
            len(employee_ids) - created,
        )
        return BulkAssignmentResult(created=created, skipped=len(employee_ids) - created, assignments=assignments)


async def remove_assignment(*, assignment_id: str) -> None:
    """Delete an assignment and, by cascade, its completions.

    Raises:
        NotFoundError: If the assignment does not exist
    """
    with span("assignment_service.remove_assignment"):
        await get_assignment(assignment_id=assignment_id)
        await db_client.delete_record(collection="task_assignments", record_id=assignment_id)
        logger.info("Removed assignment %s", assignment_id)


async def list_assignments(*, task_template_id: str | None = None) -> list[AssignmentDetail]:
    """List assignments newest first, enriched with employee and template."""
    with span("assignment_service.list_assignments"):
        filter_query = f'task_template_id = "{sanitize_param(task_template_id)}"' if task_template_id else ""
        records = await db_client.list_all_records(
            collection="task_assignments", filter_query=filter_query, sort="-assigned_at"
        )

        users = await user_service.get_users_by_ids(user_ids=[record["employee_id"] for record in records])
        templates = await template_service.get_templates_by_ids(
            template_ids=[record["task_template_id"] for record in records]
        )

        details = []
        for record in records:
            user = users.get(record["employee_id"])
            details.append(
                AssignmentDetail(
                    **record,
                    employee=user_service.to_summary(user) if user else None,
                    task_template=templates.get(record["task_template_id"]),
                )
            )
        return details


async def get_active_assignments(*, employee_id: str) -> list[tuple[TaskAssignment, TaskTemplate]]:
    """Active assignments of an employee whose template is also active, paired with that template."""
    with span("assignment_service.get_active_assignments"):
        records = await db_client.list_all_records(
            collection="task_assignments",
            filter_query=f'employee_id = "{sanitize_param(employee_id)}" && is_active = "true"',
            sort="+id",
        )
        assignments = [TaskAssignment(**record) for record in records]
        templates = await template_service.get_templates_by_ids(
            template_ids=[assignment.task_template_id for assignment in assignments]
        )

        active = []
        for assignment in assignments:
            template = templates.get(assignment.task_template_id)
            if template is not None and template.is_active:
                active.append((assignment, template))
        return active


async def list_assigned_employee_ids() -> list[str]:
    """IDs of employees holding at least one active assignment."""
    records = await db_client.list_all_records(collection="task_assignments", filter_query='is_active = "true"')
    return sorted({record["employee_id"] for record in records})
