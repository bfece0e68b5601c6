"""Checklist HTTP routes.

Route names double as log tags: an unexpected failure inside a handler is
logged under the name of the route that raised it.
"""

import logging
from collections import defaultdict
from datetime import datetime

from fastapi import APIRouter, Depends, Query

from checklist.core.config import Constants
from checklist.core.day_boundary import calendar_date, parse_date_param
from checklist.domain.completion import TaskCompletion
from checklist.domain.create_models import (
    AssignmentCreate,
    BulkAssignmentCreate,
    CompletionCreate,
    TaskTemplateCreate,
)
from checklist.domain.update_models import CompletionPatch, TaskTemplateUpdate
from checklist.domain.user import User
from checklist.interface.dependencies import get_current_user, get_now
from checklist.models.service_models import (
    AssignmentDetail,
    BulkAssignmentResult,
    ComplianceStats,
    DailyTasks,
    DeleteResult,
    TeamComplianceReport,
    TemplateView,
)
from checklist.services import (
    assignment_service,
    completion_ledger,
    compliance_service,
    daily_tasks_service,
    template_service,
)
from checklist.services.authorization import Action, EmployeeScope, authorize


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/checklist", tags=["checklist"])


# --- Employee views ---


@router.get("/my-tasks", name="checklist_my_tasks_get")
async def get_my_tasks(
    date_param: str | None = Query(default=None, alias="date", description="YYYY-MM-DD, defaults to today"),
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> DailyTasks:
    """The caller's tasks due on one calendar day."""
    actor = authorize(Action.VIEW_OWN_TASKS, user)
    day = parse_date_param(date_param) if date_param else calendar_date(now)
    return await daily_tasks_service.tasks_for_date(employee_id=actor.id, day=day)


@router.post("/complete", name="checklist_complete_post")
async def post_complete(
    payload: CompletionCreate,
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> TaskCompletion:
    """Record (or resubmit) the completion of one of the caller's assignments."""
    actor = authorize(Action.VIEW_OWN_TASKS, user)
    return await completion_ledger.submit_completion(actor=actor, payload=payload, now=now)


@router.patch("/complete", name="checklist_complete_patch")
async def patch_complete(
    patch: CompletionPatch,
    user: User | None = Depends(get_current_user),
) -> TaskCompletion:
    """Update the photo or notes of one of the caller's completions."""
    actor = authorize(Action.VIEW_OWN_TASKS, user)
    return await completion_ledger.amend_completion(actor=actor, patch=patch)


@router.get("/statistics", name="checklist_statistics_get")
async def get_statistics(
    employee_id: str | None = Query(default=None, alias="employeeId"),
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> ComplianceStats:
    """Compliance statistics for the caller, or for any employee when the caller is an admin."""
    actor = authorize(Action.VIEW_OWN_TASKS, user)
    target_id = employee_id or actor.id
    authorize(Action.VIEW_STATISTICS, actor, EmployeeScope(employee_id=target_id))
    return await compliance_service.get_compliance_stats(employee_id=target_id, now=now)


@router.get("/statistics/team", name="checklist_statistics_team_get")
async def get_team_statistics(
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> TeamComplianceReport:
    """Today's compliance for every employee with an active assignment."""
    authorize(Action.VIEW_TEAM_STATISTICS, user)
    return await compliance_service.get_team_report(now=now)


# --- Task templates ---


@router.get("/tasks", name="checklist_tasks_get")
async def get_tasks(
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> list[TemplateView]:
    """All templates, newest first, each with its assignments."""
    authorize(Action.MANAGE_TEMPLATES, user)
    templates = await template_service.list_templates()
    assignments = await assignment_service.list_assignments()

    by_template: defaultdict[str, list[AssignmentDetail]] = defaultdict(list)
    for assignment in assignments:
        by_template[assignment.task_template_id].append(assignment.model_copy(update={"task_template": None}))

    today = calendar_date(now)
    return [
        template_service.to_view(template, today=today, assignments=by_template[template.id])
        for template in templates
    ]


@router.post("/tasks", name="checklist_tasks_post")
async def post_task(
    payload: TaskTemplateCreate,
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> TemplateView:
    """Create a task template."""
    actor = authorize(Action.MANAGE_TEMPLATES, user)
    template = await template_service.create_template(payload=payload, created_by_id=actor.id)
    return template_service.to_view(template, today=calendar_date(now))


@router.get("/tasks/{task_id}", name="checklist_task_get")
async def get_task(
    task_id: str,
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> TemplateView:
    """One template with its assignments and their most recent completions."""
    authorize(Action.MANAGE_TEMPLATES, user)
    template = await template_service.get_template(template_id=task_id)
    assignments = await assignment_service.list_assignments(task_template_id=task_id)

    detailed = []
    for assignment in assignments:
        recent = await completion_ledger.list_recent_completions(
            assignment_id=assignment.id, limit=Constants.RECENT_COMPLETIONS_LIMIT
        )
        detailed.append(assignment.model_copy(update={"task_template": None, "recent_completions": recent}))

    return template_service.to_view(template, today=calendar_date(now), assignments=detailed)


@router.patch("/tasks/{task_id}", name="checklist_task_patch")
async def patch_task(
    task_id: str,
    payload: TaskTemplateUpdate,
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> TemplateView:
    """Partially update a task template."""
    authorize(Action.MANAGE_TEMPLATES, user)
    template = await template_service.update_template(template_id=task_id, payload=payload)
    return template_service.to_view(template, today=calendar_date(now))


@router.delete("/tasks/{task_id}", name="checklist_task_delete")
async def delete_task(
    task_id: str,
    user: User | None = Depends(get_current_user),
) -> DeleteResult:
    """Delete a template together with its assignments and completions."""
    authorize(Action.MANAGE_TEMPLATES, user)
    await template_service.delete_template(template_id=task_id)
    return DeleteResult()


# --- Assignments ---


@router.get("/assignments", name="checklist_assignments_get")
async def get_assignments(
    task_template_id: str | None = Query(default=None, alias="taskTemplateId"),
    user: User | None = Depends(get_current_user),
) -> list[AssignmentDetail]:
    """All assignments, newest first."""
    authorize(Action.MANAGE_ASSIGNMENTS, user)
    return await assignment_service.list_assignments(task_template_id=task_template_id)


@router.post("/assignments", name="checklist_assignments_post")
async def post_assignment(
    payload: AssignmentCreate,
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> AssignmentDetail:
    """Assign a template to one employee."""
    authorize(Action.MANAGE_ASSIGNMENTS, user)
    return await assignment_service.assign_task(
        task_template_id=payload.task_template_id,
        employee_id=payload.employee_id,
        now=now,
    )


@router.post("/assignments/bulk", name="checklist_assignments_bulk_post")
async def post_bulk_assignment(
    payload: BulkAssignmentCreate,
    user: User | None = Depends(get_current_user),
    now: datetime = Depends(get_now),
) -> BulkAssignmentResult:
    """Assign a template to several employees at once."""
    authorize(Action.MANAGE_ASSIGNMENTS, user)
    return await assignment_service.bulk_assign(
        task_template_id=payload.task_template_id,
        employee_ids=payload.employee_ids,
        now=now,
    )


@router.delete("/assignments", name="checklist_assignments_delete")
async def delete_assignment(
    assignment_id: str = Query(..., alias="assignmentId", min_length=1),
    user: User | None = Depends(get_current_user),
) -> DeleteResult:
    """Remove an assignment and its completions."""
    authorize(Action.MANAGE_ASSIGNMENTS, user)
    await assignment_service.remove_assignment(assignment_id=assignment_id)
    return DeleteResult()
