"""Daily task list for one employee on one calendar day."""

import logging
from datetime import date, timedelta

from checklist.core.config import Constants
from checklist.core.logging import span
from checklist.core.recurrence import is_due
from checklist.domain.completion import CompletionStatus
from checklist.models.service_models import DailyTaskItem, DailyTasks, DailyTaskSummary
from checklist.services import assignment_service, completion_ledger


logger = logging.getLogger(__name__)


def _sort_key(item: DailyTaskItem) -> tuple[bool, str, int]:
    # Timed tasks first (by HH:MM), then high < medium < low
    scheduled_time = item.task.scheduled_time
    return (
        scheduled_time is None,
        scheduled_time or "",
        Constants.PRIORITY_RANK.get(item.task.priority, Constants.PRIORITY_RANK["medium"]),
    )


async def tasks_for_date(*, employee_id: str, day: date) -> DailyTasks:
    """Build the employee's task list for ``day``.

    Only active assignments of active templates that are due on ``day`` are
    listed. Each task carries the status of its completion for exactly that
    day, if one exists.

    Args:
        employee_id: Employee whose list to build
        day: Calendar day in the canonical reference frame

    Returns:
        DailyTasks with the ordered items and their summary
    """
    with span("daily_tasks_service.tasks_for_date"):
        active = await assignment_service.get_active_assignments(employee_id=employee_id)
        due = [(assignment, template) for assignment, template in active if is_due(template, day)]

        completions = await completion_ledger.list_completions(
            assignment_ids=[assignment.id for assignment, _ in due],
            start=day,
            end=day + timedelta(days=1),
        )
        by_assignment = {completion.assignment_id: completion for completion in completions}

        items = []
        for assignment, template in due:
            completion = by_assignment.get(assignment.id)
            if completion is None:
                items.append(DailyTaskItem(assignment_id=assignment.id, task=template, status=CompletionStatus.PENDING))
                continue
            items.append(
                DailyTaskItem(
                    assignment_id=assignment.id,
                    task=template,
                    status=completion.status,
                    completed_at=completion.completed_at,
                    photo_url=completion.photo_url,
                    notes=completion.notes,
                    completion_id=completion.id,
                )
            )

        items.sort(key=_sort_key)

        completed = sum(1 for item in items if item.status == CompletionStatus.COMPLETED)
        summary = DailyTaskSummary(total=len(items), completed=completed, pending=len(items) - completed)

        logger.debug("Employee %s has %d tasks due on %s", employee_id, len(items), day.isoformat())
        return DailyTasks(date=day, tasks=items, summary=summary)
