"""Completion ledger: at most one completion per (assignment, calendar day).

Completions are keyed by the assignment and the midnight boundary of the day
they are for. Recording the same day twice resubmits instead of duplicating:
the database upsert keeps one row, overwrites status and completed_at, and
keeps the earlier photo/notes unless new non-empty values arrive.

On-time policy: a template with a scheduled time is on time when the
submission happens no later than scheduled time + grace period on that day.
The submission moment is the real wall-clock time of the request, even when
backfilling a past day. completed_on_time is fixed by the first submission.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any

from checklist.core import db_client
from checklist.core.config import Constants, settings
from checklist.core.day_boundary import calendar_date, day_key, day_window, parse_scheduled_date, start_of_day
from checklist.core.db_client import sanitize_param
from checklist.core.errors import InvalidInputError, NotFoundError
from checklist.core.logging import span
from checklist.domain.assignment import TaskAssignment
from checklist.domain.completion import CompletionStatus, TaskCompletion
from checklist.domain.create_models import CompletionCreate
from checklist.domain.template import TaskTemplate
from checklist.domain.update_models import CompletionPatch
from checklist.domain.user import User
from checklist.services import assignment_service, template_service
from checklist.services.authorization import Action, EmployeeScope, authorize


logger = logging.getLogger(__name__)

_COLLECTION = "task_completions"


def grace_period() -> timedelta:
    """Tolerance after a scheduled time within which completion still counts as on time."""
    return timedelta(minutes=settings.grace_period_minutes)


def compute_completed_on_time(*, template: TaskTemplate, day: date, submitted_at: datetime) -> bool:
    """Judge a submission against the template's scheduled time on ``day``."""
    if not template.scheduled_time:
        return True

    hours, minutes = (int(part) for part in template.scheduled_time.split(":"))
    scheduled_at = start_of_day(day) + timedelta(hours=hours, minutes=minutes)
    return submitted_at <= scheduled_at + grace_period()


async def get_completion(*, completion_id: str) -> TaskCompletion:
    """Fetch a completion by ID.

    Raises:
        NotFoundError: If the completion does not exist
    """
    try:
        record = await db_client.get_record(collection=_COLLECTION, record_id=completion_id)
    except KeyError as e:
        raise NotFoundError(f"Completion not found: {completion_id}") from e
    return TaskCompletion(**record)


def _window_filter(start: datetime, end: datetime) -> str:
    return f'scheduled_date >= "{start.isoformat()}" && scheduled_date < "{end.isoformat()}"'


async def get_completion_for_day(*, assignment_id: str, day: date) -> TaskCompletion | None:
    """The completion of an assignment for one calendar day, if any."""
    start, end = day_window(day)
    record = await db_client.get_first_record(
        collection=_COLLECTION,
        filter_query=f'assignment_id = "{sanitize_param(assignment_id)}" && {_window_filter(start, end)}',
    )
    return TaskCompletion(**record) if record else None


async def list_completions(*, assignment_ids: list[str], start: date, end: date) -> list[TaskCompletion]:
    """Completions of the given assignments whose day falls in [start, end)."""
    unique_ids = sorted(set(assignment_ids))
    window = _window_filter(day_window(start)[0], day_window(end)[0])
    completions: list[TaskCompletion] = []

    for offset in range(0, len(unique_ids), Constants.ID_CHUNK_SIZE):
        chunk = unique_ids[offset : offset + Constants.ID_CHUNK_SIZE]
        id_filter = " || ".join(f'assignment_id = "{sanitize_param(assignment_id)}"' for assignment_id in chunk)
        records = await db_client.list_all_records(
            collection=_COLLECTION,
            filter_query=f"({id_filter}) && {window}",
            sort="+scheduled_date",
        )
        completions.extend(TaskCompletion(**record) for record in records)

    return completions


async def list_recent_completions(*, assignment_id: str, limit: int) -> list[TaskCompletion]:
    """Most recent completions of one assignment, newest day first."""
    records = await db_client.list_records(
        collection=_COLLECTION,
        per_page=limit,
        filter_query=f'assignment_id = "{sanitize_param(assignment_id)}"',
        sort="-scheduled_date",
    )
    return [TaskCompletion(**record) for record in records]


async def record_completion(
    *,
    assignment: TaskAssignment,
    template: TaskTemplate,
    now: datetime,
    scheduled_date: date | None = None,
    photo_url: str | None = None,
    photo_public_id: str | None = None,
    notes: str | None = None,
) -> TaskCompletion:
    """Record (or resubmit) an assignment's completion for one calendar day.

    Args:
        assignment: Assignment being completed; ownership is checked by the caller
        template: The assignment's template
        now: Wall-clock submission time
        scheduled_date: Day being completed; defaults to the calendar day of ``now``
        photo_url: Optional photo evidence URL
        photo_public_id: Optional photo storage identifier
        notes: Optional notes

    Returns:
        The single stored completion for that (assignment, day)

    Raises:
        InvalidInputError: If the template requires a photo and neither this
            submission nor an earlier one for the same day supplied one
    """
    with span("completion_ledger.record_completion"):
        day = scheduled_date or calendar_date(now)
        existing = await get_completion_for_day(assignment_id=assignment.id, day=day)

        if template.requires_photo and not photo_url and not (existing and existing.photo_url):
            raise InvalidInputError("Photo evidence is required for this task")

        data: dict[str, Any] = {
            "assignment_id": assignment.id,
            "scheduled_date": day_key(day),
            "status": CompletionStatus.COMPLETED,
            "photo_url": photo_url or None,
            "photo_public_id": photo_public_id or None,
            "notes": notes or None,
            "completed_at": now.isoformat(),
            "completed_on_time": compute_completed_on_time(template=template, day=day, submitted_at=now),
        }

        record = await db_client.upsert_record(
            collection=_COLLECTION,
            data=data,
            conflict_fields=["assignment_id", "scheduled_date"],
            overwrite_fields=["status", "completed_at"],
            keep_existing_if_empty=["photo_url", "photo_public_id", "notes"],
        )
        completion = TaskCompletion(**record)

        logger.info(
            "%s completion %s for assignment %s on %s (on time: %s)",
            "Resubmitted" if existing else "Recorded",
            completion.id,
            assignment.id,
            day.isoformat(),
            completion.completed_on_time,
        )
        return completion


async def patch_completion(*, completion: TaskCompletion, changes: dict[str, Any]) -> TaskCompletion:
    """Update photo/notes of an existing completion.

    Status, completed_on_time, and scheduled_date are never touched.
    """
    with span("completion_ledger.patch_completion"):
        evidence = {key: changes[key] for key in ("photo_url", "photo_public_id", "notes") if key in changes}
        if not evidence:
            return completion

        record = await db_client.update_record(collection=_COLLECTION, record_id=completion.id, data=evidence)
        logger.info("Patched completion %s: %s", completion.id, sorted(evidence))
        return TaskCompletion(**record)


async def submit_completion(*, actor: User, payload: CompletionCreate, now: datetime) -> TaskCompletion:
    """Record a completion on behalf of the employee who owns the assignment.

    Raises:
        NotFoundError: If the assignment does not exist
        ForbiddenError: If the actor is not an employee owning the assignment
        InvalidInputError: If scheduledDate is malformed or a required photo is missing
    """
    # Role first: non-employees get 403 even for unknown assignment IDs
    authorize(Action.COMPLETE_TASK, actor, EmployeeScope(employee_id=actor.id))
    assignment = await assignment_service.get_assignment(assignment_id=payload.assignment_id)
    authorize(Action.COMPLETE_TASK, actor, assignment)

    scheduled_date = parse_scheduled_date(payload.scheduled_date) if payload.scheduled_date else None
    template = await template_service.get_template(template_id=assignment.task_template_id)

    return await record_completion(
        assignment=assignment,
        template=template,
        now=now,
        scheduled_date=scheduled_date,
        photo_url=payload.photo_url,
        photo_public_id=payload.photo_public_id,
        notes=payload.notes,
    )


async def amend_completion(*, actor: User, patch: CompletionPatch) -> TaskCompletion:
    """Patch a completion's evidence on behalf of the employee who owns it.

    Raises:
        NotFoundError: If the completion or its assignment does not exist
        ForbiddenError: If the actor is not an employee owning the underlying assignment
    """
    authorize(Action.PATCH_COMPLETION, actor, EmployeeScope(employee_id=actor.id))
    completion = await get_completion(completion_id=patch.completion_id)
    assignment = await assignment_service.get_assignment(assignment_id=completion.assignment_id)
    authorize(Action.PATCH_COMPLETION, actor, assignment)

    return await patch_completion(completion=completion, changes=patch.changes())
