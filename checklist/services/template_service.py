"""Task template service for CRUD operations."""

import logging
from datetime import date
from typing import Any

from checklist.core import db_client
from checklist.core.config import Constants
from checklist.core.errors import InvalidInputError, NotFoundError
from checklist.core.logging import span
from checklist.core.recurrence import describe_schedule, next_due_date
from checklist.domain.create_models import TaskTemplateCreate
from checklist.domain.template import Frequency, TaskTemplate, validate_scheduled_day
from checklist.domain.update_models import TaskTemplateUpdate
from checklist.models.service_models import AssignmentDetail, TemplateView


logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = frozenset({"title", "frequency", "requires_photo", "priority", "is_active"})


def to_view(template: TaskTemplate, *, today: date, assignments: list[AssignmentDetail] | None = None) -> TemplateView:
    """Attach the schedule label and next due date to a template."""
    return TemplateView(
        **template.model_dump(),
        schedule_label=describe_schedule(template),
        next_due_date=next_due_date(template, today),
        assignments=assignments,
    )


async def create_template(*, payload: TaskTemplateCreate, created_by_id: str) -> TaskTemplate:
    """Create a new task template.

    Args:
        payload: Validated template fields
        created_by_id: User creating the template

    Returns:
        Created template
    """
    with span("template_service.create_template"):
        data: dict[str, Any] = {
            **payload.model_dump(),
            "is_active": True,
            "created_by_id": created_by_id,
        }
        record = await db_client.create_record(collection="task_templates", data=data)
        logger.info("Created task template '%s' (%s)", payload.title, payload.frequency)
        return TaskTemplate(**record)


async def get_template(*, template_id: str) -> TaskTemplate:
    """Fetch a template by ID.

    Raises:
        NotFoundError: If the template does not exist
    """
    try:
        record = await db_client.get_record(collection="task_templates", record_id=template_id)
    except KeyError as e:
        raise NotFoundError(f"Task template not found: {template_id}") from e
    return TaskTemplate(**record)


async def list_templates(*, active_only: bool = False) -> list[TaskTemplate]:
    """List templates, newest first."""
    with span("template_service.list_templates"):
        records = await db_client.list_all_records(
            collection="task_templates",
            filter_query='is_active = "true"' if active_only else "",
            sort="-id",
        )
        return [TaskTemplate(**record) for record in records]


async def get_templates_by_ids(*, template_ids: list[str]) -> dict[str, TaskTemplate]:
    """Resolve templates in chunks of ID_CHUNK_SIZE to avoid one query per template."""
    unique_ids = sorted(set(template_ids))
    templates: dict[str, TaskTemplate] = {}

    for start in range(0, len(unique_ids), Constants.ID_CHUNK_SIZE):
        chunk = unique_ids[start : start + Constants.ID_CHUNK_SIZE]
        id_filter = " || ".join(f'id = "{db_client.sanitize_param(template_id)}"' for template_id in chunk)
        records = await db_client.list_all_records(collection="task_templates", filter_query=f"({id_filter})")
        templates.update({record["id"]: TaskTemplate(**record) for record in records})

    return templates


async def update_template(*, template_id: str, payload: TaskTemplateUpdate) -> TaskTemplate:
    """Apply a partial update to a template.

    The frequency/scheduled_day pair is re-validated against the merged record,
    so changing only one of them cannot leave the template out of range.

    Raises:
        NotFoundError: If the template does not exist
        InvalidInputError: If the merged template breaks a field rule
    """
    with span("template_service.update_template"):
        existing = await get_template(template_id=template_id)
        changes = payload.changes()

        if not changes:
            return existing

        cleared = sorted(field for field in _REQUIRED_FIELDS if field in changes and changes[field] is None)
        if cleared:
            raise InvalidInputError(f"Fields cannot be cleared: {', '.join(cleared)}")

        merged_frequency = changes.get("frequency", existing.frequency)
        merged_day = changes.get("scheduled_day", existing.scheduled_day)
        # Unknown stored frequencies have no day range to check
        if isinstance(merged_frequency, Frequency):
            try:
                normalized_day = validate_scheduled_day(merged_frequency, merged_day)
            except ValueError as e:
                raise InvalidInputError(str(e)) from e
            if "frequency" in changes or "scheduled_day" in changes:
                changes["scheduled_day"] = normalized_day

        record = await db_client.update_record(collection="task_templates", record_id=template_id, data=changes)
        logger.info("Updated task template %s: %s", template_id, sorted(changes))
        return TaskTemplate(**record)


async def delete_template(*, template_id: str) -> None:
    """Hard-delete a template; its assignments and their completions cascade with it.

    Raises:
        NotFoundError: If the template does not exist
    """
    with span("template_service.delete_template"):
        template = await get_template(template_id=template_id)
        await db_client.delete_record(collection="task_templates", record_id=template_id)
        logger.info("Deleted task template %s ('%s')", template_id, template.title)
