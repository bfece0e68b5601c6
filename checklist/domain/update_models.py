"""Partial-update payloads. Only fields present in the request are applied."""

from typing import Any

from pydantic import Field, field_validator

from checklist.domain.base import CamelModel
from checklist.domain.template import Frequency, Priority, validate_scheduled_time


class TaskTemplateUpdate(CamelModel):
    """Partial update for a task template."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    frequency: Frequency | None = None
    scheduled_day: int | None = None
    scheduled_time: str | None = None
    requires_photo: bool | None = None
    category: str | None = None
    priority: Priority | None = None
    is_active: bool | None = None

    @field_validator("scheduled_time")
    @classmethod
    def validate_time_format(cls, v: str | None) -> str | None:
        """Validate scheduled time is HH:MM."""
        return validate_scheduled_time(v)

    def changes(self) -> dict[str, Any]:
        """Fields explicitly sent by the caller, in storage (snake_case) form."""
        return self.model_dump(include=self.model_fields_set)


class CompletionPatch(CamelModel):
    """Partial update of a completion's evidence."""

    completion_id: str = Field(..., min_length=1)
    photo_url: str | None = None
    photo_public_id: str | None = None
    notes: str | None = None

    def changes(self) -> dict[str, Any]:
        """Evidence fields explicitly sent by the caller; an explicit null clears the field."""
        return self.model_dump(include=self.model_fields_set - {"completion_id"})
