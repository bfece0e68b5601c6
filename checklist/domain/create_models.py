"""Pydantic models for request payloads that create records."""

from typing import Self

from pydantic import Field, field_validator, model_validator

from checklist.domain.base import CamelModel
from checklist.domain.template import Frequency, Priority, validate_scheduled_day, validate_scheduled_time
from checklist.domain.user import UserRole


class TaskTemplateCreate(CamelModel):
    """Payload for creating a task template."""

    title: str = Field(..., min_length=1, description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    frequency: Frequency = Field(..., description="daily, weekly, or monthly")
    scheduled_day: int | None = Field(default=None, description="Day pin for weekly/monthly tasks")
    scheduled_time: str | None = Field(default=None, description="Optional HH:MM time of day")
    requires_photo: bool = Field(default=False, description="Whether completion needs photo evidence")
    category: str | None = Field(default=None, description="Optional label")
    priority: Priority = Field(default=Priority.MEDIUM, description="high, medium, or low")

    @field_validator("scheduled_time")
    @classmethod
    def validate_time_format(cls, v: str | None) -> str | None:
        """Validate scheduled time is HH:MM."""
        return validate_scheduled_time(v)

    @model_validator(mode="after")
    def validate_day_for_frequency(self) -> Self:
        """Validate scheduled day is in range for the frequency."""
        self.scheduled_day = validate_scheduled_day(self.frequency, self.scheduled_day)
        return self


class AssignmentCreate(CamelModel):
    """Payload for assigning one template to one employee."""

    task_template_id: str = Field(..., min_length=1)
    employee_id: str = Field(..., min_length=1)


class BulkAssignmentCreate(CamelModel):
    """Payload for assigning one template to several employees."""

    task_template_id: str = Field(..., min_length=1)
    employee_ids: list[str] = Field(..., min_length=1, description="Employees to assign; must not be empty")


class CompletionCreate(CamelModel):
    """Payload for recording a completion."""

    assignment_id: str = Field(..., min_length=1)
    photo_url: str | None = None
    photo_public_id: str | None = None
    notes: str | None = None
    scheduled_date: str | None = Field(default=None, description="Day being completed; defaults to today")


class UserCreate(CamelModel):
    """Payload for creating a user record."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = UserRole.EMPLOYEE
