"""Task completion domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from checklist.domain.base import CamelModel


class CompletionStatus(StrEnum):
    """Per-day status of an assignment."""

    COMPLETED = "completed"
    PENDING = "pending"


class TaskCompletion(CamelModel):
    """One calendar day's completion record for an assignment."""

    id: str = Field(..., description="Unique completion ID")
    assignment_id: str = Field(..., description="Completed assignment ID")
    scheduled_date: datetime = Field(..., description="Midnight boundary of the day this completion is for")
    status: CompletionStatus = Field(default=CompletionStatus.COMPLETED, description="Completion status")
    photo_url: str | None = Field(default=None, description="Photo evidence URL")
    photo_public_id: str | None = Field(default=None, description="Photo storage identifier")
    notes: str | None = Field(default=None, description="Free-form notes")
    completed_at: datetime = Field(..., description="Last submission time")
    completed_on_time: bool = Field(default=True, description="Whether the first submission beat the grace window")
