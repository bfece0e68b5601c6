"""Task template domain models, enums, and field rules."""

import re
from enum import StrEnum

from pydantic import Field

from checklist.core.config import Constants
from checklist.domain.base import CamelModel


_SCHEDULED_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Frequency(StrEnum):
    """How often a task recurs."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Priority(StrEnum):
    """Task priority, ordered high < medium < low when sorting."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def validate_scheduled_time(value: str | None) -> str | None:
    """Validate an optional "HH:MM" 24-hour time."""
    if value is None or value == "":
        return None
    if not _SCHEDULED_TIME_PATTERN.match(value):
        msg = f"scheduledTime must be HH:MM (00:00-23:59), got '{value}'"
        raise ValueError(msg)
    return value


def validate_scheduled_day(frequency: Frequency, scheduled_day: int | None) -> int | None:
    """Check scheduled_day against the range its frequency allows.

    Daily templates ignore the day entirely, so it is normalized to None.
    """
    if frequency == Frequency.DAILY or scheduled_day is None:
        return None

    if frequency == Frequency.WEEKLY:
        low, high = Constants.WEEKLY_DAY_RANGE
        if not low <= scheduled_day <= high:
            msg = "For weekly tasks, scheduledDay must be 0-6 (0=Sunday)"
            raise ValueError(msg)
    else:
        low, high = Constants.MONTHLY_DAY_RANGE
        if not low <= scheduled_day <= high:
            msg = "For monthly tasks, scheduledDay must be 1-31"
            raise ValueError(msg)

    return scheduled_day


class TaskTemplate(CamelModel):
    """Reusable definition of a recurring duty."""

    id: str = Field(..., description="Unique template ID")
    title: str = Field(..., description="Task title")
    description: str | None = Field(default=None, description="Detailed task description")
    frequency: Frequency | str = Field(
        ...,
        union_mode="left_to_right",
        description="daily, weekly, or monthly; any other stored value is kept and never due",
    )
    scheduled_day: int | None = Field(
        default=None,
        description="0-6 (0=Sunday) for weekly, 1-31 for monthly; None means every occurrence",
    )
    scheduled_time: str | None = Field(default=None, description="Optional HH:MM time of day")
    requires_photo: bool = Field(default=False, description="Whether completion needs photo evidence")
    category: str | None = Field(default=None, description="Optional label")
    priority: Priority = Field(default=Priority.MEDIUM, description="high, medium, or low")
    is_active: bool = Field(default=True, description="Soft-disable flag")
    created_by_id: str | None = Field(default=None, description="User who created the template")
