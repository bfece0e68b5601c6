"""Pydantic models for service layer return types.

These models provide type safety at service boundaries, converting database
dictionaries into typed objects with validation.
"""

from datetime import date, datetime

from checklist.domain.assignment import TaskAssignment
from checklist.domain.base import CamelModel
from checklist.domain.completion import CompletionStatus, TaskCompletion
from checklist.domain.template import TaskTemplate
from checklist.domain.user import EmployeeSummary


class DailyTaskItem(CamelModel):
    """One due task in an employee's daily list."""

    assignment_id: str
    task: TaskTemplate
    status: CompletionStatus
    completed_at: datetime | None = None
    photo_url: str | None = None
    notes: str | None = None
    completion_id: str | None = None


class DailyTaskSummary(CamelModel):
    """Counts over the daily task list."""

    total: int
    completed: int
    pending: int


class DailyTasks(CamelModel):
    """Employee's task list for one calendar day."""

    date: date
    tasks: list[DailyTaskItem]
    summary: DailyTaskSummary


class DailyCompliance(CamelModel):
    """Compliance for a single day."""

    total: int
    completed: int
    pending: int
    compliance: int


class PeriodCompliance(CamelModel):
    """Compliance rolled up over a week or month."""

    total_completed: int
    expected: int
    compliance: int


class StatsPeriod(CamelModel):
    """Window anchors used by a statistics report."""

    today: date
    week_start: date
    month_start: date


class ComplianceStats(CamelModel):
    """Full compliance report for one employee."""

    employee: EmployeeSummary | None = None
    daily: DailyCompliance
    weekly: PeriodCompliance
    monthly: PeriodCompliance
    on_time_rate: int
    period: StatsPeriod


class EmployeeDailyCompliance(CamelModel):
    """One row of the team report."""

    employee: EmployeeSummary
    daily: DailyCompliance


class TeamComplianceSummary(CamelModel):
    """Aggregate over the team report."""

    total_employees: int
    average_compliance: int


class TeamComplianceReport(CamelModel):
    """Daily compliance for every employee with active assignments."""

    date: date
    employees: list[EmployeeDailyCompliance]
    summary: TeamComplianceSummary


class AssignmentDetail(TaskAssignment):
    """Assignment enriched with its employee and template."""

    employee: EmployeeSummary | None = None
    task_template: TaskTemplate | None = None
    recent_completions: list[TaskCompletion] | None = None


class BulkAssignmentResult(CamelModel):
    """Outcome of a bulk assignment."""

    success: bool = True
    created: int
    skipped: int
    assignments: list[AssignmentDetail]


class TemplateView(TaskTemplate):
    """Template enriched with schedule information and (optionally) its assignments."""

    schedule_label: str
    next_due_date: date | None = None
    assignments: list[AssignmentDetail] | None = None


class DeleteResult(CamelModel):
    """Acknowledgement of a delete operation."""

    success: bool = True
