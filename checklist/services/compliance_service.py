"""Compliance statistics over day, week, and month windows.

Key Concepts:
- Expected: for a window, the sum over each day of the number of active
  assignments due that day. A weekly task pinned to Monday contributes one per
  week, a daily task seven.
- Completed: completions with status "completed" whose scheduled day falls in
  the window and on which their template was due, so compliance never exceeds 100.
- Windows are full calendar periods: the Monday-based week and the calendar
  month containing "today".
- On-time rate: share of this month's completions flagged completed_on_time.
"""

import logging
from datetime import date, datetime, timedelta

from checklist.core.day_boundary import calendar_date, iter_days, month_window, parse_scheduled_date, week_window
from checklist.core.logging import span
from checklist.core.recurrence import is_due
from checklist.domain.assignment import TaskAssignment
from checklist.domain.completion import CompletionStatus, TaskCompletion
from checklist.domain.template import TaskTemplate
from checklist.models.service_models import (
    ComplianceStats,
    DailyCompliance,
    EmployeeDailyCompliance,
    PeriodCompliance,
    StatsPeriod,
    TeamComplianceReport,
    TeamComplianceSummary,
)
from checklist.services import assignment_service, completion_ledger, user_service


logger = logging.getLogger(__name__)


def calculate_progress(completed: int, total: int) -> int:
    """Percentage of completed over total, rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def _expected_in_window(templates: list[TaskTemplate], start: date, end: date) -> int:
    return sum(1 for day in iter_days(start, end) for template in templates if is_due(template, day))


def _completed_in_window(
    templates_by_assignment: dict[str, TaskTemplate], completions: list[TaskCompletion], start: date, end: date
) -> int:
    # Completions recorded for a day the task was not due never count
    completed = 0
    for completion in completions:
        if completion.status != CompletionStatus.COMPLETED:
            continue
        day = parse_scheduled_date(completion.scheduled_date)
        template = templates_by_assignment.get(completion.assignment_id)
        if template is not None and start <= day < end and is_due(template, day):
            completed += 1
    return completed


def _period(
    active: list[tuple[TaskAssignment, TaskTemplate]], completions: list[TaskCompletion], window: tuple[date, date]
) -> PeriodCompliance:
    start, end = window
    expected = _expected_in_window([template for _, template in active], start, end)
    templates_by_assignment = {assignment.id: template for assignment, template in active}
    total_completed = _completed_in_window(templates_by_assignment, completions, start, end)
    return PeriodCompliance(
        total_completed=total_completed,
        expected=expected,
        compliance=calculate_progress(total_completed, expected),
    )


def _daily(
    active: list[tuple[TaskAssignment, TaskTemplate]], completions: list[TaskCompletion], today: date
) -> DailyCompliance:
    due_ids = {assignment.id for assignment, template in active if is_due(template, today)}
    done_ids = {
        completion.assignment_id
        for completion in completions
        if completion.status == CompletionStatus.COMPLETED and parse_scheduled_date(completion.scheduled_date) == today
    }
    completed = len(due_ids & done_ids)
    return DailyCompliance(
        total=len(due_ids),
        completed=completed,
        pending=len(due_ids) - completed,
        compliance=calculate_progress(completed, len(due_ids)),
    )


async def get_compliance_stats(*, employee_id: str, now: datetime) -> ComplianceStats:
    """Compute daily, weekly, and monthly compliance plus the on-time rate for one employee.

    Args:
        employee_id: Employee to report on
        now: Reference moment; its calendar day is "today"

    Returns:
        ComplianceStats for the employee
    """
    with span("compliance_service.get_compliance_stats"):
        today = calendar_date(now)
        week = week_window(today)
        month = month_window(today)

        active = await assignment_service.get_active_assignments(employee_id=employee_id)

        # The week may start in the previous month or end in the next one
        completions = await completion_ledger.list_completions(
            assignment_ids=[assignment.id for assignment, _ in active],
            start=min(week[0], month[0]),
            end=max(week[1], month[1]),
        )

        month_completions = [
            completion
            for completion in completions
            if month[0] <= parse_scheduled_date(completion.scheduled_date) < month[1]
        ]
        on_time = sum(1 for completion in month_completions if completion.completed_on_time)

        employee = await user_service.find_user(user_id=employee_id)

        stats = ComplianceStats(
            employee=user_service.to_summary(employee) if employee else None,
            daily=_daily(active, completions, today),
            weekly=_period(active, completions, week),
            monthly=_period(active, completions, month),
            on_time_rate=calculate_progress(on_time, len(month_completions)),
            period=StatsPeriod(today=today, week_start=week[0], month_start=month[0]),
        )

        logger.debug(
            "Compliance for %s on %s: daily=%d%% weekly=%d%% monthly=%d%%",
            employee_id,
            today.isoformat(),
            stats.daily.compliance,
            stats.weekly.compliance,
            stats.monthly.compliance,
        )
        return stats


async def get_team_report(*, now: datetime) -> TeamComplianceReport:
    """Today's compliance for every employee holding an active assignment, lowest first."""
    with span("compliance_service.get_team_report"):
        today = calendar_date(now)
        employee_ids = await assignment_service.list_assigned_employee_ids()
        users = await user_service.get_users_by_ids(user_ids=employee_ids)

        rows = []
        for employee_id in employee_ids:
            user = users.get(employee_id)
            if user is None:
                logger.warning("Skipping assignments of unknown employee %s", employee_id)
                continue

            active = await assignment_service.get_active_assignments(employee_id=employee_id)
            completions = await completion_ledger.list_completions(
                assignment_ids=[assignment.id for assignment, _ in active],
                start=today,
                end=today + timedelta(days=1),
            )
            daily = _daily(active, completions, today)
            rows.append(EmployeeDailyCompliance(employee=user_service.to_summary(user), daily=daily))

        rows.sort(key=lambda row: row.daily.compliance)

        total_compliance = sum(row.daily.compliance for row in rows)
        summary = TeamComplianceSummary(
            total_employees=len(rows),
            average_compliance=calculate_progress(total_compliance, 100 * len(rows)),
        )
        return TeamComplianceReport(date=today, employees=rows, summary=summary)
