"""Recurrence evaluation for task templates.

Policy for monthly templates pinned to a day the month does not have (e.g. 31
in April): the task does not fire that month. There is no roll-over to the
last day of the month.
"""

from datetime import date, datetime, time, timedelta

from croniter import croniter

from checklist.domain.template import Frequency, TaskTemplate


_WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def weekday_index(target_date: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return target_date.isoweekday() % 7


def is_due(template: TaskTemplate, target_date: date) -> bool:
    """Decide whether a template is due on a calendar date.

    Total over every frequency value: unrecognized frequencies are never due.
    """
    scheduled_day = template.scheduled_day

    match template.frequency:
        case Frequency.DAILY:
            return True
        case Frequency.WEEKLY:
            return scheduled_day is None or scheduled_day == weekday_index(target_date)
        case Frequency.MONTHLY:
            return scheduled_day is None or scheduled_day == target_date.day
        case _:
            return False


def _time_fields(scheduled_time: str | None) -> tuple[str, str]:
    if not scheduled_time:
        return "0", "0"
    hours, minutes = scheduled_time.split(":")
    return str(int(minutes)), str(int(hours))


def schedule_to_cron(template: TaskTemplate) -> str | None:
    """Express a template's recurrence as a CRON expression, or None for unknown frequencies."""
    minute, hour = _time_fields(template.scheduled_time)
    day = "*" if template.scheduled_day is None else str(template.scheduled_day)

    match template.frequency:
        case Frequency.DAILY:
            return f"{minute} {hour} * * *"
        case Frequency.WEEKLY:
            return f"{minute} {hour} * * {day}"
        case Frequency.MONTHLY:
            return f"{minute} {hour} {day} * *"
        case _:
            return None


def _format_time(scheduled_time: str | None) -> str:
    if not scheduled_time:
        return ""
    hours, minutes = (int(part) for part in scheduled_time.split(":"))
    if hours == 0 and minutes == 0:
        return " at midnight"
    if hours == 12 and minutes == 0:  # noqa: PLR2004
        return " at noon"
    period = "AM" if hours < 12 else "PM"  # noqa: PLR2004
    display_hour = hours % 12 or 12
    return f" at {display_hour}:{minutes:02d} {period}"


def _ordinal(day: int) -> str:
    if day in (11, 12, 13):
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def describe_schedule(template: TaskTemplate) -> str:
    """Human-readable recurrence, e.g. "every Monday at 9:00 AM"."""
    time_str = _format_time(template.scheduled_time)
    day = template.scheduled_day

    match template.frequency:
        case Frequency.DAILY:
            return f"daily{time_str}"
        case Frequency.WEEKLY if day is None:
            return f"every day{time_str}"
        case Frequency.WEEKLY:
            return f"every {_WEEKDAY_NAMES[day]}{time_str}"
        case Frequency.MONTHLY if day is None:
            return f"every day{time_str}"
        case Frequency.MONTHLY:
            return f"monthly on the {_ordinal(day)}{time_str}"
        case _:
            return f"unscheduled ({template.frequency})"


def next_due_date(template: TaskTemplate, from_date: date) -> date | None:
    """First date on or after ``from_date`` on which the template is due."""
    cron_expr = schedule_to_cron(template.model_copy(update={"scheduled_time": None}))
    if cron_expr is None:
        return None

    # Start just before midnight so from_date itself is a candidate
    start = datetime.combine(from_date, time.min) - timedelta(seconds=1)
    return croniter(cron_expr, start).get_next(datetime).date()
