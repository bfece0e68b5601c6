from checklist.services import (
    assignment_service,
    authorization,
    completion_ledger,
    compliance_service,
    daily_tasks_service,
    template_service,
    user_service,
)


__all__ = [
    "assignment_service",
    "authorization",
    "completion_ledger",
    "compliance_service",
    "daily_tasks_service",
    "template_service",
    "user_service",
]
