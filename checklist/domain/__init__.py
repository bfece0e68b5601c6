"""Domain models and DTOs."""

from checklist.domain.assignment import TaskAssignment
from checklist.domain.completion import CompletionStatus, TaskCompletion
from checklist.domain.create_models import (
    AssignmentCreate,
    BulkAssignmentCreate,
    CompletionCreate,
    TaskTemplateCreate,
    UserCreate,
)
from checklist.domain.template import Frequency, Priority, TaskTemplate
from checklist.domain.update_models import CompletionPatch, TaskTemplateUpdate
from checklist.domain.user import EmployeeSummary, User, UserRole


__all__ = [
    "AssignmentCreate",
    "BulkAssignmentCreate",
    "CompletionCreate",
    "CompletionPatch",
    "CompletionStatus",
    "EmployeeSummary",
    "Frequency",
    "Priority",
    "TaskAssignment",
    "TaskCompletion",
    "TaskTemplate",
    "TaskTemplateCreate",
    "TaskTemplateUpdate",
    "User",
    "UserCreate",
    "UserRole",
]
