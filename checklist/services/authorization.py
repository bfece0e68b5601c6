"""Authorization policy for checklist actions.

One pure function decides every access question from (action, actor,
resource). Route handlers call authorize() instead of branching on roles.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from checklist.core.errors import ForbiddenError, UnauthorizedError
from checklist.domain.user import User, UserRole


LEADER_ROLES = frozenset({UserRole.CREADOR, UserRole.LIDER, UserRole.ADMIN, UserRole.SUPER_ADMIN})
ADMIN_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})
EMPLOYEE_ROLES = frozenset({UserRole.EMPLOYEE, UserRole.ADMIN, UserRole.SUPER_ADMIN})


def is_leader(role: str | None) -> bool:
    """Leader permissions: creador, lider, admin, or super_admin."""
    return role is not None and role in LEADER_ROLES


def is_admin(role: str | None) -> bool:
    """Admin permissions: admin or super_admin."""
    return role is not None and role in ADMIN_ROLES


def is_employee(role: str | None) -> bool:
    """Employee permissions: employee, admin, or super_admin."""
    return role is not None and role in EMPLOYEE_ROLES


class Action(StrEnum):
    """Everything a caller can ask the checklist service to do."""

    VIEW_OWN_TASKS = "view_own_tasks"
    COMPLETE_TASK = "complete_task"
    PATCH_COMPLETION = "patch_completion"
    VIEW_STATISTICS = "view_statistics"
    VIEW_TEAM_STATISTICS = "view_team_statistics"
    MANAGE_TEMPLATES = "manage_templates"
    MANAGE_ASSIGNMENTS = "manage_assignments"
    LIST_EMPLOYEES = "list_employees"


class OwnedResource(Protocol):
    """Anything that belongs to one employee."""

    employee_id: str


@dataclass(frozen=True)
class EmployeeScope:
    """Resource standing for "data belonging to this employee"."""

    employee_id: str


def _owns(actor: User, resource: OwnedResource | None) -> bool:
    return resource is not None and resource.employee_id == actor.id


def is_allowed(action: Action, actor: User | None, resource: OwnedResource | None = None) -> bool:
    """Decide whether ``actor`` may perform ``action`` on ``resource``.

    Resource-scoped actions (completing a task, patching a completion, reading
    someone's statistics) require a resource whose employee_id is checked.
    """
    if actor is None:
        return False

    role = actor.role

    match action:
        case Action.VIEW_OWN_TASKS:
            return True
        case Action.COMPLETE_TASK | Action.PATCH_COMPLETION:
            return is_employee(role) and _owns(actor, resource)
        case Action.VIEW_STATISTICS:
            return resource is None or _owns(actor, resource) or is_admin(role)
        case Action.VIEW_TEAM_STATISTICS:
            return is_admin(role)
        case Action.MANAGE_TEMPLATES | Action.MANAGE_ASSIGNMENTS | Action.LIST_EMPLOYEES:
            return is_leader(role)
        case _:
            return False


def authorize(action: Action, actor: User | None, resource: OwnedResource | None = None) -> User:
    """Raise unless ``actor`` may perform ``action``; return the actor for convenience.

    Raises:
        UnauthorizedError: If there is no authenticated actor
        ForbiddenError: If the actor lacks the role or does not own the resource
    """
    if actor is None:
        raise UnauthorizedError("Authentication required")

    if not is_allowed(action, actor, resource):
        raise ForbiddenError(f"Not allowed to {action.value.replace('_', ' ')}")

    return actor
