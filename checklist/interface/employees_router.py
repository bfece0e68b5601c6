"""User directory routes for leaders assigning tasks."""

from fastapi import APIRouter, Depends, Query

from checklist.domain.user import EmployeeSummary, User, UserRole
from checklist.interface.dependencies import get_current_user
from checklist.services import user_service
from checklist.services.authorization import Action, authorize


router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", name="employees_get")
async def get_employees(
    role: UserRole | None = Query(default=None),
    user: User | None = Depends(get_current_user),
) -> list[EmployeeSummary]:
    """Users ordered by name, optionally filtered by role."""
    authorize(Action.LIST_EMPLOYEES, user)
    users = await user_service.list_users(role=role)
    return [user_service.to_summary(member) for member in users]
