"""User domain models and enums."""

from enum import StrEnum

from pydantic import Field

from checklist.domain.base import CamelModel


class UserRole(StrEnum):
    """User roles, lowest to highest permission level."""

    EMPLOYEE = "employee"
    CREADOR = "creador"
    LIDER = "lider"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class User(CamelModel):
    """Authenticated actor."""

    id: str = Field(..., description="Unique user ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Login email")
    role: UserRole = Field(default=UserRole.EMPLOYEE, description="Role used for authorization")


class EmployeeSummary(CamelModel):
    """Public projection of a user attached to assignments and statistics."""

    id: str
    name: str
    email: str
