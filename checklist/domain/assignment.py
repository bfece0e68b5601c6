"""Task assignment domain model."""

from datetime import datetime

from pydantic import Field

from checklist.domain.base import CamelModel


class TaskAssignment(CamelModel):
    """Binding of one task template to one employee."""

    id: str = Field(..., description="Unique assignment ID")
    task_template_id: str = Field(..., description="Assigned template ID")
    employee_id: str = Field(..., description="Employee (user) ID")
    is_active: bool = Field(default=True, description="Whether the assignment is live")
    assigned_at: datetime = Field(..., description="When the assignment was made")
