from pydantic import BaseModel, ConfigDict
from typing import Optional
from hr_approvals.models.employee import UserRole

class Reviewer(BaseModel):
    """Authenticated identity attached to each call by the auth gateway."""
    model_config = ConfigDict(frozen=True)

    id: int
    role: UserRole
    department: Optional[str] = None
