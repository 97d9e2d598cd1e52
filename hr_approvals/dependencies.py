"""
Shared request-level helpers for routers.
"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from hr_approvals.core.exceptions import AuthorizationError
from hr_approvals.models.employee import UserRole
from hr_approvals.routers.auth_deps import get_current_reviewer
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.services.authorization import AuthorizationScope
from hr_approvals.services.directory import ReportingDirectory


def can_view(db: Session, reviewer: Reviewer, owner_id: int, owner_department: Optional[str]) -> bool:
    manages_owner = False
    if AuthorizationScope.needs_reporting_line(reviewer) and owner_id != reviewer.id:
        manages_owner = ReportingDirectory(db).is_in_reporting_line(reviewer.id, owner_id)
    return AuthorizationScope.can_view(reviewer, owner_id, owner_department, manages_owner)


def check_view_access(db: Session, reviewer: Reviewer, owner_id: int, owner_department: Optional[str]):
    """
    Raises AuthorizationError unless the reviewer may read records owned by `owner_id`.
    """
    if not can_view(db, reviewer, owner_id, owner_department):
        raise AuthorizationError("Access denied. You can only view records within your scope.")


def scoped_filters(
    db: Session,
    reviewer: Reviewer,
    employee_id: Optional[int],
    department: Optional[str],
) -> Dict[str, Any]:
    """
    Narrow list filters to what the reviewer's role can see, so paging and
    totals are computed over visible rows only. Managers see themselves and
    their whole reporting line, resolved once per request.
    """
    filters: Dict[str, Any] = {"employee_id": employee_id, "department": department}
    if reviewer.role == UserRole.EMPLOYEE:
        filters["employee_id"] = reviewer.id
    elif reviewer.role == UserRole.DEPT_LEAD and employee_id != reviewer.id:
        if reviewer.department:
            filters["department"] = reviewer.department
        else:
            filters["employee_id"] = reviewer.id
    elif AuthorizationScope.needs_reporting_line(reviewer):
        filters["employee_ids"] = ReportingDirectory(db).reporting_line_ids(reviewer.id) | {reviewer.id}
    return filters


__all__ = [
    "get_current_reviewer",
    "can_view",
    "check_view_access",
    "scoped_filters",
]
