"""
Reviewer scope resolution.

Each role resolves once to a capability set; every approve/reject/view
decision goes through `AuthorizationScope` instead of comparing role
strings at call sites.
"""
import enum
from typing import Dict, FrozenSet, Optional

from hr_approvals.models.employee import UserRole
from hr_approvals.schemas.auth import Reviewer


class Capability(str, enum.Enum):
    APPROVE_OWN_REPORTS = "approve_own_reports"
    APPROVE_DEPARTMENT = "approve_department"
    APPROVE_ANY = "approve_any"


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.ADMIN: frozenset({Capability.APPROVE_ANY}),
    UserRole.MANAGER: frozenset({Capability.APPROVE_OWN_REPORTS}),
    UserRole.DEPT_LEAD: frozenset({Capability.APPROVE_DEPARTMENT}),
    UserRole.EMPLOYEE: frozenset(),
}


class AuthorizationScope:
    """Pure scope checks; callers turn a False into AuthorizationError."""

    @staticmethod
    def capabilities(reviewer: Reviewer) -> FrozenSet[Capability]:
        return ROLE_CAPABILITIES.get(reviewer.role, frozenset())

    @classmethod
    def needs_reporting_line(cls, reviewer: Reviewer) -> bool:
        """Whether `manages_owner` must be resolved before calling can_review."""
        return Capability.APPROVE_OWN_REPORTS in cls.capabilities(reviewer)

    @classmethod
    def can_review(cls, reviewer: Reviewer, request, manages_owner: bool = False) -> bool:
        """
        Rules, in order:
        1. Nobody reviews their own request.
        2. APPROVE_ANY (admin) reviews everything.
        3. APPROVE_OWN_REPORTS (manager) reviews direct and indirect reports.
        4. APPROVE_DEPARTMENT (dept_lead) reviews requests from the same department.
        5. Everything else is denied.
        """
        if request.owner_id == reviewer.id:
            return False
        return cls._in_scope(reviewer, request.owner_department, manages_owner)

    @classmethod
    def can_view(
        cls,
        reviewer: Reviewer,
        owner_id: int,
        owner_department: Optional[str],
        manages_owner: bool = False,
    ) -> bool:
        if owner_id == reviewer.id:
            return True
        return cls._in_scope(reviewer, owner_department, manages_owner)

    @classmethod
    def _in_scope(cls, reviewer: Reviewer, owner_department: Optional[str], manages_owner: bool) -> bool:
        caps = cls.capabilities(reviewer)
        if Capability.APPROVE_ANY in caps:
            return True
        if Capability.APPROVE_OWN_REPORTS in caps and manages_owner:
            return True
        if Capability.APPROVE_DEPARTMENT in caps:
            return bool(reviewer.department) and reviewer.department == owner_department
        return False
