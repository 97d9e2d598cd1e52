"""
Identity dependencies.

Authentication happens upstream; the gateway forwards the authenticated
identity as request headers. This dependency turns those headers into a
`Reviewer` and reject requests that arrive without one.
"""
import logging
from typing import Optional

from fastapi import Header

from hr_approvals.core.exceptions import AuthenticationError
from hr_approvals.models.employee import UserRole
from hr_approvals.schemas.auth import Reviewer

logger = logging.getLogger(__name__)


def get_current_reviewer(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_user_department: Optional[str] = Header(default=None),
) -> Reviewer:
    """
    Resolves the authenticated identity attached by the auth gateway.
    """
    if not x_user_id or not x_user_role:
        logger.warning("Authentication failed: missing identity headers")
        raise AuthenticationError("Missing authenticated identity")

    try:
        user_id = int(x_user_id)
    except ValueError:
        logger.warning(f"Authentication failed: malformed user id {x_user_id!r}")
        raise AuthenticationError("Malformed user id")

    try:
        role = UserRole(x_user_role.strip().lower())
    except ValueError:
        logger.warning(f"Authentication failed: unknown role {x_user_role!r}")
        raise AuthenticationError("Unknown role")

    return Reviewer(id=user_id, role=role, department=(x_user_department or None))
