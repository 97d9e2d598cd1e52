# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import (
    employee, leave_request, leave_balance, timesheet,
    audit_entry, notification
)

# Explicit class exports for cleaner imports
from .employee import Employee, UserRole
from .leave_request import LeaveRequest, LeaveStatus, LeaveType
from .leave_balance import LeaveBalance
from .timesheet import Timesheet, TimesheetStatus
from .audit_entry import AuditEntry
from .notification import Notification
from .reviewable import RequestKind, ReviewAction

__all__ = [
    "Employee",
    "UserRole",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "LeaveBalance",
    "Timesheet",
    "TimesheetStatus",
    "AuditEntry",
    "Notification",
    "RequestKind",
    "ReviewAction",
]
