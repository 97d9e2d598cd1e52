from sqlalchemy import Column, Integer, String, Date, Float, DateTime, JSON, Index
from sqlalchemy.sql import func
from hr_approvals.database import Base
from hr_approvals.models.reviewable import ReviewableMixin, RequestKind
import enum

class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class LeaveType(str, enum.Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    SICK = "sick"
    ANNUAL = "annual"
    CASUAL = "casual"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    EMERGENCY = "emergency"

    @property
    def is_floored(self) -> bool:
        """Floored types may never be approved past a zero balance."""
        return self is not LeaveType.UNPAID

class LeaveRequest(ReviewableMixin, Base):
    __tablename__ = "leave_requests"
    __table_args__ = (
        Index("ix_leave_requests_employee_start", "employee_id", "start_date"),
    )

    kind = RequestKind.LEAVE
    actionable_status = LeaveStatus.PENDING.value

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, index=True, nullable=False)
    employee_department = Column(String, index=True, nullable=True)
    leave_type = Column(String, index=True, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Float, nullable=False)
    reason = Column(String, nullable=False)
    submitted_date = Column(DateTime(timezone=True), server_default=func.now())
    # Per-type balances at decision time; populated only on approval
    leave_balance_before = Column(JSON, nullable=True)
    leave_balance_after = Column(JSON, nullable=True)

    @property
    def owner_id(self) -> int:
        return self.employee_id

    @property
    def owner_department(self):
        return self.employee_department
