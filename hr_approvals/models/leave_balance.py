from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from hr_approvals.database import Base

class LeaveBalance(Base):
    """One row per (employee, leave type); rows are provisioned by the directory."""
    __tablename__ = "leave_balances"
    __table_args__ = (
        UniqueConstraint("employee_id", "leave_type", name="uq_leave_balance_employee_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, index=True, nullable=False)
    leave_type = Column(String, nullable=False)  # see LeaveType
    remaining_days = Column(Float, default=0.0, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
