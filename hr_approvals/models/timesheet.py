from sqlalchemy import Column, Integer, String, Date, Float, DateTime, Index
from sqlalchemy.sql import func
from hr_approvals.database import Base
from hr_approvals.models.reviewable import ReviewableMixin, RequestKind
import enum

class TimesheetStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"

class Timesheet(ReviewableMixin, Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        Index("ix_timesheets_employee_date", "employee_id", "date"),
    )

    kind = RequestKind.TIMESHEET
    actionable_status = TimesheetStatus.SUBMITTED.value

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, index=True, nullable=False)
    department = Column(String, index=True, nullable=True)
    role = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    clock_in = Column(String, nullable=True)  # "HH:MM"
    clock_out = Column(String, nullable=True)
    hours = Column(Float, nullable=False)
    regular_hours = Column(Float, default=0.0, nullable=False)
    overtime_hours = Column(Float, default=0.0, nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def owner_id(self) -> int:
        return self.employee_id

    @property
    def owner_department(self):
        return self.department
