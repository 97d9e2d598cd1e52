from sqlalchemy import Column, Integer, String, DateTime, Text
import enum


class RequestKind(str, enum.Enum):
    LEAVE = "leave"
    TIMESHEET = "timesheet"


class ReviewAction(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"


class ReviewableMixin:
    """
    Columns shared by every record that goes through reviewer approval.

    Subclasses define `kind`, `actionable_status`, `owner_id` and
    `owner_department`.
    """
    status = Column(String, nullable=False, index=True)
    reviewed_by = Column(Integer, nullable=True)
    reviewed_date = Column(DateTime(timezone=True), nullable=True)
    comments = Column(Text, nullable=True)

    @property
    def is_actionable(self) -> bool:
        return self.status == self.actionable_status
