from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.sql import func
from hr_approvals.database import Base

class AuditEntry(Base):
    """Append-only log of reviewer decisions. Rows are never updated or deleted."""
    __tablename__ = "audit_entries"
    __table_args__ = (
        Index("ix_audit_entries_request", "request_kind", "request_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, nullable=False)
    request_kind = Column(String, nullable=False)  # leave | timesheet
    actor_id = Column(Integer, nullable=False, index=True)
    action = Column(String, nullable=False)  # approve | reject
    previous_status = Column(String, nullable=False)
    new_status = Column(String, nullable=False)
    comment = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
