"""
Approval Engine

Single-request reviewer decisions for leave requests and timesheets.

Order of operations for one decision:
    load -> authorize -> state check -> ledger deduction (leave approval only)
    -> conditional status write -> audit entry -> owner notification -> commit

Everything after the state check runs in one database transaction. If the
conditional status write loses to a concurrent reviewer the transaction is
rolled back, which also undoes the ledger deduction.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from hr_approvals.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    ValidationError,
)
from hr_approvals.models.leave_request import LeaveStatus
from hr_approvals.models.reviewable import RequestKind, ReviewAction
from hr_approvals.models.timesheet import TimesheetStatus
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.services.audit import AuditTrail
from hr_approvals.services.authorization import AuthorizationScope
from hr_approvals.services.balance_ledger import BalanceLedger
from hr_approvals.services.base import BaseService
from hr_approvals.services.directory import ReportingDirectory
from hr_approvals.services.notification import NotificationService
from hr_approvals.services.request_store import LABELS, RequestStore, ReviewableRequest

APPROVED = {
    RequestKind.LEAVE: LeaveStatus.APPROVED.value,
    RequestKind.TIMESHEET: TimesheetStatus.APPROVED.value,
}
REJECTED = {
    RequestKind.LEAVE: LeaveStatus.REJECTED.value,
    RequestKind.TIMESHEET: TimesheetStatus.REJECTED.value,
}


class ApprovalEngine(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.store = RequestStore(db)
        self.ledger = BalanceLedger(db)
        self.audit = AuditTrail(db)
        self.directory = ReportingDirectory(db)

    def approve(
        self,
        kind: RequestKind,
        request_id: int,
        reviewer: Reviewer,
        comment: Optional[str] = None,
    ) -> ReviewableRequest:
        request = self._load_actionable(kind, request_id, reviewer, ReviewAction.APPROVE)
        previous_status = request.status
        values = self._review_values(reviewer, comment.strip() if comment and comment.strip() else None)

        try:
            if kind == RequestKind.LEAVE:
                deduction = self.ledger.deduct(request.employee_id, request.leave_type, request.total_days)
                values["leave_balance_before"] = deduction.before
                values["leave_balance_after"] = deduction.after
            return self._commit_decision(
                request, ReviewAction.APPROVE, previous_status, APPROVED[kind], values
            )
        except Exception:
            self.db.rollback()
            raise

    def reject(
        self,
        kind: RequestKind,
        request_id: int,
        reviewer: Reviewer,
        reason: Optional[str],
    ) -> ReviewableRequest:
        if reason is None or not reason.strip():
            raise ValidationError("Rejection reason is required")
        reason = reason.strip()

        request = self._load_actionable(kind, request_id, reviewer, ReviewAction.REJECT)
        previous_status = request.status
        values = self._review_values(reviewer, reason)

        try:
            return self._commit_decision(
                request, ReviewAction.REJECT, previous_status, REJECTED[kind], values
            )
        except Exception:
            self.db.rollback()
            raise

    def _load_actionable(
        self,
        kind: RequestKind,
        request_id: int,
        reviewer: Reviewer,
        action: ReviewAction,
    ) -> ReviewableRequest:
        request = self.store.get(kind, request_id)

        manages_owner = False
        if AuthorizationScope.needs_reporting_line(reviewer):
            manages_owner = self.directory.is_in_reporting_line(reviewer.id, request.owner_id)
        if not AuthorizationScope.can_review(reviewer, request, manages_owner):
            self.log_warning(
                f"Reviewer {reviewer.id} ({reviewer.role.value}) denied {action.value} on {kind.value} {request_id}"
            )
            raise AuthorizationError(f"You do not have permission to {action.value} this {LABELS[kind].lower()}")

        if not request.is_actionable:
            raise InvalidStateError(
                f"{LABELS[kind]} already processed (status: {request.status})"
            )
        return request

    def _commit_decision(
        self,
        request: ReviewableRequest,
        action: ReviewAction,
        previous_status: str,
        new_status: str,
        values: dict,
    ) -> ReviewableRequest:
        kind = request.kind
        request_id = request.id
        if not self.store.transition(request, previous_status, new_status, **values):
            self.log_warning(f"Lost status race on {kind.value} {request_id}")
            raise ConflictError(f"{LABELS[kind]} {request_id} was processed by another reviewer")

        self.audit.record(
            kind,
            request_id,
            actor_id=values["reviewed_by"],
            action=action,
            previous_status=previous_status,
            new_status=new_status,
            comment=values.get("comments"),
        )
        NotificationService.notify_decision(self.db, request, action, values.get("comments"))

        self.db.commit()
        self.db.refresh(request)
        self.log_info(f"{LABELS[kind]} {request_id} {new_status} by {values['reviewed_by']}")
        return request

    @staticmethod
    def _review_values(reviewer: Reviewer, comment: Optional[str]) -> dict:
        values = {
            "reviewed_by": reviewer.id,
            "reviewed_date": datetime.now(timezone.utc),
        }
        if comment is not None:
            values["comments"] = comment
        return values
