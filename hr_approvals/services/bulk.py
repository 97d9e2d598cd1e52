"""
Bulk reviewer decisions with per-item outcomes.

Each id goes through ApprovalEngine on its own and commits on its own; a
failing item never rolls back its siblings.
"""
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hr_approvals.core.config import settings
from hr_approvals.core.exceptions import AppException, ValidationError
from hr_approvals.models.reviewable import RequestKind
from hr_approvals.schemas.approval import BulkFailure, BulkResult
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.services.approval_engine import ApprovalEngine
from hr_approvals.services.base import BaseService


class BulkCoordinator(BaseService):
    def __init__(self, db: Session, engine: Optional[ApprovalEngine] = None):
        super().__init__(db)
        self.engine = engine or ApprovalEngine(db)

    def bulk_approve(
        self,
        kind: RequestKind,
        request_ids: List[int],
        reviewer: Optional[Reviewer],
        comment: Optional[str] = None,
    ) -> BulkResult:
        self._validate(request_ids, reviewer)
        return self._run(
            "approve",
            kind,
            request_ids,
            lambda request_id: self.engine.approve(kind, request_id, reviewer, comment),
        )

    def bulk_reject(
        self,
        kind: RequestKind,
        request_ids: List[int],
        reviewer: Optional[Reviewer],
        reason: Optional[str],
    ) -> BulkResult:
        self._validate(request_ids, reviewer)
        if reason is None or not reason.strip():
            raise ValidationError("Rejection reason is required")
        return self._run(
            "reject",
            kind,
            request_ids,
            lambda request_id: self.engine.reject(kind, request_id, reviewer, reason),
        )

    @staticmethod
    def _validate(request_ids: List[int], reviewer: Optional[Reviewer]):
        if reviewer is None:
            raise ValidationError("Reviewer is required")
        if not request_ids:
            raise ValidationError("Request IDs are required")
        if len(request_ids) > settings.max_bulk_items:
            raise ValidationError(
                f"At most {settings.max_bulk_items} requests can be processed in one batch",
                details={"received": len(request_ids)},
            )

    def _run(
        self,
        action: str,
        kind: RequestKind,
        request_ids: List[int],
        decide: Callable[[int], object],
    ) -> BulkResult:
        result = BulkResult()
        for request_id in request_ids:
            try:
                decide(request_id)
            except AppException as e:
                result.failed.append(BulkFailure(id=request_id, error_kind=e.kind, message=e.message))
            except SQLAlchemyError as e:
                self.db.rollback()
                self.log_error(f"Storage error during bulk {action} of {kind.value} {request_id}: {e}")
                result.failed.append(BulkFailure(id=request_id, error_kind="StorageError", message="Storage error"))
            else:
                result.succeeded.append(request_id)

        self.log_info(
            f"Bulk {action} of {len(request_ids)} {kind.value} request(s): "
            f"{len(result.succeeded)} succeeded, {len(result.failed)} failed",
            succeeded=len(result.succeeded),
            failed=len(result.failed),
        )
        return result
