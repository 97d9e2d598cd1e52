"""
Leave Request Router

HTTP endpoints for leave request submission, lookup and reviewer decisions.
Business rules live in the service layer; this module maps requests to
service calls and wraps results in the API envelope.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hr_approvals.core.schemas import ApiResponse
from hr_approvals.database import get_db
from hr_approvals.dependencies import check_view_access, get_current_reviewer, scoped_filters
from hr_approvals.models.leave_request import LeaveStatus, LeaveType
from hr_approvals.models.reviewable import RequestKind
from hr_approvals.schemas.approval import (
    ApproveRequest,
    AuditEntryResponse,
    BulkApproveRequest,
    BulkRejectRequest,
    BulkResult,
    RejectRequest,
)
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.schemas.leave import LeaveRequestCreate, LeaveRequestResponse, LeaveRequestUpdate
from hr_approvals.services.approval_engine import ApprovalEngine
from hr_approvals.services.audit import AuditTrail
from hr_approvals.services.bulk import BulkCoordinator
from hr_approvals.services.request_store import RequestStore
from hr_approvals.services.submission import submit_leave_request, update_leave_request

router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[LeaveRequestResponse])
def create_leave_request(
    payload: LeaveRequestCreate,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    """Submit a leave request for the calling employee."""
    leave = submit_leave_request(
        db,
        employee_id=reviewer.id,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )
    return ApiResponse.ok(LeaveRequestResponse.model_validate(leave))


@router.get("", response_model=ApiResponse[List[LeaveRequestResponse]])
def list_leave_requests(
    status_filter: Optional[LeaveStatus] = Query(default=None, alias="status"),
    leave_type: Optional[LeaveType] = None,
    employee_id: Optional[int] = None,
    department: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    filters = scoped_filters(db, reviewer, employee_id, department)
    filters["status"] = status_filter.value if status_filter else None
    filters["leave_type"] = leave_type.value if leave_type else None
    store = RequestStore(db)
    requests = [
        LeaveRequestResponse.model_validate(r)
        for r in store.list(RequestKind.LEAVE, limit=limit, offset=offset, **filters)
    ]
    total = store.count(RequestKind.LEAVE, **filters)
    return ApiResponse.ok(requests, count=len(requests), total=total, limit=limit, offset=offset)


@router.post("/bulk-approve", response_model=ApiResponse[BulkResult])
def bulk_approve_leave_requests(
    payload: BulkApproveRequest,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    result = BulkCoordinator(db).bulk_approve(RequestKind.LEAVE, payload.ids, reviewer, payload.comment)
    return ApiResponse.ok(result)


@router.post("/bulk-reject", response_model=ApiResponse[BulkResult])
def bulk_reject_leave_requests(
    payload: BulkRejectRequest,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    result = BulkCoordinator(db).bulk_reject(RequestKind.LEAVE, payload.ids, reviewer, payload.reason)
    return ApiResponse.ok(result)


@router.get("/{request_id}", response_model=ApiResponse[LeaveRequestResponse])
def get_leave_request(
    request_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    leave = RequestStore(db).get(RequestKind.LEAVE, request_id)
    check_view_access(db, reviewer, leave.employee_id, leave.employee_department)
    return ApiResponse.ok(LeaveRequestResponse.model_validate(leave))


@router.put("/{request_id}", response_model=ApiResponse[LeaveRequestResponse])
def update_pending_leave_request(
    request_id: int,
    payload: LeaveRequestUpdate,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    """Edit a pending leave request; only its owner may change it."""
    leave = update_leave_request(
        db,
        request_id,
        reviewer.id,
        leave_type=payload.leave_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        reason=payload.reason,
    )
    return ApiResponse.ok(LeaveRequestResponse.model_validate(leave))


@router.get("/{request_id}/audit", response_model=ApiResponse[List[AuditEntryResponse]])
def get_leave_request_audit(
    request_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    leave = RequestStore(db).get(RequestKind.LEAVE, request_id)
    check_view_access(db, reviewer, leave.employee_id, leave.employee_department)
    entries = AuditTrail(db).entries_for(RequestKind.LEAVE, request_id)
    return ApiResponse.ok([AuditEntryResponse.model_validate(e) for e in entries])


@router.post("/{request_id}/approve", response_model=ApiResponse[LeaveRequestResponse])
def approve_leave_request(
    request_id: int,
    payload: Optional[ApproveRequest] = None,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    comment = payload.comment if payload else None
    leave = ApprovalEngine(db).approve(RequestKind.LEAVE, request_id, reviewer, comment)
    return ApiResponse.ok(LeaveRequestResponse.model_validate(leave))


@router.post("/{request_id}/reject", response_model=ApiResponse[LeaveRequestResponse])
def reject_leave_request(
    request_id: int,
    payload: RejectRequest,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    leave = ApprovalEngine(db).reject(RequestKind.LEAVE, request_id, reviewer, payload.reason)
    return ApiResponse.ok(LeaveRequestResponse.model_validate(leave))
