"""
Timesheet Router

Draft entry, submission, lookup and reviewer decisions for timesheets.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hr_approvals.core.schemas import ApiResponse
from hr_approvals.database import get_db
from hr_approvals.dependencies import check_view_access, get_current_reviewer, scoped_filters
from hr_approvals.models.reviewable import RequestKind
from hr_approvals.models.timesheet import TimesheetStatus
from hr_approvals.schemas.approval import (
    ApproveRequest,
    AuditEntryResponse,
    BulkApproveRequest,
    BulkRejectRequest,
    BulkResult,
    RejectRequest,
)
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.schemas.timesheet import TimesheetCreate, TimesheetResponse, TimesheetUpdate
from hr_approvals.services.approval_engine import ApprovalEngine
from hr_approvals.services.audit import AuditTrail
from hr_approvals.services.bulk import BulkCoordinator
from hr_approvals.services.request_store import RequestStore
from hr_approvals.services.submission import create_timesheet, submit_timesheet, update_timesheet

router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[TimesheetResponse])
def create_timesheet_entry(
    payload: TimesheetCreate,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    """Create a draft timesheet for the calling employee."""
    timesheet = create_timesheet(
        db,
        employee_id=reviewer.id,
        day=payload.date,
        hours=payload.hours,
        clock_in=payload.clock_in,
        clock_out=payload.clock_out,
    )
    return ApiResponse.ok(TimesheetResponse.model_validate(timesheet))


@router.get("", response_model=ApiResponse[List[TimesheetResponse]])
def list_timesheets(
    status_filter: Optional[TimesheetStatus] = Query(default=None, alias="status"),
    employee_id: Optional[int] = None,
    department: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    filters = scoped_filters(db, reviewer, employee_id, department)
    filters["status"] = status_filter.value if status_filter else None
    store = RequestStore(db)
    timesheets = [
        TimesheetResponse.model_validate(t)
        for t in store.list(RequestKind.TIMESHEET, limit=limit, offset=offset, **filters)
    ]
    total = store.count(RequestKind.TIMESHEET, **filters)
    return ApiResponse.ok(timesheets, count=len(timesheets), total=total, limit=limit, offset=offset)


@router.post("/bulk-approve", response_model=ApiResponse[BulkResult])
def bulk_approve_timesheets(
    payload: BulkApproveRequest,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    result = BulkCoordinator(db).bulk_approve(RequestKind.TIMESHEET, payload.ids, reviewer, payload.comment)
    return ApiResponse.ok(result)


@router.post("/bulk-reject", response_model=ApiResponse[BulkResult])
def bulk_reject_timesheets(
    payload: BulkRejectRequest,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    result = BulkCoordinator(db).bulk_reject(RequestKind.TIMESHEET, payload.ids, reviewer, payload.reason)
    return ApiResponse.ok(result)


@router.get("/{timesheet_id}", response_model=ApiResponse[TimesheetResponse])
def get_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    timesheet = RequestStore(db).get(RequestKind.TIMESHEET, timesheet_id)
    check_view_access(db, reviewer, timesheet.employee_id, timesheet.department)
    return ApiResponse.ok(TimesheetResponse.model_validate(timesheet))


@router.get("/{timesheet_id}/audit", response_model=ApiResponse[List[AuditEntryResponse]])
def get_timesheet_audit(
    timesheet_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    timesheet = RequestStore(db).get(RequestKind.TIMESHEET, timesheet_id)
    check_view_access(db, reviewer, timesheet.employee_id, timesheet.department)
    entries = AuditTrail(db).entries_for(RequestKind.TIMESHEET, timesheet_id)
    return ApiResponse.ok([AuditEntryResponse.model_validate(e) for e in entries])


@router.put("/{timesheet_id}", response_model=ApiResponse[TimesheetResponse])
def update_draft_timesheet(
    timesheet_id: int,
    payload: TimesheetUpdate,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    """Edit a draft timesheet; only its owner may change it."""
    timesheet = update_timesheet(
        db,
        timesheet_id,
        reviewer.id,
        day=payload.date,
        hours=payload.hours,
        clock_in=payload.clock_in,
        clock_out=payload.clock_out,
    )
    return ApiResponse.ok(TimesheetResponse.model_validate(timesheet))


@router.post("/{timesheet_id}/submit", response_model=ApiResponse[TimesheetResponse])
def submit_timesheet_for_approval(
    timesheet_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    timesheet = submit_timesheet(db, timesheet_id, reviewer.id)
    return ApiResponse.ok(TimesheetResponse.model_validate(timesheet))


@router.post("/{timesheet_id}/approve", response_model=ApiResponse[TimesheetResponse])
def approve_timesheet(
    timesheet_id: int,
    payload: Optional[ApproveRequest] = None,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    comment = payload.comment if payload else None
    timesheet = ApprovalEngine(db).approve(RequestKind.TIMESHEET, timesheet_id, reviewer, comment)
    return ApiResponse.ok(TimesheetResponse.model_validate(timesheet))


@router.post("/{timesheet_id}/reject", response_model=ApiResponse[TimesheetResponse])
def reject_timesheet(
    timesheet_id: int,
    payload: RejectRequest,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    timesheet = ApprovalEngine(db).reject(RequestKind.TIMESHEET, timesheet_id, reviewer, payload.reason)
    return ApiResponse.ok(TimesheetResponse.model_validate(timesheet))
