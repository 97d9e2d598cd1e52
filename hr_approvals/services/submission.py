"""
Employee-side submission of leave requests and timesheets.

Produces the records that enter the approval workflow: leave requests in
`pending`, timesheets created as `draft` and moved to `submitted` with their
hours split into regular and overtime. Owners may edit a record until it
leaves that first status. Every submission notifies the employee's reviewers
in the same transaction.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from hr_approvals.core.config import settings
from hr_approvals.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from hr_approvals.models.employee import Employee
from hr_approvals.models.leave_request import LeaveRequest, LeaveStatus, LeaveType
from hr_approvals.models.reviewable import RequestKind
from hr_approvals.models.timesheet import Timesheet, TimesheetStatus
from hr_approvals.services.directory import ReportingDirectory
from hr_approvals.services.notification import NotificationService
from hr_approvals.services.request_store import RequestStore

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


# ============================================================================
# DAY AND HOUR ARITHMETIC
# ============================================================================
def working_day_count(start: date, end: date, working_days: Optional[Iterable[str]] = None) -> int:
    """Working days from start to end, both ends included."""
    days = set(settings.working_days if working_days is None else working_days)
    count = 0
    current = start
    while current <= end:
        if WEEKDAY_NAMES[current.weekday()] in days:
            count += 1
        current += timedelta(days=1)
    return count


def week_bounds(day: date) -> Tuple[date, date]:
    """Sunday to Saturday week containing `day`."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def split_hours(
    hours: float,
    week_hours: float = 0.0,
    daily_threshold: Optional[float] = None,
    weekly_threshold: Optional[float] = None,
) -> Dict[str, float]:
    """
    Split a day's hours into regular and overtime.

    `week_hours` is what the employee already logged that week. Once the
    week passes the weekly threshold the excess is overtime and the daily
    threshold no longer applies; otherwise hours past the daily threshold
    are overtime. regular + overtime always equals hours.
    """
    daily = settings.daily_regular_hours if daily_threshold is None else daily_threshold
    weekly = settings.weekly_regular_hours if weekly_threshold is None else weekly_threshold

    if week_hours + hours > weekly:
        regular = max(0.0, weekly - week_hours)
    else:
        regular = min(hours, daily)
    return {"regular_hours": regular, "overtime_hours": hours - regular}


def logged_week_hours(db: Session, employee_id: int, day: date, exclude_id: Optional[int] = None) -> float:
    """Submitted and approved hours in the week of `day`."""
    week_start, week_end = week_bounds(day)
    query = db.query(func.coalesce(func.sum(Timesheet.hours), 0.0)).filter(
        Timesheet.employee_id == employee_id,
        Timesheet.date >= week_start,
        Timesheet.date <= week_end,
        Timesheet.status.in_([TimesheetStatus.SUBMITTED.value, TimesheetStatus.APPROVED.value]),
    )
    if exclude_id is not None:
        query = query.filter(Timesheet.id != exclude_id)
    return float(query.scalar())


# ============================================================================
# LEAVE REQUESTS
# ============================================================================
def _leave_days(start_date: date, end_date: date) -> int:
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")
    days = working_day_count(start_date, end_date)
    if days <= 0:
        raise ValidationError("Invalid date range: no working days in the selected period")
    return days


def _check_overlap(db: Session, employee_id: int, start_date: date, end_date: date, exclude_id: Optional[int] = None):
    query = db.query(LeaveRequest).filter(
        LeaveRequest.employee_id == employee_id,
        LeaveRequest.status.in_([LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value]),
        LeaveRequest.start_date <= end_date,
        LeaveRequest.end_date >= start_date,
    )
    if exclude_id is not None:
        query = query.filter(LeaveRequest.id != exclude_id)
    overlapping = query.first()
    if overlapping:
        raise ValidationError(
            "You have an overlapping leave request for this period",
            details={"overlapping_request_id": overlapping.id},
        )


def _get_employee(db: Session, employee_id: int) -> Employee:
    employee = ReportingDirectory(db).get_employee(employee_id)
    if employee is None:
        raise NotFoundError("Employee", employee_id)
    return employee


def submit_leave_request(
    db: Session,
    employee_id: int,
    leave_type: LeaveType,
    start_date: date,
    end_date: date,
    reason: Optional[str],
) -> LeaveRequest:
    """
    Create a pending leave request for `employee_id`.

    Balance is not checked here; the ledger floor is enforced at approval.
    """
    if reason is None or not reason.strip():
        raise ValidationError("Reason is required")
    total_days = _leave_days(start_date, end_date)

    employee = _get_employee(db, employee_id)
    _check_overlap(db, employee_id, start_date, end_date)

    leave = LeaveRequest(
        employee_id=employee_id,
        employee_department=employee.department,
        leave_type=LeaveType(leave_type).value,
        start_date=start_date,
        end_date=end_date,
        total_days=total_days,
        reason=reason.strip(),
        status=LeaveStatus.PENDING.value,
        submitted_date=datetime.now(timezone.utc),
    )
    try:
        RequestStore(db).add(leave)
        NotificationService.notify_submission(db, leave, employee)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(leave)
    logger.info(f"Leave request {leave.id} submitted by employee {employee_id} ({leave.total_days:g} day(s))")
    return leave


def update_leave_request(
    db: Session,
    request_id: int,
    employee_id: int,
    leave_type: Optional[LeaveType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    reason: Optional[str] = None,
) -> LeaveRequest:
    """
    Edit the caller's own pending request. Changed dates are recounted and
    re-checked for overlap against the employee's other requests.
    """
    store = RequestStore(db)
    leave = store.get(RequestKind.LEAVE, request_id)

    if leave.employee_id != employee_id:
        raise AuthorizationError("You can only update your own leave requests")
    if leave.status != LeaveStatus.PENDING.value:
        raise InvalidStateError(f"Cannot update leave request with status: {leave.status}")

    values = {}
    if start_date is not None or end_date is not None:
        start = start_date or leave.start_date
        end = end_date or leave.end_date
        values["total_days"] = _leave_days(start, end)
        _check_overlap(db, employee_id, start, end, exclude_id=leave.id)
        values["start_date"] = start
        values["end_date"] = end
    if leave_type is not None:
        values["leave_type"] = LeaveType(leave_type).value
    if reason is not None:
        if not reason.strip():
            raise ValidationError("Reason is required")
        values["reason"] = reason.strip()

    if values:
        try:
            if not store.transition(leave, LeaveStatus.PENDING.value, LeaveStatus.PENDING.value, **values):
                raise ConflictError(f"Leave request {request_id} was modified concurrently")
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(leave)
        logger.info(f"Leave request {request_id} updated by employee {employee_id}: {sorted(values)}")
    return leave


# ============================================================================
# TIMESHEETS
# ============================================================================
def _check_timesheet_entry(
    db: Session,
    employee_id: int,
    day: date,
    hours: Optional[float],
    exclude_id: Optional[int] = None,
):
    if hours is None or not 0 <= hours <= 24:
        raise ValidationError("Hours must be between 0 and 24")
    if day > date.today():
        raise ValidationError("Cannot create timesheet for future dates")

    query = db.query(Timesheet.id).filter(Timesheet.employee_id == employee_id, Timesheet.date == day)
    if exclude_id is not None:
        query = query.filter(Timesheet.id != exclude_id)
    existing = query.first()
    if existing:
        raise ValidationError(
            f"A timesheet already exists for {day.isoformat()}",
            details={"existing_timesheet_id": existing.id},
        )


def create_timesheet(
    db: Session,
    employee_id: int,
    day: date,
    hours: float,
    clock_in: Optional[str] = None,
    clock_out: Optional[str] = None,
) -> Timesheet:
    """Create a draft timesheet for the calling employee."""
    employee = _get_employee(db, employee_id)
    _check_timesheet_entry(db, employee_id, day, hours)

    timesheet = Timesheet(
        employee_id=employee_id,
        department=employee.department,
        role=employee.role,
        date=day,
        clock_in=clock_in,
        clock_out=clock_out,
        hours=hours,
        status=TimesheetStatus.DRAFT.value,
        **split_hours(hours, logged_week_hours(db, employee_id, day)),
    )
    try:
        RequestStore(db).add(timesheet)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(timesheet)
    logger.info(f"Timesheet {timesheet.id} created by employee {employee_id} for {day.isoformat()}")
    return timesheet


def update_timesheet(
    db: Session,
    timesheet_id: int,
    employee_id: int,
    day: Optional[date] = None,
    hours: Optional[float] = None,
    clock_in: Optional[str] = None,
    clock_out: Optional[str] = None,
) -> Timesheet:
    """Edit the caller's own draft timesheet."""
    store = RequestStore(db)
    timesheet = store.get(RequestKind.TIMESHEET, timesheet_id)

    if timesheet.employee_id != employee_id:
        raise AuthorizationError("You can only update your own timesheets")
    if timesheet.status != TimesheetStatus.DRAFT.value:
        raise InvalidStateError(f"Cannot update timesheet with status: {timesheet.status}")

    new_day = day or timesheet.date
    new_hours = timesheet.hours if hours is None else hours
    _check_timesheet_entry(db, employee_id, new_day, new_hours, exclude_id=timesheet.id)

    values = {"date": new_day, "hours": new_hours}
    values.update(split_hours(new_hours, logged_week_hours(db, employee_id, new_day, exclude_id=timesheet.id)))
    if clock_in is not None:
        values["clock_in"] = clock_in
    if clock_out is not None:
        values["clock_out"] = clock_out

    try:
        if not store.transition(timesheet, TimesheetStatus.DRAFT.value, TimesheetStatus.DRAFT.value, **values):
            raise ConflictError(f"Timesheet {timesheet_id} was modified concurrently")
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(timesheet)
    logger.info(f"Timesheet {timesheet_id} updated by employee {employee_id}")
    return timesheet


def submit_timesheet(db: Session, timesheet_id: int, employee_id: int) -> Timesheet:
    store = RequestStore(db)
    timesheet = store.get(RequestKind.TIMESHEET, timesheet_id)

    if timesheet.employee_id != employee_id:
        raise AuthorizationError("You can only submit your own timesheets")
    if timesheet.status != TimesheetStatus.DRAFT.value:
        raise InvalidStateError(f"Cannot submit timesheet with status: {timesheet.status}")
    if timesheet.hours is None or not 0 <= timesheet.hours <= 24:
        raise ValidationError("Hours must be between 0 and 24")
    employee = _get_employee(db, employee_id)

    week_hours = logged_week_hours(db, employee_id, timesheet.date, exclude_id=timesheet.id)
    try:
        moved = store.transition(
            timesheet,
            TimesheetStatus.DRAFT.value,
            TimesheetStatus.SUBMITTED.value,
            submitted_at=datetime.now(timezone.utc),
            **split_hours(timesheet.hours, week_hours),
        )
        if not moved:
            raise ConflictError(f"Timesheet {timesheet_id} was modified concurrently")
        NotificationService.notify_submission(db, timesheet, employee)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(timesheet)
    logger.info(f"Timesheet {timesheet_id} submitted by employee {employee_id}")
    return timesheet
