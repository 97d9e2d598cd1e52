from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hr_approvals.core.exceptions import NotFoundError
from hr_approvals.core.schemas import ApiResponse
from hr_approvals.database import get_db
from hr_approvals.dependencies import check_view_access, get_current_reviewer
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.schemas.leave import LeaveBalanceResponse
from hr_approvals.services.balance_ledger import BalanceLedger
from hr_approvals.services.directory import ReportingDirectory

router = APIRouter(prefix="/leave-balances", tags=["leave-balances"])


@router.get("/{employee_id}", response_model=ApiResponse[LeaveBalanceResponse])
def get_employee_leave_balance(
    employee_id: int,
    db: Session = Depends(get_db),
    reviewer: Reviewer = Depends(get_current_reviewer),
):
    """Remaining days per leave type. Read-only; balances change only through approvals."""
    employee = ReportingDirectory(db).get_employee(employee_id)
    if employee is None:
        raise NotFoundError("Employee", employee_id)
    check_view_access(db, reviewer, employee.id, employee.department)
    balances = BalanceLedger(db).balances(employee_id)
    return ApiResponse.ok(LeaveBalanceResponse(employee_id=employee_id, balances=balances))
