"""
Per-employee leave balance ledger.

The ledger is only ever changed by `deduct`, which expresses the floor check
and the decrement as one conditional UPDATE so that concurrent approvals for
the same employee cannot lose an update or cross the floor.
"""
import logging
from dataclasses import dataclass
from typing import Dict

from sqlalchemy.orm import Session

from hr_approvals.core.exceptions import InsufficientBalanceError, ValidationError
from hr_approvals.models.leave_balance import LeaveBalance
from hr_approvals.models.leave_request import LeaveType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Deduction:
    leave_type: str
    days: float
    before: Dict[str, float]
    after: Dict[str, float]


class BalanceLedger:
    def __init__(self, db: Session):
        self.db = db

    def balances(self, employee_id: int) -> Dict[str, float]:
        rows = (
            self.db.query(LeaveBalance.leave_type, LeaveBalance.remaining_days)
            .filter(LeaveBalance.employee_id == employee_id)
            .all()
        )
        return {row.leave_type: row.remaining_days for row in rows}

    def deduct(self, employee_id: int, leave_type: str, days: float) -> Deduction:
        """
        Atomically decrement `leave_type` for `employee_id` by `days`.

        Runs inside the caller's transaction and does not commit. The row
        stays write-locked until the caller commits or rolls back, so the
        balances read back afterwards are the ones this call produced.
        """
        if days <= 0:
            raise ValidationError("Days to deduct must be positive")
        try:
            ltype = LeaveType(leave_type)
        except ValueError:
            raise ValidationError(f"Unknown leave type: {leave_type}")

        query = self.db.query(LeaveBalance).filter(
            LeaveBalance.employee_id == employee_id,
            LeaveBalance.leave_type == ltype.value,
        )
        if ltype.is_floored:
            query = query.filter(LeaveBalance.remaining_days >= days)

        updated = query.update(
            {LeaveBalance.remaining_days: LeaveBalance.remaining_days - days},
            synchronize_session=False,
        )

        if not updated:
            if ltype.is_floored:
                available = self.balances(employee_id).get(ltype.value, 0.0)
                logger.info(
                    f"Ledger floor refused deduction for employee {employee_id}",
                    extra={"leave_type": ltype.value, "available": available, "requested": days},
                )
                raise InsufficientBalanceError(ltype.value, available, days)
            self._open_unfloored(employee_id, ltype, days)

        after = self.balances(employee_id)
        before = dict(after)
        before[ltype.value] = after[ltype.value] + days
        return Deduction(leave_type=ltype.value, days=days, before=before, after=after)

    def _open_unfloored(self, employee_id: int, ltype: LeaveType, days: float):
        """First deduction of an unfloored type with no provisioned row."""
        # uq_leave_balance_employee_type rejects a concurrent duplicate at flush
        self.db.add(LeaveBalance(employee_id=employee_id, leave_type=ltype.value, remaining_days=-days))
        self.db.flush()
