"""
Persistence for reviewable records (leave requests and timesheets).

Status changes go through `transition`, a single conditional UPDATE keyed on
the status the caller observed. A False return means another writer got
there first.
"""
from typing import Any, Collection, Dict, List, Optional, Type, Union

from sqlalchemy.orm import Session

from hr_approvals.core.exceptions import NotFoundError
from hr_approvals.models.leave_request import LeaveRequest
from hr_approvals.models.reviewable import RequestKind
from hr_approvals.models.timesheet import Timesheet

ReviewableRequest = Union[LeaveRequest, Timesheet]

MODELS: Dict[RequestKind, Type] = {
    RequestKind.LEAVE: LeaveRequest,
    RequestKind.TIMESHEET: Timesheet,
}

LABELS = {
    RequestKind.LEAVE: "Leave request",
    RequestKind.TIMESHEET: "Timesheet",
}


class RequestStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, kind: RequestKind, request_id: int) -> ReviewableRequest:
        record = self.db.get(MODELS[kind], request_id)
        if record is None:
            raise NotFoundError(LABELS[kind], request_id)
        return record

    def _filtered(
        self,
        kind: RequestKind,
        status: Optional[str] = None,
        employee_id: Optional[int] = None,
        employee_ids: Optional[Collection[int]] = None,
        department: Optional[str] = None,
        leave_type: Optional[str] = None,
    ):
        model = MODELS[kind]
        query = self.db.query(model)
        if status:
            query = query.filter(model.status == status)
        if employee_id is not None:
            query = query.filter(model.employee_id == employee_id)
        if employee_ids is not None:
            query = query.filter(model.employee_id.in_(list(employee_ids)))
        if department:
            dept_column = model.employee_department if kind == RequestKind.LEAVE else model.department
            query = query.filter(dept_column == department)
        if leave_type and kind == RequestKind.LEAVE:
            query = query.filter(model.leave_type == leave_type)
        return query

    def list(self, kind: RequestKind, limit: int = 50, offset: int = 0, **filters: Any) -> List[ReviewableRequest]:
        """
        Newest first. `employee_ids` restricts owners to a set, which is how
        a manager's reporting line is applied before paging.
        """
        model = MODELS[kind]
        return self._filtered(kind, **filters).order_by(model.id.desc()).offset(offset).limit(limit).all()

    def count(self, kind: RequestKind, **filters: Any) -> int:
        return self._filtered(kind, **filters).count()

    def add(self, record: ReviewableRequest) -> ReviewableRequest:
        self.db.add(record)
        self.db.flush()
        return record

    def transition(
        self,
        record: ReviewableRequest,
        expected_status: str,
        new_status: str,
        **values: Any,
    ) -> bool:
        """
        Compare-and-swap the record's status. Does not commit.

        Returns True when exactly this call moved the row out of
        `expected_status`.
        """
        model = type(record)
        updated = (
            self.db.query(model)
            .filter(model.id == record.id, model.status == expected_status)
            .update({model.status: new_status, **{getattr(model, k): v for k, v in values.items()}},
                    synchronize_session=False)
        )
        if updated:
            # Pick up the committed column values on next access
            self.db.expire(record)
        return updated == 1
