"""
Read-only access to the external employee directory.
"""
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from hr_approvals.models.employee import Employee, UserRole

# Guards against malformed (cyclic) reporting data in the directory
MAX_REPORTING_DEPTH = 32


class ReportingDirectory:
    def __init__(self, db: Session):
        self.db = db

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self.db.query(Employee).filter(Employee.id == employee_id).first()

    def is_in_reporting_line(self, manager_id: int, employee_id: int) -> bool:
        """
        True if `employee_id` reports to `manager_id` directly or through
        any chain of intermediate managers.
        """
        if manager_id == employee_id:
            return False

        seen = set()
        current_id = employee_id
        for _ in range(MAX_REPORTING_DEPTH):
            row = self.db.query(Employee.manager_id).filter(Employee.id == current_id).first()
            if row is None or row.manager_id is None:
                return False
            if row.manager_id == manager_id:
                return True
            if row.manager_id in seen:
                return False
            seen.add(row.manager_id)
            current_id = row.manager_id
        return False

    def reporting_line_ids(self, manager_id: int) -> Set[int]:
        """
        Ids of everyone below `manager_id`, one query per level of the
        hierarchy. The manager is never included.
        """
        found: Set[int] = set()
        frontier = {manager_id}
        for _ in range(MAX_REPORTING_DEPTH):
            rows = self.db.query(Employee.id).filter(Employee.manager_id.in_(frontier)).all()
            frontier = {row.id for row in rows} - found - {manager_id}
            if not frontier:
                break
            found |= frontier
        return found

    def submission_reviewers(self, employee: Employee) -> List[int]:
        """
        Who hears about a new submission: the employee's manager, every
        active admin and the active department leads of the employee's
        department. The submitter is left out.
        """
        recipients: List[int] = []

        if employee.manager_id is not None:
            manager = self.get_employee(employee.manager_id)
            if manager is not None and manager.is_active:
                recipients.append(manager.id)

        admins = (
            self.db.query(Employee.id)
            .filter(Employee.role == UserRole.ADMIN.value, Employee.is_active.is_(True))
            .order_by(Employee.id)
            .all()
        )
        recipients.extend(row.id for row in admins)

        if employee.department:
            leads = (
                self.db.query(Employee.id)
                .filter(
                    Employee.role == UserRole.DEPT_LEAD.value,
                    Employee.department == employee.department,
                    Employee.is_active.is_(True),
                )
                .order_by(Employee.id)
                .all()
            )
            recipients.extend(row.id for row in leads)

        unique = []
        for user_id in recipients:
            if user_id != employee.id and user_id not in unique:
                unique.append(user_id)
        return unique
