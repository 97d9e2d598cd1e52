"""
Employee directory view.

Employees, departments and reporting lines are owned by the external
directory; this table mirrors the fields the approval workflow reads.
"""
from sqlalchemy import Column, Integer, String, Boolean
import enum
from hr_approvals.database import Base


class UserRole(str, enum.Enum):
    """
    Roles issued by the authentication gateway.

    Hierarchy (most to least permissions):
    - ADMIN: reviews any request
    - MANAGER: reviews requests from direct and indirect reports
    - DEPT_LEAD: reviews requests from their own department
    - EMPLOYEE: self-service only
    """
    ADMIN = "admin"
    MANAGER = "manager"
    DEPT_LEAD = "dept_lead"
    EMPLOYEE = "employee"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    role = Column(String, default=UserRole.EMPLOYEE.value, nullable=False)
    department = Column(String, nullable=True, index=True)
    manager_id = Column(Integer, nullable=True, index=True)  # reportsTo in the directory
    is_active = Column(Boolean, default=True, nullable=False)  # inactive employees receive no review notifications

    def __repr__(self):
        return f"<Employee {self.id} {self.name} ({self.department})>"
