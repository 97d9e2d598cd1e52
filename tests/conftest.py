import pytest
import os
from datetime import date, datetime, timedelta, timezone
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from hr_approvals.database import create_db_engine, get_db, init_db
from hr_approvals.main import app
from hr_approvals.models import Employee, LeaveBalance, LeaveRequest, Timesheet, UserRole
from hr_approvals.schemas.auth import Reviewer
from hr_approvals.services.submission import split_hours
from fastapi.testclient import TestClient

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

FIRST_LEAVE_DAY = date(2026, 11, 2)


@pytest.fixture(scope="function")
def engine():
    """
    Fresh in-memory database per test. Services commit and roll back on
    their own, so an outer rollback cannot isolate tests.
    """
    engine = create_db_engine(SQLALCHEMY_DATABASE_URL, poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def people(db_session):
    """
    Directory fixture:
        alice  admin     HR
        bob    manager   Engineering
        carol  employee  Engineering  reports to bob
        dan    employee  Engineering  reports to carol (indirect report of bob)
        erin   dept_lead Engineering
        frank  employee  Sales
        grace  dept_lead Sales
    """
    rows = [
        Employee(id=1, name="Alice", role=UserRole.ADMIN.value, department="HR"),
        Employee(id=2, name="Bob", role=UserRole.MANAGER.value, department="Engineering"),
        Employee(id=3, name="Carol", role=UserRole.EMPLOYEE.value,
                 department="Engineering", manager_id=2),
        Employee(id=4, name="Dan", role=UserRole.EMPLOYEE.value,
                 department="Engineering", manager_id=3),
        Employee(id=5, name="Erin", role=UserRole.DEPT_LEAD.value, department="Engineering"),
        Employee(id=6, name="Frank", role=UserRole.EMPLOYEE.value, department="Sales"),
        Employee(id=7, name="Grace", role=UserRole.DEPT_LEAD.value, department="Sales"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return {e.name.lower(): e for e in rows}


@pytest.fixture(scope="function")
def reviewer_for():
    """Build the Reviewer identity the gateway would attach for an employee."""
    def _reviewer_for(employee: Employee) -> Reviewer:
        return Reviewer(id=employee.id, role=UserRole(employee.role), department=employee.department)
    return _reviewer_for


@pytest.fixture(scope="function")
def auth_headers():
    """Identity headers as forwarded by the auth gateway."""
    def _auth_headers(employee: Employee) -> dict:
        headers = {"X-User-Id": str(employee.id), "X-User-Role": employee.role}
        if employee.department:
            headers["X-User-Department"] = employee.department
        return headers
    return _auth_headers


@pytest.fixture(scope="function")
def set_balance(db_session):
    def _set_balance(employee: Employee, leave_type: str, days: float) -> LeaveBalance:
        balance = LeaveBalance(employee_id=employee.id, leave_type=leave_type, remaining_days=days)
        db_session.add(balance)
        db_session.commit()
        return balance
    return _set_balance


@pytest.fixture(scope="function")
def make_leave(db_session):
    """Create leave requests on consecutive non-overlapping date ranges."""
    offset = {"days": 0}

    def _make_leave(employee: Employee, leave_type: str = "paid", days: int = 3, status: str = "pending") -> LeaveRequest:
        start = FIRST_LEAVE_DAY + timedelta(days=offset["days"])
        offset["days"] += days + 1
        leave = LeaveRequest(
            employee_id=employee.id,
            employee_department=employee.department,
            leave_type=leave_type,
            start_date=start,
            end_date=start + timedelta(days=days - 1),
            total_days=days,
            reason="Family trip",
            status=status,
            submitted_date=datetime.now(timezone.utc),
        )
        db_session.add(leave)
        db_session.commit()
        return leave
    return _make_leave


@pytest.fixture(scope="function")
def make_timesheet(db_session):
    def _make_timesheet(employee: Employee, hours: float = 9.5, status: str = "submitted",
                        day: date = date(2026, 10, 12)) -> Timesheet:
        split = split_hours(hours) if status != "draft" else {"regular_hours": 0.0, "overtime_hours": 0.0}
        timesheet = Timesheet(
            employee_id=employee.id,
            department=employee.department,
            role=employee.role,
            date=day,
            clock_in="08:00",
            clock_out="18:00",
            hours=hours,
            status=status,
            submitted_at=datetime.now(timezone.utc) if status != "draft" else None,
            **split,
        )
        db_session.add(timesheet)
        db_session.commit()
        return timesheet
    return _make_timesheet
