from pydantic import BaseModel, ConfigDict
from datetime import date, datetime
from typing import Dict, Optional
from hr_approvals.models.leave_request import LeaveType

class LeaveRequestCreate(BaseModel):
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str] = None

class LeaveRequestUpdate(BaseModel):
    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None

class LeaveRequestResponse(BaseModel):
    id: int
    employee_id: int
    employee_department: Optional[str] = None
    leave_type: str
    start_date: date
    end_date: date
    total_days: float
    reason: str
    status: str
    submitted_date: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_date: Optional[datetime] = None
    comments: Optional[str] = None
    leave_balance_before: Optional[Dict[str, float]] = None
    leave_balance_after: Optional[Dict[str, float]] = None

    model_config = ConfigDict(from_attributes=True)

class LeaveBalanceResponse(BaseModel):
    employee_id: int
    balances: Dict[str, float]
