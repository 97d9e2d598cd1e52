from pydantic import BaseModel, ConfigDict, Field
from datetime import date as date_type, datetime
from typing import Optional

CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

class TimesheetCreate(BaseModel):
    date: date_type
    hours: float
    clock_in: Optional[str] = Field(default=None, pattern=CLOCK_PATTERN)
    clock_out: Optional[str] = Field(default=None, pattern=CLOCK_PATTERN)

class TimesheetUpdate(BaseModel):
    date: Optional[date_type] = None
    hours: Optional[float] = None
    clock_in: Optional[str] = Field(default=None, pattern=CLOCK_PATTERN)
    clock_out: Optional[str] = Field(default=None, pattern=CLOCK_PATTERN)

class TimesheetResponse(BaseModel):
    id: int
    employee_id: int
    department: Optional[str] = None
    role: Optional[str] = None
    date: date_type
    clock_in: Optional[str] = None
    clock_out: Optional[str] = None
    hours: float
    regular_hours: float
    overtime_hours: float
    status: str
    submitted_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    reviewed_date: Optional[datetime] = None
    comments: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
