from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import List, Optional

class ApproveRequest(BaseModel):
    comment: Optional[str] = None

class RejectRequest(BaseModel):
    # Emptiness is checked by the approval engine so it maps to ValidationError (400)
    reason: Optional[str] = None

class BulkApproveRequest(BaseModel):
    ids: List[int]
    comment: Optional[str] = None

class BulkRejectRequest(BaseModel):
    ids: List[int]
    reason: Optional[str] = None

class BulkFailure(BaseModel):
    id: int
    error_kind: str
    message: str

class BulkResult(BaseModel):
    succeeded: List[int] = Field(default_factory=list)
    failed: List[BulkFailure] = Field(default_factory=list)

class AuditEntryResponse(BaseModel):
    id: int
    request_id: int
    request_kind: str
    actor_id: int
    action: str
    previous_status: str
    new_status: str
    comment: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)
