from typing import Any, Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field
from datetime import datetime, timezone

T = TypeVar("T")

class ErrorItem(BaseModel):
    msg: str
    code: Optional[str] = None
    field: Optional[str] = None

class ApiResponse(BaseModel, Generic[T]):
    """Envelope for every successful API payload."""

    success: bool = True
    data: Optional[T] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> "ApiResponse[T]":
        return cls(success=True, data=data, metadata=metadata)

class ErrorResponse(BaseModel):
    success: bool = False
    errors: List[ErrorItem]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with JSON-serializable values."""
        return self.model_dump(mode="json", exclude_none=True)
