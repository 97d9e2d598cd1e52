from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        """Stable error name reported in bulk results."""
        return type(self).__name__

class ValidationError(AppException):
    """Missing or empty required input, e.g. a rejection reason."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details
        )

class NotFoundError(AppException):
    def __init__(self, resource: str = "Resource", resource_id: Any = None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )

class AuthenticationError(AppException):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )

class AuthorizationError(AppException):
    """Reviewer lacks scope over the request."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )

class InvalidStateError(AppException):
    """Request is not in an actionable state (covers double approval/rejection)."""
    def __init__(self, message: str = "Request already processed", error_code: str = "INVALID_STATE"):
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code
        )

class ConflictError(InvalidStateError):
    """Lost the conditional status write to a concurrent reviewer."""
    def __init__(self, message: str = "Request was modified by another reviewer"):
        super().__init__(message=message, error_code="CONFLICT")

class InsufficientBalanceError(AppException):
    def __init__(self, leave_type: str, available: float, requested: float):
        super().__init__(
            message=(
                f"Insufficient {leave_type} leave balance. "
                f"Available: {available} days, Requested: {requested} days"
            ),
            status_code=400,
            error_code="INSUFFICIENT_BALANCE",
            details={"leave_type": leave_type, "available": available, "requested": requested}
        )
