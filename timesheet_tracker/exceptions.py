"""
Domain exceptions for the timesheet tracker.

Services raise these; the application factory registers handlers that turn
them into JSON error responses carrying the error kind and HTTP status.
"""

from typing import Optional, Any, Dict


class ApplicationException(Exception):
    """Base exception for all application-specific exceptions."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "kind": self.kind, "details": self.details}


class ValidationError(ApplicationException):
    """Malformed or constraint-violating input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(ApplicationException):
    """Requested record does not exist or belongs to another user."""

    status_code = 404

    def __init__(self, resource: str, identifier: Any):
        message = f"{resource} not found"
        super().__init__(message, {"resource": resource, "identifier": str(identifier)})


class ConflictError(ApplicationException):
    """Mutation rejected because of the current state of a record."""

    status_code = 409


class AuthorizationError(ApplicationException):
    """Caller is unauthenticated (401) or lacks the required role (403)."""

    status_code = 403

    def __init__(self, message: str, status_code: int = 403, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code
