"""
Domain Errors
Failure taxonomy shared by the task service, actions and routes
"""

from typing import Dict, List, Optional


class TaskAppError(Exception):
    """Base error carrying a human-readable message"""

    code = "error"
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TaskAppError):
    """Bad input shape or length"""

    code = "validation"
    default_message = "Invalid input"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[Dict[str, List[str]]] = None):
        self.field_errors = field_errors or {}
        if message is None and self.field_errors:
            message = next(iter(self.field_errors.values()))[0]
        super().__init__(message)


class AuthError(TaskAppError):
    """Missing or invalid session"""

    code = "auth"
    default_message = "Unauthorized"


class NotFoundError(TaskAppError):
    """Target task absent or not owned by the caller"""

    code = "not_found"
    default_message = "Task not found"


class GatewayError(TaskAppError):
    """Remote store call failed"""

    code = "gateway"
    default_message = "Remote store request failed"


class ConflictError(GatewayError):
    """Row changed between read and conditional write"""

    code = "conflict"
    default_message = "Task was changed by another request, please try again"
