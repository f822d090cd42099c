"""
Shared data schemas for the SaaS starter

This package contains the validation schemas used by the service and its forms.
"""

from .task import (
    TaskCreateSchema, TaskUpdateSchema, TaskToggleSchema,
    collect_field_errors, is_valid_task_id
)
from .auth import LoginSchema, SignupSchema, RefreshTokenSchema

__all__ = [
    "TaskCreateSchema",
    "TaskUpdateSchema",
    "TaskToggleSchema",
    "collect_field_errors",
    "is_valid_task_id",
    "LoginSchema",
    "SignupSchema",
    "RefreshTokenSchema",
]

__version__ = "1.0.0"
