"""
Task data schemas for the SaaS starter

Pydantic models for task input validation and serialization.
"""

from typing import Optional, Dict, Any, List
from uuid import UUID

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


def _check_title(v):
    if v is None or len(v) < 1:
        raise ValueError('Title is required')
    if len(v) > TITLE_MAX_LENGTH:
        raise ValueError(f'Title must be less than {TITLE_MAX_LENGTH} characters')
    return v


def _check_description(v):
    if v is not None and len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f'Description must be less than {DESCRIPTION_MAX_LENGTH} characters')
    return v


class TaskCreateSchema(BaseModel):
    """Schema for creating a new task"""
    title: str = Field("", validate_default=True)
    description: Optional[str] = None

    @field_validator('title', mode='before')
    @classmethod
    def default_missing_title(cls, v):
        return "" if v is None else v

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        return _check_title(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return _check_description(v)


class TaskUpdateSchema(BaseModel):
    """Schema for updating a task"""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return v
        return _check_title(v)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v):
        return _check_description(v)


class TaskToggleSchema(BaseModel):
    """Schema for toggling task completion"""
    id: str
    completed: bool

    @field_validator('id')
    @classmethod
    def validate_id(cls, v):
        try:
            UUID(str(v))
        except ValueError:
            raise ValueError('Invalid task ID')
        return v


def collect_field_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
    """
    Flatten a pydantic ValidationError into {field: [messages]}

    Messages raised by our validators are reported verbatim; pydantic's
    own messages are kept for type errors.
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get('loc', ())) or "__root__"
        ctx_error = (error.get('ctx') or {}).get('error')
        if error.get('type') == 'value_error' and ctx_error is not None:
            message = str(ctx_error)
        else:
            message = error.get('msg', 'Invalid value')
        errors.setdefault(field, []).append(message)
    return errors


def is_valid_task_id(task_id: Any) -> bool:
    """True when task_id is a UUID string"""
    try:
        UUID(str(task_id))
    except ValueError:
        return False
    return True
