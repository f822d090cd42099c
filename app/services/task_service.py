"""
Task Service
Validation and persistence for the example tasks feature
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from app.models.task import Task
from app.utils.errors import ConflictError, NotFoundError, ValidationError
from app.utils.task_gateway import TaskGateway
from shared.schemas.task import TaskCreateSchema, collect_field_errors, is_valid_task_id

logger = structlog.get_logger(__name__)


def validate_task_input(data: Union[TaskCreateSchema, Dict[str, Any]]) -> TaskCreateSchema:
    """
    Validate task creation input

    Raises:
        ValidationError: With per-field messages
    """
    if isinstance(data, TaskCreateSchema):
        data = data.model_dump()
    try:
        return TaskCreateSchema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(field_errors=collect_field_errors(e)) from e


class TaskService:
    """Task operations scoped to an owner"""

    def __init__(self, gateway: TaskGateway):
        self.gateway = gateway

    async def create(self, owner_id: str, data: Union[TaskCreateSchema, Dict[str, Any]]) -> Task:
        """
        Create a new task

        Args:
            owner_id: Authenticated account id
            data: Title and optional description

        Returns:
            Task: Persisted task with server-assigned id and timestamps

        Raises:
            ValidationError: Title empty or too long, description too long
            GatewayError: Remote insert failed
        """
        validated = validate_task_input(data)

        row = await self.gateway.insert_task(
            user_id=owner_id,
            title=validated.title,
            description=validated.description or None
        )
        task = Task.from_row(row)
        logger.info("Task created", task_id=task.id, user_id=owner_id)
        return task

    async def get_all(self, owner_id: str) -> List[Task]:
        """All tasks for the owner, newest first (empty list when none)"""
        rows = await self.gateway.select_tasks(user_id=owner_id)
        return [Task.from_row(row) for row in rows]

    async def toggle(self, task_id: str, owner_id: str) -> Task:
        """
        Flip a task's completion flag

        The write is conditioned on the value just read, so two concurrent
        toggles cannot both apply.

        Raises:
            NotFoundError: Task absent or owned by someone else
            ConflictError: Task changed between read and write
            GatewayError: Remote call failed
        """
        if not is_valid_task_id(task_id):
            raise NotFoundError()

        current = await self.gateway.select_task(task_id=task_id, user_id=owner_id)
        if current is None:
            raise NotFoundError()

        previous = bool(current.get('completed', False))
        row = await self.gateway.update_completion(
            task_id=task_id,
            user_id=owner_id,
            completed=not previous,
            expected_completed=previous,
            updated_at=datetime.now(timezone.utc).isoformat()
        )

        if row is None:
            if await self.gateway.select_task(task_id=task_id, user_id=owner_id) is None:
                raise NotFoundError()
            logger.warning("Concurrent toggle detected", task_id=task_id, user_id=owner_id)
            raise ConflictError()

        task = Task.from_row(row)
        logger.info("Task toggled", task_id=task.id, completed=task.completed, user_id=owner_id)
        return task

    async def delete(self, task_id: str, owner_id: str) -> None:
        """
        Delete a task

        Raises:
            NotFoundError: No row matched (absent or not owned)
            GatewayError: Remote delete failed
        """
        if not is_valid_task_id(task_id):
            raise NotFoundError()

        deleted = await self.gateway.delete_task(task_id=task_id, user_id=owner_id)
        if deleted == 0:
            raise NotFoundError()

        logger.info("Task deleted", task_id=task_id, user_id=owner_id)
