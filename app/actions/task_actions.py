"""
Task Actions
Authenticated boundary between the UI and the task service

Every action returns an ActionResult instead of raising.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

import structlog

from app.models.task import AuthUser, Task
from app.services.auth_service import require_auth
from app.services.task_service import TaskService
from app.utils.errors import TaskAppError, ValidationError
from app.utils.task_cache import TaskListCache
from shared.schemas.task import TaskCreateSchema
from shared.utils.logger import AuditLogger, get_audit_logger

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class ActionResult(Generic[T]):
    """Tagged success/failure result"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None
    field_errors: Optional[Dict[str, List[str]]] = None

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "ActionResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, code: str = "error", field_errors=None) -> "ActionResult[T]":
        return cls(success=False, error=error, code=code, field_errors=field_errors)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize as {success, data} or {success, error}"""
        if self.success:
            data = self.data
            if isinstance(data, Task):
                data = data.to_dict()
            elif isinstance(data, list):
                data = [item.to_dict() if isinstance(item, Task) else item for item in data]
            return {"success": True, "data": data}

        payload = {"success": False, "error": self.error}
        if self.field_errors:
            payload["field_errors"] = self.field_errors
        return payload


def _failure(error: Exception, fallback: str, operation: str, **context) -> ActionResult:
    if isinstance(error, TaskAppError):
        logger.warning(f"{operation} failed", error=error.message, code=error.code, **context)
        field_errors = error.field_errors if isinstance(error, ValidationError) else None
        return ActionResult.fail(error.message, code=error.code, field_errors=field_errors)

    logger.error(f"{operation} failed unexpectedly", error=str(error), exc_info=True, **context)
    return ActionResult.fail(fallback, code="unexpected")


class TaskActions:
    """Actions for one request's caller"""

    def __init__(
        self,
        user: Optional[AuthUser],
        service: TaskService,
        cache: Optional[TaskListCache] = None,
        audit: Optional[AuditLogger] = None
    ):
        self.user = user
        self.service = service
        self.cache = cache or TaskListCache()
        self.audit = audit or get_audit_logger()

    async def list_tasks(self) -> ActionResult[List[Task]]:
        """Tasks for the dashboard, served from cache when warm"""
        try:
            user = require_auth(self.user)

            generation = self.cache.generation(user.id)
            cached = self.cache.get(user.id, generation)
            if cached is not None:
                return ActionResult.ok(cached)

            tasks = await self.service.get_all(user.id)
            self.cache.set(user.id, tasks, generation)
            return ActionResult.ok(tasks)
        except Exception as e:
            return _failure(e, "Failed to fetch tasks", "List tasks")

    async def create_task(self, data: Union[TaskCreateSchema, Dict[str, Any]]) -> ActionResult[Task]:
        """Create a new task"""
        try:
            user = require_auth(self.user)

            task = await self.service.create(user.id, data)

            self.cache.invalidate(user.id)
            self.audit.log_user_action(user.id, "create", "task", task.id)
            return ActionResult.ok(task)
        except Exception as e:
            return _failure(e, "Failed to create task", "Create task")

    async def toggle_task(self, task_id: str) -> ActionResult[Task]:
        """Toggle task completion status"""
        try:
            user = require_auth(self.user)

            task = await self.service.toggle(task_id, user.id)

            self.cache.invalidate(user.id)
            self.audit.log_user_action(
                user.id, "toggle", "task", task.id, {"completed": task.completed}
            )
            return ActionResult.ok(task)
        except Exception as e:
            return _failure(e, "Failed to toggle task", "Toggle task", task_id=task_id)

    async def delete_task(self, task_id: str) -> ActionResult[None]:
        """Delete a task"""
        try:
            user = require_auth(self.user)

            await self.service.delete(task_id, user.id)

            self.cache.invalidate(user.id)
            self.audit.log_user_action(user.id, "delete", "task", task_id)
            return ActionResult.ok(None)
        except Exception as e:
            return _failure(e, "Failed to delete task", "Delete task", task_id=task_id)
