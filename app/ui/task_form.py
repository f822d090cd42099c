"""
TaskForm state: field validation before submit, then the create action
"""

from typing import Awaitable, Callable, Dict, List, Optional

from app.actions.task_actions import ActionResult
from app.ui.task_item import UNEXPECTED_ERROR
from app.utils.errors import ValidationError
from app.services.task_service import validate_task_input

CreateAction = Callable[[dict], Awaitable[ActionResult]]


class TaskFormController:
    """Create-task form"""

    def __init__(self, create_action: CreateAction):
        self.create_action = create_action
        self.title = ""
        self.description = ""
        self.field_errors: Dict[str, List[str]] = {}
        self.error: Optional[str] = None
        self.is_submitting = False

    def field_error(self, name: str) -> Optional[str]:
        messages = self.field_errors.get(name)
        return messages[0] if messages else None

    def reset(self):
        self.title = ""
        self.description = ""
        self.field_errors = {}

    async def submit(self, title: str, description: Optional[str] = None) -> bool:
        """
        Validate and create

        Returns:
            True when the task was created and the form reset
        """
        if self.is_submitting:
            return False

        self.title = title or ""
        self.description = description or ""
        self.field_errors = {}
        self.error = None

        data = {"title": self.title, "description": self.description or None}
        try:
            validate_task_input(data)
        except ValidationError as e:
            self.field_errors = e.field_errors
            return False

        self.is_submitting = True
        try:
            result = await self.create_action(data)
        except Exception:
            self.error = UNEXPECTED_ERROR
            return False
        finally:
            self.is_submitting = False

        if result.success:
            self.reset()
            return True

        if result.field_errors:
            self.field_errors = result.field_errors
        else:
            self.error = result.error
        return False
