"""
TaskItem interaction state

idle -> toggling -> idle and idle -> deleting -> idle|removed, with an
optimistic completion flip that is rolled back when the toggle fails.
"""

from enum import Enum
from typing import Awaitable, Callable, Optional

import structlog

from app.actions.task_actions import ActionResult
from app.models.task import Task

logger = structlog.get_logger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"

ToggleAction = Callable[[str], Awaitable[ActionResult]]
DeleteAction = Callable[[str], Awaitable[ActionResult]]


class TaskItemState(str, Enum):
    IDLE = "idle"
    TOGGLING = "toggling"
    DELETING = "deleting"


class TaskItemController:
    """One rendered task row and its in-flight guard"""

    def __init__(self, task: Task, toggle_action: ToggleAction, delete_action: DeleteAction):
        self.task = task
        self.toggle_action = toggle_action
        self.delete_action = delete_action

        self.state = TaskItemState.IDLE
        self.completed = task.completed
        self.error: Optional[str] = None
        self.removed = False

    @property
    def busy(self) -> bool:
        return self.state is not TaskItemState.IDLE

    @property
    def toggle_disabled(self) -> bool:
        return self.state is TaskItemState.TOGGLING

    @property
    def delete_disabled(self) -> bool:
        return self.state is TaskItemState.DELETING

    async def toggle(self) -> bool:
        """
        Checkbox interaction

        Returns:
            True if the toggle was confirmed, False if it failed or was ignored
        """
        if self.busy or self.removed:
            return False

        self.state = TaskItemState.TOGGLING
        self.error = None

        previous = self.completed
        self.completed = not previous

        try:
            result = await self.toggle_action(self.task.id)
        except Exception as e:
            logger.error("Toggle action raised", task_id=self.task.id, error=str(e))
            self.completed = previous
            self.error = UNEXPECTED_ERROR
            return False
        finally:
            self.state = TaskItemState.IDLE

        if not result.success:
            self.completed = previous
            self.error = result.error
            return False

        if result.data is not None:
            self.task = result.data
            self.completed = result.data.completed
        return True

    async def delete(self) -> bool:
        """
        Delete click

        On success the row is marked removed and the parent re-renders its
        list from fresh data; on failure the row stays with an inline error.
        """
        if self.busy or self.removed:
            return False

        self.state = TaskItemState.DELETING
        self.error = None

        try:
            result = await self.delete_action(self.task.id)
        except Exception as e:
            logger.error("Delete action raised", task_id=self.task.id, error=str(e))
            self.error = UNEXPECTED_ERROR
            self.state = TaskItemState.IDLE
            return False

        if not result.success:
            self.error = result.error
            self.state = TaskItemState.IDLE
            return False

        self.removed = True
        self.state = TaskItemState.IDLE
        return True
