"""
TaskList view: one TaskItemController per task, plus the empty state
"""

from typing import Dict, List, Optional

from app.actions.task_actions import TaskActions
from app.models.task import Task
from app.ui.task_item import TaskItemController

EMPTY_TITLE = "No tasks yet"
EMPTY_HINT = "Create your first task above to get started"


class TaskListView:
    """Items rendered on the dashboard"""

    title = "Your Tasks"
    empty_title = EMPTY_TITLE
    empty_hint = EMPTY_HINT

    def __init__(self, items: List[TaskItemController]):
        self.items = items

    @classmethod
    def from_tasks(cls, tasks: List[Task], actions: TaskActions) -> "TaskListView":
        return cls([
            TaskItemController(task, actions.toggle_task, actions.delete_task)
            for task in tasks
        ])

    @property
    def visible_items(self) -> List[TaskItemController]:
        return [item for item in self.items if not item.removed]

    @property
    def is_empty(self) -> bool:
        return not self.visible_items

    def find(self, task_id: str) -> Optional[TaskItemController]:
        for item in self.items:
            if item.task.id == task_id:
                return item
        return None

    def errors(self) -> Dict[str, str]:
        return {item.task.id: item.error for item in self.items if item.error}
