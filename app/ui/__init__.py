"""
Server-rendered UI state for the tasks dashboard
"""

from .task_item import TaskItemController, TaskItemState
from .task_form import TaskFormController
from .task_list import TaskListView

__all__ = ["TaskItemController", "TaskItemState", "TaskFormController", "TaskListView"]
