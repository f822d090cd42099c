from .task_actions import ActionResult, TaskActions

__all__ = ["ActionResult", "TaskActions"]
