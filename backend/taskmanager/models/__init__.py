from taskmanager.models.task import Task, TaskPriority, TaskStatus
from taskmanager.models.user import User

__all__ = ["Task", "TaskPriority", "TaskStatus", "User"]
