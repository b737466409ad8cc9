from taskmanager.repositories.base import BaseRepository, Page, Pagination
from taskmanager.repositories.task import TaskRepository
from taskmanager.repositories.user import UserRepository

__all__ = ["BaseRepository", "Page", "Pagination", "TaskRepository", "UserRepository"]
