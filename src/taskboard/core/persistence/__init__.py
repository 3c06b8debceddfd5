"""Taskboard Core Persistence -- 事件溯源持久化服务"""

from .task_persistence import TaskPersistenceService
from .user_persistence import UserPersistenceService

__all__ = [
    "TaskPersistenceService",
    "UserPersistenceService",
]
