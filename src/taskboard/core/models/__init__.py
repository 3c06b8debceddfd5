"""Taskboard Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import ChangeType, TaskStatus
from .event import (
    Event,
    delete_event_of,
    insert_event_of,
    snapshot_of,
    update_event_of,
)
from .identifiable import Identifiable
from .task import Task
from .user import User

__all__ = [
    # 枚举
    "TaskStatus",
    "ChangeType",
    # 聚合
    "Identifiable",
    "Task",
    "User",
    # Event
    "Event",
    "snapshot_of",
    "insert_event_of",
    "update_event_of",
    "delete_event_of",
]
