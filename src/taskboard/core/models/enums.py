"""枚举定义 -- 任务状态与事件变更类型"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态"""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class ChangeType(StrEnum):
    """事件变更类型

    同一聚合的事件序列必须满足：INSERT，零到多次 UPDATE，最多一次终结 DELETE。
    """

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
