"""Task Domain Model

tasks 表只保存当前状态，变更历史记录在 events 表中。
"""

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from .enums import TaskStatus
from .identifiable import Identifiable


class Task(Identifiable):
    """Task 数据模型

    assignee_id 引用 User.id，但不作为外键约束。
    """

    schema_version: ClassVar[int] = 1

    updated_at: datetime | None = Field(default=None, description="更新时间（UTC）")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.OPEN, description="当前状态")
    assignee_id: str | None = Field(default=None, description="负责人 User ID")
