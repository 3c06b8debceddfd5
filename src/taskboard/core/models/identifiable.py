"""聚合根公共基类

id 与 created_at 由存储层在首次持久化时分配，此后不可变。
schema_version 是聚合的 schema 版本号，写入事件时一并记录，
用于日后回放时识别 schema 漂移。
"""

from datetime import datetime
from typing import ClassVar

from pydantic import BaseModel, Field


class Identifiable(BaseModel):
    """具有标识和完整生命周期的聚合"""

    schema_version: ClassVar[int] = 1

    id: str | None = Field(default=None, description="唯一标识，ULID 格式；未持久化时为空")
    created_at: datetime | None = Field(default=None, description="创建时间（UTC）")

    @classmethod
    def entity_name(cls) -> str:
        """事件中记录的聚合类型名（不带模块路径，便于阅读）"""
        return cls.__name__
