"""Event Domain Model + 事件构造函数

事件表 append-only，不允许更新或删除。
event_id 与 created_at 由 EventStore 在追加时分配。
INSERT/UPDATE 的 body 是聚合在写入时刻的完整快照；
DELETE 的 body 只包含聚合 id。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import ChangeType
from .identifiable import Identifiable


class Event(BaseModel):
    """Event 数据模型"""

    event_id: str | None = Field(default=None, description="唯一标识，ULID 格式，追加时分配")
    type: ChangeType = Field(description="变更类型")
    entity_name: str = Field(description="聚合类型名，如 Task / User")
    entity_version: int = Field(description="写入时聚合的 schema 版本号")
    created_by: str | None = Field(
        default=None,
        description="操作者 User ID（尚无认证，目前总为空）",
    )
    created_at: datetime | None = Field(default=None, description="追加时间（UTC）")
    body: dict[str, Any] = Field(default_factory=dict, description="事件内容")

    @property
    def entity_id(self) -> str | None:
        """事件所描述的聚合 id"""
        return self.body.get("id")


def snapshot_of(aggregate: Identifiable) -> dict[str, Any]:
    """生成聚合的结构化快照（字段名 -> JSON 值，保持字段声明顺序）"""
    return aggregate.model_dump(mode="json")


def _event_of(
    change_type: ChangeType,
    aggregate: Identifiable,
    acting_user_id: str | None,
    body: dict[str, Any],
) -> Event:
    return Event(
        type=change_type,
        entity_name=aggregate.entity_name(),
        entity_version=aggregate.schema_version,
        created_by=acting_user_id,
        body=body,
    )


def insert_event_of(aggregate: Identifiable, acting_user_id: str | None = None) -> Event:
    """构造 INSERT 事件，body 为完整快照"""
    return _event_of(ChangeType.INSERT, aggregate, acting_user_id, snapshot_of(aggregate))


def update_event_of(aggregate: Identifiable, acting_user_id: str | None = None) -> Event:
    """构造 UPDATE 事件，body 为变更后的完整快照"""
    return _event_of(ChangeType.UPDATE, aggregate, acting_user_id, snapshot_of(aggregate))


def delete_event_of(aggregate: Identifiable, acting_user_id: str | None = None) -> Event:
    """构造 DELETE 事件，body 仅包含 id"""
    return _event_of(
        ChangeType.DELETE,
        aggregate,
        acting_user_id,
        {"id": str(aggregate.id)},
    )
