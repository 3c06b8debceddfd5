"""事件日志路由（只读审计）

GET /api/events: 按追加顺序列出事件，支持 entity 筛选。
GET /api/events/{entity}/{entity_id}: 单个聚合的完整历史。
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from taskboard.core.models import Event
from taskboard.core.store import StoreGroup

from ..deps import get_store_group

router = APIRouter()


class EventResponse(BaseModel):
    """事件响应体"""

    event_id: str
    type: str
    entity_name: str
    entity_version: int
    created_by: str | None
    created_at: str
    body: dict[str, Any]


def _to_response(event: Event) -> EventResponse:
    return EventResponse(
        event_id=event.event_id,
        type=event.type.value,
        entity_name=event.entity_name,
        entity_version=event.entity_version,
        created_by=event.created_by,
        created_at=event.created_at.isoformat(),
        body=event.body,
    )


@router.get("/api/events", response_model=list[EventResponse])
async def list_events(
    entity: str | None = Query(default=None, description="按聚合类型筛选，如 Task / User"),
    store_group: StoreGroup = Depends(get_store_group),
):
    """列出事件日志"""
    async with store_group.read_scope("events.list"):
        events = await store_group.event_store.list_events(entity)
    return [_to_response(e) for e in events]


@router.get("/api/events/{entity}/{entity_id}", response_model=list[EventResponse])
async def get_entity_history(
    entity: str,
    entity_id: str,
    store_group: StoreGroup = Depends(get_store_group),
):
    """单个聚合的历史（已删除聚合的历史仍可查询）"""
    async with store_group.read_scope("events.history"):
        events = await store_group.event_store.get_events_for_entity(entity, entity_id)
    return [_to_response(e) for e in events]
