"""EventStore 单元测试

测试内容：
1. 追加时分配 event_id 与 created_at
2. created_at 单调不减（时钟回拨时沿用最新时间戳）
3. 按聚合查询历史 + 计数
"""

from datetime import timedelta

import aiosqlite
from taskboard.core.models import ChangeType, Event
from taskboard.core.store import event_store as event_store_module
from taskboard.core.store.event_store import SqliteEventStore
from taskboard.core.timeutil import utc_now


def _event(change_type: ChangeType, entity_id: str, entity_name: str = "Task") -> Event:
    body = {"id": entity_id} if change_type == ChangeType.DELETE else {"id": entity_id, "x": 1}
    return Event(type=change_type, entity_name=entity_name, entity_version=1, body=body)


class TestEventStore:
    """事件日志追加与查询"""

    async def test_append_assigns_id_and_timestamp(self, db_conn: aiosqlite.Connection):
        store = SqliteEventStore(db_conn)
        appended = await store.append_event(_event(ChangeType.INSERT, "t1"))
        await db_conn.commit()

        assert appended.event_id is not None
        assert len(appended.event_id) == 26  # ULID 长度
        assert appended.created_at is not None

        events = await store.list_events()
        assert len(events) == 1
        assert events[0].event_id == appended.event_id
        assert events[0].body == {"id": "t1", "x": 1}

    async def test_append_keeps_preset_id(self, db_conn: aiosqlite.Connection):
        store = SqliteEventStore(db_conn)
        preset = _event(ChangeType.INSERT, "t1").model_copy(update={"event_id": "01JEVT_PRESET_000000000001"})
        appended = await store.append_event(preset)
        assert appended.event_id == "01JEVT_PRESET_000000000001"

    async def test_created_at_never_goes_backwards(self, db_conn: aiosqlite.Connection, monkeypatch):
        """系统时钟回拨时，新事件沿用日志中最新的时间戳"""
        store = SqliteEventStore(db_conn)
        first = await store.append_event(_event(ChangeType.INSERT, "t1"))

        earlier = first.created_at - timedelta(seconds=30)
        monkeypatch.setattr(event_store_module, "utc_now", lambda: earlier)
        second = await store.append_event(_event(ChangeType.UPDATE, "t1"))
        await db_conn.commit()

        assert second.created_at == first.created_at
        history = await store.get_events_for_entity("Task", "t1")
        assert [e.type for e in history] == [ChangeType.INSERT, ChangeType.UPDATE]

    async def test_history_filters_by_entity(self, db_conn: aiosqlite.Connection):
        store = SqliteEventStore(db_conn)
        await store.append_event(_event(ChangeType.INSERT, "t1"))
        await store.append_event(_event(ChangeType.INSERT, "t2"))
        await store.append_event(_event(ChangeType.INSERT, "t1", entity_name="User"))
        await store.append_event(_event(ChangeType.DELETE, "t1"))
        await db_conn.commit()

        history = await store.get_events_for_entity("Task", "t1")
        assert [e.type for e in history] == [ChangeType.INSERT, ChangeType.DELETE]
        assert all(e.entity_id == "t1" for e in history)

        assert len(await store.list_events("User")) == 1
        assert await store.count_events() == 4
        assert await store.count_events("Task") == 3
        assert await store.count_events("Task", ChangeType.DELETE) == 1

    async def test_timestamps_ordered(self, db_conn: aiosqlite.Connection):
        store = SqliteEventStore(db_conn)
        for i in range(5):
            await store.append_event(_event(ChangeType.INSERT, f"t{i}"))
        await db_conn.commit()

        events = await store.list_events()
        stamps = [e.created_at for e in events]
        assert stamps == sorted(stamps)
        assert [e.body["id"] for e in events] == [f"t{i}" for i in range(5)]
        assert all(s <= utc_now() for s in stamps)
