"""EventStore SQLite 实现

事件表 append-only：只允许插入，不允许更新或删除。
created_at 单调不减：追加时若系统时钟回拨，沿用日志中最新的时间戳。
同一时间戳的事件按插入顺序（rowid）排序。
"""

import json

import aiosqlite
from ulid import ULID

from ..models.enums import ChangeType
from ..models.event import Event
from ..timeutil import from_db_ts, to_db_ts, utc_now

_COLUMNS = "event_id, type, entity, entity_version, created_by, created_at, body"
_ORDER = "ORDER BY created_at ASC, rowid ASC"


class SqliteEventStore:
    """EventStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_event(self, event: Event) -> Event:
        """追加事件（append-only），返回分配了 event_id / created_at 的事件

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        updates: dict = {}
        if event.event_id is None:
            updates["event_id"] = str(ULID())
        if event.created_at is None:
            now = utc_now()
            latest = await self._latest_created_at()
            updates["created_at"] = now if latest is None or now >= latest else latest
        appended = event.model_copy(update=updates)

        await self._conn.execute(
            f"""
            INSERT INTO events ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                appended.event_id,
                appended.type.value,
                appended.entity_name,
                appended.entity_version,
                appended.created_by,
                to_db_ts(appended.created_at),
                json.dumps(appended.body, ensure_ascii=False),
            ),
        )
        return appended

    async def list_events(self, entity_name: str | None = None) -> list[Event]:
        """查询事件，可按聚合类型筛选，按追加顺序正序"""
        if entity_name:
            cursor = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM events WHERE entity = ? {_ORDER}",
                (entity_name,),
            )
        else:
            cursor = await self._conn.execute(f"SELECT {_COLUMNS} FROM events {_ORDER}")
        rows = await cursor.fetchall()
        return [self._row_to_event(row) for row in rows]

    async def get_events_for_entity(self, entity_name: str, entity_id: str) -> list[Event]:
        """查询单个聚合的完整历史，按追加顺序正序"""
        cursor = await self._conn.execute(
            f"""
            SELECT {_COLUMNS} FROM events
            WHERE entity = ? AND json_extract(body, '$.id') = ?
            {_ORDER}
            """,
            (entity_name, entity_id),
        )
        rows = await cursor.fetchall()
        return [self._row_to_event(row) for row in rows]

    async def count_events(
        self,
        entity_name: str | None = None,
        change_type: ChangeType | None = None,
    ) -> int:
        """统计事件数量"""
        clauses: list[str] = []
        params: list[str] = []
        if entity_name is not None:
            clauses.append("entity = ?")
            params.append(entity_name)
        if change_type is not None:
            clauses.append("type = ?")
            params.append(ChangeType(change_type).value)

        sql = "SELECT COUNT(*) FROM events"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        cursor = await self._conn.execute(sql, params)
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def _latest_created_at(self):
        cursor = await self._conn.execute("SELECT MAX(created_at) FROM events")
        row = await cursor.fetchone()
        if row is None or row[0] is None:
            return None
        return from_db_ts(row[0])

    @staticmethod
    def _row_to_event(row: aiosqlite.Row) -> Event:
        """将数据库行转换为 Event 模型"""
        body = json.loads(row[6]) if row[6] else {}
        return Event(
            event_id=row[0],
            type=ChangeType(row[1]),
            entity_name=row[2],
            entity_version=row[3],
            created_by=row[4],
            created_at=from_db_ts(row[5]),
            body=body,
        )
