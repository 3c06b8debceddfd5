"""TaskStore SQLite 实现

tasks 表只保存现存任务的当前状态。
此处仅提供数据库操作，不提交事务，事务由调用方的 unit_of_work 管理。
"""

import aiosqlite

from ..models.enums import TaskStatus
from ..models.task import Task
from ..timeutil import from_db_ts, to_db_ts

_COLUMNS = "id, created_at, updated_at, title, description, status, assignee_id"


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """插入任务记录（id / created_at / updated_at 必须已分配）"""
        await self._conn.execute(
            f"""
            INSERT INTO tasks ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task.id,
                to_db_ts(task.created_at),
                to_db_ts(task.updated_at),
                task.title,
                task.description,
                task.status.value,
                task.assignee_id,
            ),
        )

    async def update_task(self, task: Task) -> None:
        """覆盖可变字段（id 与 created_at 不更新）"""
        await self._conn.execute(
            """
            UPDATE tasks
            SET updated_at = ?, title = ?, description = ?, status = ?, assignee_id = ?
            WHERE id = ?
            """,
            (
                to_db_ts(task.updated_at),
                task.title,
                task.description,
                task.status.value,
                task.assignee_id,
                task.id,
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(
        self,
        status: TaskStatus | None = None,
        assignee_id: str | None = None,
    ) -> list[Task]:
        """查询任务列表，支持按状态 / 负责人筛选，按 created_at 正序"""
        clauses: list[str] = []
        params: list[str] = []
        if status is not None:
            clauses.append("status = ?")
            params.append(TaskStatus(status).value)
        if assignee_id is not None:
            clauses.append("assignee_id = ?")
            params.append(assignee_id)

        sql = f"SELECT {_COLUMNS} FROM tasks"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at ASC, id ASC"

        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def delete_task(self, task_id: str) -> None:
        """删除单个任务"""
        await self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))

    async def delete_all_tasks(self) -> None:
        """删除全部任务"""
        await self._conn.execute("DELETE FROM tasks")

    async def task_exists(self, task_id: str) -> bool:
        """任务行是否存在"""
        cursor = await self._conn.execute(
            "SELECT 1 FROM tasks WHERE id = ? LIMIT 1",
            (task_id,),
        )
        return await cursor.fetchone() is not None

    async def count_tasks(self) -> int:
        """现存任务数量"""
        cursor = await self._conn.execute("SELECT COUNT(*) FROM tasks")
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            created_at=from_db_ts(row[1]),
            updated_at=from_db_ts(row[2]),
            title=row[3],
            description=row[4],
            status=TaskStatus(row[5]),
            assignee_id=row[6],
        )
