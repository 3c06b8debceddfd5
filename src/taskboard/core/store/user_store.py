"""UserStore SQLite 实现

users 表只保存现存用户。不提交事务，由调用方管理。
"""

import aiosqlite

from ..models.user import User
from ..timeutil import from_db_ts, to_db_ts


class SqliteUserStore:
    """UserStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_user(self, user: User) -> None:
        """插入用户记录"""
        await self._conn.execute(
            "INSERT INTO users (id, created_at, name) VALUES (?, ?, ?)",
            (user.id, to_db_ts(user.created_at), user.name),
        )

    async def update_user(self, user: User) -> None:
        """仅覆盖 name"""
        await self._conn.execute(
            "UPDATE users SET name = ? WHERE id = ?",
            (user.name, user.id),
        )

    async def get_user(self, user_id: str) -> User | None:
        """根据 id 查询用户"""
        cursor = await self._conn.execute(
            "SELECT id, created_at, name FROM users WHERE id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def get_user_by_name(self, name: str) -> User | None:
        """根据 name 查询用户（重名时返回最早创建者）"""
        cursor = await self._conn.execute(
            """
            SELECT id, created_at, name FROM users
            WHERE name = ?
            ORDER BY created_at ASC
            LIMIT 1
            """,
            (name,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    async def name_exists(self, name: str) -> bool:
        """是否已有现存用户使用该 name"""
        cursor = await self._conn.execute(
            "SELECT 1 FROM users WHERE name = ? LIMIT 1",
            (name,),
        )
        return await cursor.fetchone() is not None

    async def list_users(self) -> list[User]:
        """查询全部用户，按 created_at 正序"""
        cursor = await self._conn.execute(
            "SELECT id, created_at, name FROM users ORDER BY created_at ASC, id ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_user(row) for row in rows]

    async def delete_user(self, user_id: str) -> None:
        await self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    async def delete_all_users(self) -> None:
        await self._conn.execute("DELETE FROM users")

    async def user_exists(self, user_id: str) -> bool:
        cursor = await self._conn.execute(
            "SELECT 1 FROM users WHERE id = ? LIMIT 1",
            (user_id,),
        )
        return await cursor.fetchone() is not None

    async def count_users(self) -> int:
        cursor = await self._conn.execute("SELECT COUNT(*) FROM users")
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """将数据库行转换为 User 模型"""
        return User(id=row[0], created_at=from_db_ts(row[1]), name=row[2])
