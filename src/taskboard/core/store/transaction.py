"""聚合写入 + 事件追加的原子事务封装

unit_of_work 是每次 upsert / delete / clear 获取的作用域事务：
进入时取得写锁并 BEGIN IMMEDIATE，正常退出时 COMMIT，
任何异常路径（含取消）都 ROLLBACK，保证聚合行与事件要么同时落盘，要么都不落盘。

共享连接上的写操作由同一把锁串行化，事件 created_at 顺序即提交顺序。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
import structlog

from ..exceptions import StorageFailureError

log = structlog.get_logger()


async def _rollback(conn: aiosqlite.Connection, operation: str) -> None:
    try:
        await conn.rollback()
    except aiosqlite.Error as e:
        # 保留原始异常向上传播，回滚失败只记录
        log.warning("transaction_rollback_failed", operation=operation, error=str(e))


@asynccontextmanager
async def unit_of_work(
    conn: aiosqlite.Connection,
    lock: asyncio.Lock,
    operation: str = "write",
) -> AsyncIterator[aiosqlite.Connection]:
    """作用域事务：commit-or-rollback

    Args:
        conn: 数据库连接（Store 必须共享同一连接以保证事务性）
        lock: Store 组共享的写锁
        operation: 操作名称，用于日志和 StorageFailureError

    Raises:
        StorageFailureError: 底层 sqlite 失败（事务已回滚）
    """
    async with lock:
        try:
            await conn.execute("BEGIN IMMEDIATE")
        except aiosqlite.Error as e:
            raise StorageFailureError(operation, e) from e

        try:
            yield conn
            await conn.commit()
        except aiosqlite.Error as e:
            await _rollback(conn, operation)
            raise StorageFailureError(operation, e) from e
        except BaseException:
            await _rollback(conn, operation)
            raise


@asynccontextmanager
async def read_scope(
    lock: asyncio.Lock,
    operation: str = "read",
) -> AsyncIterator[None]:
    """只读作用域：与写事务互斥，避免读到共享连接上未提交的数据

    Raises:
        StorageFailureError: 底层 sqlite 失败
    """
    async with lock:
        try:
            yield
        except aiosqlite.Error as e:
            raise StorageFailureError(operation, e) from e
