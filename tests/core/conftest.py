"""tests/core 测试配置 -- Store 组与持久化服务 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from taskboard.core.persistence import TaskPersistenceService, UserPersistenceService
from taskboard.core.store import StoreGroup, create_store_group


@pytest_asyncio.fixture
async def store_group(tmp_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """核心层已初始化的 Store 组"""
    group = await create_store_group(str(tmp_path / "core_test.db"))
    yield group
    await group.close()


@pytest_asyncio.fixture
async def task_persistence(store_group: StoreGroup) -> TaskPersistenceService:
    return TaskPersistenceService(store_group)


@pytest_asyncio.fixture
async def user_persistence(store_group: StoreGroup) -> UserPersistenceService:
    return UserPersistenceService(store_group)
