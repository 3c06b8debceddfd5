"""tests/gateway 测试配置 -- FastAPI app + httpx AsyncClient + 业务服务 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskboard.core.persistence import TaskPersistenceService, UserPersistenceService
from taskboard.core.store import StoreGroup, create_store_group
from taskboard.gateway.services.task_service import TaskService
from taskboard.gateway.services.user_service import UserService


@pytest_asyncio.fixture
async def test_app(tmp_path: Path):
    """测试用 FastAPI app（手动初始化 Store，绕过 lifespan）"""
    os.environ["TASKBOARD_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from taskboard.gateway.main import create_app

    app = create_app()
    store_group = await create_store_group(str(tmp_path / "test.db"))
    app.state.store_group = store_group

    yield app

    await store_group.close()
    os.environ.pop("TASKBOARD_DB_PATH", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def store_group(tmp_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """业务服务测试用 Store 组（不经过 HTTP）"""
    group = await create_store_group(str(tmp_path / "service_test.db"))
    yield group
    await group.close()


@pytest_asyncio.fixture
async def task_service(store_group: StoreGroup) -> TaskService:
    return TaskService(TaskPersistenceService(store_group))


@pytest_asyncio.fixture
async def user_service(store_group: StoreGroup) -> UserService:
    return UserService(UserPersistenceService(store_group))
