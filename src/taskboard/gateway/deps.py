"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 与业务服务

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理；
业务服务按请求构造，共享同一个 StoreGroup。
"""

from fastapi import Depends, Request
from taskboard.core.persistence import TaskPersistenceService, UserPersistenceService
from taskboard.core.store import StoreGroup

from .services.task_service import TaskService
from .services.user_service import UserService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_task_service(store_group: StoreGroup = Depends(get_store_group)) -> TaskService:
    return TaskService(TaskPersistenceService(store_group))


def get_user_service(store_group: StoreGroup = Depends(get_store_group)) -> UserService:
    return UserService(UserPersistenceService(store_group))
