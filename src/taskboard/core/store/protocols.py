"""Store / 持久化端口 Protocol 接口定义

使用 Python Protocol 实现结构化子类型（duck typing）。
前三个是存储层接口；后两个是业务层消费的持久化端口。
"""

from typing import Protocol

from ..models.enums import ChangeType, TaskStatus
from ..models.event import Event
from ..models.task import Task
from ..models.user import User


class TaskStore(Protocol):
    """Task 当前状态存储接口"""

    async def create_task(self, task: Task) -> None:
        """插入任务记录"""
        ...

    async def update_task(self, task: Task) -> None:
        """覆盖任务的可变字段"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        ...

    async def list_tasks(
        self,
        status: TaskStatus | None = None,
        assignee_id: str | None = None,
    ) -> list[Task]:
        """查询任务列表"""
        ...

    async def delete_task(self, task_id: str) -> None:
        """删除单个任务"""
        ...

    async def delete_all_tasks(self) -> None:
        """删除全部任务"""
        ...

    async def task_exists(self, task_id: str) -> bool:
        ...

    async def count_tasks(self) -> int:
        ...


class UserStore(Protocol):
    """User 当前状态存储接口"""

    async def create_user(self, user: User) -> None:
        ...

    async def update_user(self, user: User) -> None:
        ...

    async def get_user(self, user_id: str) -> User | None:
        ...

    async def get_user_by_name(self, name: str) -> User | None:
        ...

    async def name_exists(self, name: str) -> bool:
        ...

    async def list_users(self) -> list[User]:
        ...

    async def delete_user(self, user_id: str) -> None:
        ...

    async def delete_all_users(self) -> None:
        ...

    async def user_exists(self, user_id: str) -> bool:
        ...

    async def count_users(self) -> int:
        ...


class EventStore(Protocol):
    """Event 存储接口

    事件表 append-only：只允许插入，不允许更新或删除。
    """

    async def append_event(self, event: Event) -> Event:
        """追加事件，返回分配了 event_id / created_at 的事件"""
        ...

    async def list_events(self, entity_name: str | None = None) -> list[Event]:
        """按追加顺序查询事件"""
        ...

    async def get_events_for_entity(self, entity_name: str, entity_id: str) -> list[Event]:
        """查询单个聚合的历史"""
        ...

    async def count_events(
        self,
        entity_name: str | None = None,
        change_type: ChangeType | None = None,
    ) -> int:
        ...


class TaskPersistencePort(Protocol):
    """业务层消费的 Task 持久化端口"""

    async def clear(self) -> None:
        ...

    async def get_all(self) -> list[Task]:
        ...

    async def get_by_id(self, task_id: str) -> Task | None:
        ...

    async def get_by_status(self, status: TaskStatus) -> list[Task]:
        ...

    async def get_by_assignee(self, user_id: str) -> list[Task]:
        ...

    async def upsert(self, task: Task) -> Task:
        ...

    async def delete(self, task_id: str) -> None:
        ...


class UserPersistencePort(Protocol):
    """业务层消费的 User 持久化端口"""

    async def clear(self) -> None:
        ...

    async def get_all(self) -> list[User]:
        ...

    async def get_by_id(self, user_id: str) -> User | None:
        ...

    async def get_by_name(self, name: str) -> User | None:
        ...

    async def upsert(self, user: User) -> User:
        ...

    async def delete(self, user_id: str) -> None:
        ...
