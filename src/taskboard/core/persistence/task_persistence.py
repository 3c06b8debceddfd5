"""Task 持久化服务 -- 事件溯源实现

每次变更都在同一个 unit_of_work 内写 tasks 表并追加事件：
- upsert 无 id：分配 ULID + created_at = updated_at = now，追加 INSERT
- upsert 有 id：覆盖可变字段并刷新 updated_at，追加 UPDATE
- delete：先追加 DELETE（删除前快照的 id），再删除行，提交后校验行已消失
- clear：为每个现存任务追加 DELETE，再删除全部行，提交后校验这些任务行已消失
"""

from datetime import timedelta

import structlog
from ulid import ULID

from ..exceptions import ConsistencyViolationError, TaskNotFoundError
from ..models.enums import TaskStatus
from ..models.event import delete_event_of, insert_event_of, update_event_of
from ..models.task import Task
from ..store import StoreGroup
from ..timeutil import utc_now

log = structlog.get_logger()


class TaskPersistenceService:
    """业务层 Task 持久化端口的事件溯源实现"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def get_all(self) -> list[Task]:
        async with self._stores.read_scope("task.get_all"):
            return await self._stores.task_store.list_tasks()

    async def get_by_id(self, task_id: str) -> Task | None:
        async with self._stores.read_scope("task.get_by_id"):
            return await self._stores.task_store.get_task(task_id)

    async def get_by_status(self, status: TaskStatus) -> list[Task]:
        async with self._stores.read_scope("task.get_by_status"):
            return await self._stores.task_store.list_tasks(status=status)

    async def get_by_assignee(self, user_id: str) -> list[Task]:
        async with self._stores.read_scope("task.get_by_assignee"):
            return await self._stores.task_store.list_tasks(assignee_id=user_id)

    async def upsert(self, task: Task, acting_user_id: str | None = None) -> Task:
        """创建或更新任务

        Args:
            task: 业务层传入的任务；id 为空表示创建
            acting_user_id: 操作者，写入事件 created_by

        Returns:
            持久化后的 Task

        Raises:
            TaskNotFoundError: 更新的 id 不存在（未发生任何写入）
            StorageFailureError: 存储失败（事务已回滚）
        """
        if task.id is None:
            return await self._insert(task, acting_user_id)
        return await self._update(task, acting_user_id)

    async def _insert(self, task: Task, acting_user_id: str | None) -> Task:
        now = utc_now()
        new_task = task.model_copy(
            update={"id": str(ULID()), "created_at": now, "updated_at": now}
        )
        task_store = self._stores.task_store

        async with self._stores.unit_of_work("task.insert"):
            await task_store.create_task(new_task)
            persisted = await task_store.get_task(new_task.id)
            event = await self._stores.event_store.append_event(
                insert_event_of(persisted, acting_user_id)
            )

        log.info("task_inserted", task_id=persisted.id, event_id=event.event_id)
        return persisted

    async def _update(self, task: Task, acting_user_id: str | None) -> Task:
        task_store = self._stores.task_store

        async with self._stores.unit_of_work("task.update"):
            existing = await task_store.get_task(task.id)
            if existing is None:
                raise TaskNotFoundError(task.id)

            # id 与 created_at 不可变；updated_at 严格晚于上一次更新（时钟回拨时顺延 1 微秒）
            now = utc_now()
            if now <= existing.updated_at:
                now = existing.updated_at + timedelta(microseconds=1)
            changed = existing.model_copy(
                update={
                    "title": task.title,
                    "description": task.description,
                    "status": task.status,
                    "assignee_id": task.assignee_id,
                    "updated_at": now,
                }
            )
            await task_store.update_task(changed)
            persisted = await task_store.get_task(task.id)
            event = await self._stores.event_store.append_event(
                update_event_of(persisted, acting_user_id)
            )

        log.info("task_updated", task_id=persisted.id, event_id=event.event_id)
        return persisted

    async def delete(self, task_id: str, acting_user_id: str | None = None) -> None:
        """删除任务：DELETE 事件先于行删除，二者同一事务

        Raises:
            TaskNotFoundError: 任务不存在（未追加事件）
            ConsistencyViolationError: 提交后任务行仍存在
        """
        task_store = self._stores.task_store

        async with self._stores.unit_of_work("task.delete"):
            existing = await task_store.get_task(task_id)
            if existing is None:
                raise TaskNotFoundError(task_id)
            event = await self._stores.event_store.append_event(
                delete_event_of(existing, acting_user_id)
            )
            await task_store.delete_task(task_id)

        async with self._stores.read_scope("task.delete.verify"):
            still_exists = await task_store.task_exists(task_id)
        if still_exists:
            log.critical("task_delete_not_applied", task_id=task_id, event_id=event.event_id)
            raise ConsistencyViolationError(
                f"Task with ID {task_id} was not successfully deleted."
            )

        log.info("task_deleted", task_id=task_id, event_id=event.event_id)

    async def clear(self) -> None:
        """删除全部任务，每个任务各追加一条 DELETE 事件

        Raises:
            ConsistencyViolationError: 提交后被清空的任务行仍存在
        """
        task_store = self._stores.task_store

        async with self._stores.unit_of_work("task.clear"):
            existing = await task_store.list_tasks()
            for task in existing:
                await self._stores.event_store.append_event(delete_event_of(task, None))
            await task_store.delete_all_tasks()

        # 只校验本次快照内的任务；锁释放后并发创建的新任务不属于本次清空
        cleared_ids = [task.id for task in existing]
        async with self._stores.read_scope("task.clear.verify"):
            remaining = [i for i in cleared_ids if await task_store.task_exists(i)]
        if remaining:
            log.critical("tasks_clear_not_applied", remaining=remaining)
            raise ConsistencyViolationError("Tasks not successfully deleted.")

        log.info("tasks_cleared", count=len(existing))
