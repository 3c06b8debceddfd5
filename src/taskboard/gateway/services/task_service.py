"""TaskService -- 任务业务逻辑

创建请求不允许携带 id；更新时 id 取自路径，其余字段整体覆盖。
"""

import structlog
from taskboard.core.exceptions import MalformedRequestError
from taskboard.core.models import Task, TaskStatus
from taskboard.core.store.protocols import TaskPersistencePort

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, persistence: TaskPersistencePort) -> None:
        self._persistence = persistence

    async def clear(self) -> None:
        await self._persistence.clear()

    async def get_all(self) -> list[Task]:
        return await self._persistence.get_all()

    async def get_by_id(self, task_id: str) -> Task | None:
        return await self._persistence.get_by_id(task_id)

    async def get_by_status(self, status: TaskStatus) -> list[Task]:
        return await self._persistence.get_by_status(status)

    async def get_by_assignee(self, user_id: str) -> list[Task]:
        return await self._persistence.get_by_assignee(user_id)

    async def list_tasks(
        self,
        status: TaskStatus | None = None,
        assignee_id: str | None = None,
    ) -> list[Task]:
        """组合筛选：两个条件都给出时取交集"""
        if status is not None and assignee_id is not None:
            tasks = await self._persistence.get_by_status(status)
            return [t for t in tasks if t.assignee_id == assignee_id]
        if status is not None:
            return await self._persistence.get_by_status(status)
        if assignee_id is not None:
            return await self._persistence.get_by_assignee(assignee_id)
        return await self._persistence.get_all()

    async def create(self, task: Task) -> Task:
        """创建任务

        Raises:
            MalformedRequestError: 请求携带了 id
        """
        if task.id is not None:
            log.info("task_create_rejected", reason="id_supplied", task_id=task.id)
            raise MalformedRequestError("Task ID must not be set.")
        return await self._persistence.upsert(task)

    async def update(self, task_id: str, task: Task) -> Task:
        """整体覆盖任务的可变字段

        Raises:
            MalformedRequestError: 请求体 id 与路径 id 不一致
            TaskNotFoundError: 任务不存在
        """
        if task.id is not None and task.id != task_id:
            raise MalformedRequestError(
                f"Task ID in body ({task.id}) does not match path ({task_id})."
            )
        return await self._persistence.upsert(task.model_copy(update={"id": task_id}))

    async def delete(self, task_id: str) -> None:
        await self._persistence.delete(task_id)
