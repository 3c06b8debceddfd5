"""任务路由

GET    /api/tasks: 任务列表，支持 status / assignee_id 筛选
GET    /api/tasks/{task_id}: 任务详情（404 不存在）
POST   /api/tasks: 创建任务（400 携带 id）
PUT    /api/tasks/{task_id}: 覆盖任务字段（404 不存在）
DELETE /api/tasks/{task_id}: 删除任务（404 不存在）
DELETE /api/tasks: 清空任务
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse, Response
from taskboard.core.config import TASK_TITLE_MAX_LENGTH
from taskboard.core.models import Task, TaskStatus

from ..deps import get_task_service
from ..services.task_service import TaskService

router = APIRouter()


class TaskRequest(BaseModel):
    """任务请求体（创建时 id 必须为空）"""

    id: str | None = Field(default=None, description="创建时必须为空")
    title: str = Field(min_length=1, max_length=TASK_TITLE_MAX_LENGTH)
    description: str = Field(default="")
    status: TaskStatus = Field(default=TaskStatus.OPEN)
    assignee_id: str | None = Field(default=None)

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            title=self.title,
            description=self.description,
            status=self.status,
            assignee_id=self.assignee_id,
        )


class TaskResponse(BaseModel):
    """任务响应体"""

    id: str
    created_at: str
    updated_at: str
    title: str
    description: str
    status: str
    assignee_id: str | None

    @classmethod
    def from_task(cls, task: Task) -> "TaskResponse":
        return cls(
            id=task.id,
            created_at=task.created_at.isoformat(),
            updated_at=task.updated_at.isoformat(),
            title=task.title,
            description=task.description,
            status=task.status.value,
            assignee_id=task.assignee_id,
        )


@router.get("/api/tasks", response_model=list[TaskResponse])
async def list_tasks(
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    assignee_id: str | None = Query(default=None, description="按负责人筛选"),
    service: TaskService = Depends(get_task_service),
):
    """查询任务列表，按 created_at 正序"""
    tasks = await service.list_tasks(status=status, assignee_id=assignee_id)
    return [TaskResponse.from_task(t) for t in tasks]


@router.get("/api/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """查询任务详情"""
    task = await service.get_by_id(task_id)
    if task is None:
        return JSONResponse(
            status_code=404,
            content={
                "error": {
                    "code": "TASK_NOT_FOUND",
                    "message": f"Task with ID {task_id} does not exist.",
                }
            },
        )
    return TaskResponse.from_task(task)


@router.post("/api/tasks", status_code=201, response_model=TaskResponse)
async def create_task(body: TaskRequest, service: TaskService = Depends(get_task_service)):
    """创建任务"""
    task = await service.create(body.to_task())
    return TaskResponse.from_task(task)


@router.put("/api/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskRequest,
    service: TaskService = Depends(get_task_service),
):
    """覆盖任务的 title / description / status / assignee_id"""
    task = await service.update(task_id, body.to_task())
    return TaskResponse.from_task(task)


@router.delete("/api/tasks/{task_id}", status_code=204)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """删除任务"""
    await service.delete(task_id)
    return Response(status_code=204)


@router.delete("/api/tasks", status_code=204)
async def clear_tasks(service: TaskService = Depends(get_task_service)):
    """清空任务（每个任务各记录一条 DELETE 事件）"""
    await service.clear()
    return Response(status_code=204)
