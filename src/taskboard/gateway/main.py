"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 路由注册 + 业务异常映射。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from taskboard.core.config import get_db_path
from taskboard.core.exceptions import (
    ConsistencyViolationError,
    DuplicateNameError,
    MalformedRequestError,
    StorageFailureError,
    TaskboardError,
    TaskNotFoundError,
    UserNotFoundError,
)
from taskboard.core.store import create_store_group

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import events, health, tasks, users

log = structlog.get_logger()

# 业务异常 -> HTTP 状态码
_STATUS_BY_ERROR: dict[type[TaskboardError], int] = {
    MalformedRequestError: 400,
    DuplicateNameError: 400,
    TaskNotFoundError: 404,
    UserNotFoundError: 404,
    StorageFailureError: 500,
    ConsistencyViolationError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时打开 Store，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group
    log.info("store_group_initialized", db_path=db_path)

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.close()


async def handle_taskboard_error(request: Request, exc: TaskboardError) -> JSONResponse:
    """业务异常统一转换为 {"error": {"code", "message"}}"""
    status_code = _STATUS_BY_ERROR.get(type(exc), 500)
    if status_code >= 500:
        # 服务端错误不透出存储细节
        log.error(
            "request_failed",
            code=exc.code,
            error=exc.message,
            recoverable=exc.recoverable,
        )
        message = "Internal server error"
    else:
        message = exc.message

    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": exc.code, "message": message}},
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Taskboard",
        version="0.1.0",
        description="Taskboard 事件溯源任务/用户 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(TaskboardError, handle_taskboard_error)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    # 注册路由
    app.include_router(users.router, tags=["users"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(events.router, tags=["events"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
