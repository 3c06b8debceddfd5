"""TraceMiddleware

为单个聚合的操作绑定 aggregate_id，贯穿该请求的持久化日志。
aggregate_id 从 /api/tasks/{id} 或 /api/users/{id} 路径中提取。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# 集合路径段 -> 聚合类型名
_AGGREGATE_SEGMENTS = {"tasks": "Task", "users": "User"}


def extract_aggregate(path: str) -> tuple[str, str] | None:
    """从路径提取 (聚合类型名, id)，非单聚合路径返回 None"""
    parts = [p for p in path.split("/") if p]
    # 只匹配 /api/<collection>/<id>
    if len(parts) == 3 and parts[0] == "api" and parts[1] in _AGGREGATE_SEGMENTS:
        return _AGGREGATE_SEGMENTS[parts[1]], parts[2]
    return None


class TraceMiddleware(BaseHTTPMiddleware):
    """聚合级追踪中间件 -- 为单聚合操作绑定 aggregate_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        aggregate = extract_aggregate(request.url.path)
        if aggregate:
            entity_name, aggregate_id = aggregate
            structlog.contextvars.bind_contextvars(
                entity=entity_name,
                aggregate_id=aggregate_id,
            )

        return await call_next(request)
