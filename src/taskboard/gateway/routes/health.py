"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，验证 SQLite 连通性、表结构与 WAL 模式。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse
from taskboard.core.store.sqlite_init import verify_wal_mode

log = structlog.get_logger()

router = APIRouter()

_REQUIRED_TABLES = {"tasks", "users", "events"}


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查"""
    checks: dict[str, str] = {}
    store_group = request.app.state.store_group

    try:
        async with store_group.read_scope("ready"):
            cursor = await store_group.conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )
            tables = {row[0] for row in await cursor.fetchall()}
            wal = await verify_wal_mode(store_group.conn)
        checks["sqlite"] = "ok"
        missing = sorted(_REQUIRED_TABLES - tables)
        checks["schema"] = "ok" if not missing else f"missing: {', '.join(missing)}"
        checks["wal"] = "ok" if wal else "disabled"
    except Exception as e:
        log.warning("readiness_check_failed", check="sqlite", error=str(e))
        checks["sqlite"] = f"error: {e}"

    # WAL 关闭只影响并发性能，不影响就绪
    ready_ok = checks["sqlite"] == "ok" and checks.get("schema") == "ok"
    return JSONResponse(
        status_code=200 if ready_ok else 503,
        content={"status": "ready" if ready_ok else "not_ready", "checks": checks},
    )
