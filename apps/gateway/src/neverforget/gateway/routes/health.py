"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，确认任务存储已初始化并可查询。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查

    检查项：
    1. task_store: 存储已挂载到 app.state 且可查询
    """
    checks = {}
    all_ok = True

    store = getattr(request.app.state, "task_store", None)
    if store is None:
        checks["task_store"] = "error: not initialized"
        all_ok = False
    else:
        checks["task_store"] = "ok"
        checks["task_count"] = len(store)

    if not all_ok:
        log.warning("readiness_check_failed", checks=checks)

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
