"""TraceMiddleware -- 任务级追踪

对单任务路由（/api/never-forget/{task_id}）绑定 trace_id，
同一任务的日志可按 trace_id 串联。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_TASK_ROUTE_PREFIX = "/api/never-forget/"
_ULID_LENGTH = 26


def extract_task_id(path: str) -> str | None:
    """从路径中提取 task_id，不是 ULID 形态时返回 None"""
    if not path.startswith(_TASK_ROUTE_PREFIX):
        return None
    candidate = path[len(_TASK_ROUTE_PREFIX):].split("/", 1)[0]
    if len(candidate) != _ULID_LENGTH:
        return None
    return candidate


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件 -- 为单任务操作绑定 trace_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        task_id = extract_task_id(request.url.path)
        if task_id:
            structlog.contextvars.bind_contextvars(trace_id=f"trace-{task_id}")

        return await call_next(request)
