"""FastAPI 应用主文件

app 创建 + lifespan 管理：创建任务存储 + 加载配置 + 路由注册。
任务存储只存在于进程内存中，进程结束即丢弃。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from neverforget.core.store import create_task_store

from .config import load_gateway_config
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import actions, health, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时创建空的任务存储"""
    if getattr(app.state, "task_store", None) is None:
        app.state.task_store = create_task_store()
    log.info("task_store_initialized", task_count=len(app.state.task_store))

    yield

    log.info("task_store_discarded", task_count=len(app.state.task_store))
    app.state.task_store = None


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    config = load_gateway_config()

    app = FastAPI(
        title="Never Forget Gateway",
        version="0.1.0",
        description="关键任务优先级与升级提醒 API",
        lifespan=lifespan,
    )
    app.state.gateway_config = config
    app.state.task_store = None

    # 注册中间件（顺序：先 Trace 后 Logging，Logging 在最外层）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging(config)

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(actions.router, tags=["actions"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
