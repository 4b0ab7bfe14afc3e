"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 与服务

Store 实例由 app.state 持有，在 lifespan 中创建。
"""

from fastapi import Request
from neverforget.core.store import CriticalTaskStore

from .config import GatewayConfig
from .services.task_service import TaskService


def get_task_store(request: Request) -> CriticalTaskStore:
    """从 app.state 获取 CriticalTaskStore 实例"""
    return request.app.state.task_store


def get_gateway_config(request: Request) -> GatewayConfig:
    """从 app.state 获取网关配置"""
    return request.app.state.gateway_config


def get_task_service(request: Request) -> TaskService:
    """基于 app.state 构造 TaskService"""
    config = get_gateway_config(request)
    return TaskService(
        get_task_store(request),
        snooze_warning_threshold=config.snooze_warning_threshold,
    )
