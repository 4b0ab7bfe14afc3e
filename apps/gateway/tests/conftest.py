"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient fixture"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from neverforget.core.store import CriticalTaskStore


@pytest_asyncio.fixture
async def test_app(clock):
    """创建测试用 FastAPI app 实例（绕过 lifespan，注入可控时钟的 Store）"""
    from neverforget.gateway.main import create_app

    app = create_app()
    app.state.task_store = CriticalTaskStore(clock=clock)
    yield app
    app.state.task_store = None


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
