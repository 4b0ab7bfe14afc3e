"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from neverforget.core.store import CriticalTaskStore


@pytest_asyncio.fixture
async def integration_app(clock):
    """集成测试用 FastAPI app（可控时钟）"""
    from neverforget.gateway.main import create_app

    app = create_app()
    app.state.task_store = CriticalTaskStore(clock=clock)

    yield app

    app.state.task_store = None


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
