"""全局 pytest 配置 -- 可控时钟 + 独立 CriticalTaskStore fixture"""

from datetime import UTC, datetime, timedelta

import pytest
from neverforget.core.store import CriticalTaskStore


class FrozenClock:
    """可手动推进的时钟，替代 datetime.now(UTC)"""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def now() -> datetime:
    """测试基准时刻"""
    return datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


@pytest.fixture
def clock(now: datetime) -> FrozenClock:
    """从基准时刻开始的可控时钟"""
    return FrozenClock(now)


@pytest.fixture
def store(clock: FrozenClock) -> CriticalTaskStore:
    """每个用例一个全新的空 Store"""
    return CriticalTaskStore(clock=clock)
