"""Core 包测试 fixtures"""

from datetime import datetime, timedelta

import pytest
from neverforget.core.models import CriticalTask, Importance


@pytest.fixture
def make_task(now: datetime):
    """按相对 now 的小时偏移构造任务快照

    deadline_in / created_ago / snoozed_for 单位均为小时，None 表示不设置。
    """

    def _make(
        importance: Importance = Importance.HIGH,
        deadline_in: float | None = None,
        created_ago: float = 0,
        snooze_count: int = 0,
        snoozed_for: float | None = None,
        completed: bool = False,
    ) -> CriticalTask:
        created_at = now - timedelta(hours=created_ago)
        return CriticalTask(
            task_id="01HZZZZZZZZZZZZZZZZZZZZZZZ",
            title="File taxes",
            importance=importance,
            deadline=None if deadline_in is None else now + timedelta(hours=deadline_in),
            created_at=created_at,
            updated_at=created_at,
            completed=completed,
            snooze_count=snooze_count,
            snoozed_until=None if snoozed_for is None else now + timedelta(hours=snoozed_for),
        )

    return _make
