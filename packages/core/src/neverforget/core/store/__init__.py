"""Never Forget Core Store -- 内存权威集合

Store 由调用方显式构造（不使用进程级单例），测试中每个用例可使用新实例。
"""

from .critical_task_store import CriticalTaskStore


def create_task_store(clock=None) -> CriticalTaskStore:
    """创建 CriticalTaskStore 实例

    Args:
        clock: 可选时钟函数，缺省使用当前 UTC 时间

    Returns:
        空的 CriticalTaskStore
    """
    if clock is None:
        return CriticalTaskStore()
    return CriticalTaskStore(clock=clock)


__all__ = [
    "CriticalTaskStore",
    "create_task_store",
]
