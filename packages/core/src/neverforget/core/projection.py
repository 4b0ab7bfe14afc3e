"""读时投影模块

把权威记录 CriticalTask 投影为某一观测时刻的 CriticalTaskView。
派生字段只存在于投影结果中，从不写回权威记录，
因此不会有过期的派生数据泄漏给其他观察者。
"""

from datetime import datetime

from .models.task import CriticalTask
from .models.view import CriticalTaskView
from .scoring import derive_metrics


def project_task(task: CriticalTask, now: datetime) -> CriticalTaskView:
    """计算单个任务在 now 时刻的视图

    Args:
        task: 权威记录
        now: 观测时刻

    Returns:
        深拷贝的视图，修改它不会影响权威记录
    """
    metrics = derive_metrics(task, now)
    return CriticalTaskView.model_validate(
        {**task.model_dump(), **metrics.model_dump()}
    )


def sort_by_priority(views: list[CriticalTaskView]) -> list[CriticalTaskView]:
    """按 priority_score 倒序（稳定排序，同分保持原顺序）"""
    return sorted(views, key=lambda view: view.priority_score, reverse=True)
