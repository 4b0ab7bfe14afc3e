"""Never Forget Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import ALERT_STAGES, EscalationStage, Importance
from .task import (
    CriticalTask,
    MicroStep,
    NewCriticalTask,
    SnoozeRecord,
    TaskNote,
    new_id,
)
from .view import CriticalTaskView, TaskMetrics, TaskStats, VisualIndicators

__all__ = [
    # 枚举
    "Importance",
    "EscalationStage",
    "ALERT_STAGES",
    # Task
    "CriticalTask",
    "NewCriticalTask",
    "MicroStep",
    "TaskNote",
    "SnoozeRecord",
    "new_id",
    # 派生视图
    "CriticalTaskView",
    "TaskMetrics",
    "TaskStats",
    "VisualIndicators",
]
