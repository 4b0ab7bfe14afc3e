"""枚举定义

包含 Importance 重要度、EscalationStage 升级阶段，
以及 ALERT_STAGES 告警阶段集合。
"""

from enum import StrEnum


class Importance(StrEnum):
    """任务重要度"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EscalationStage(StrEnum):
    """升级阶段 -- 由截止时间临近程度与推迟次数推导，从低到高排列"""

    NORMAL = "normal"  # 按计划进行
    ATTENTION = "attention"  # 近期需要关注
    URGENT = "urgent"  # 正在变得紧急
    CRITICAL = "critical"  # 已逾期或极度紧急
    EMERGENCY = "emergency"  # 严重逾期


# 需要立即处理的阶段（告警视图）
ALERT_STAGES: frozenset[EscalationStage] = frozenset(
    {EscalationStage.CRITICAL, EscalationStage.EMERGENCY}
)
