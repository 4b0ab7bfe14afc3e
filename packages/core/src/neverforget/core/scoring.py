"""优先级评分与升级阶段计算

纯函数：输入任务快照与观测时刻 now，输出确定的派生值，无副作用。
"""

from datetime import datetime

from .clock import hours_between
from .models.enums import EscalationStage, Importance
from .models.task import CriticalTask, MicroStep
from .models.view import TaskMetrics, VisualIndicators

# 重要度基础分
PRIORITY_WEIGHTS: dict[Importance, int] = {
    Importance.CRITICAL: 100,
    Importance.HIGH: 50,
    Importance.MEDIUM: 25,
    Importance.LOW: 10,
}

# 截止时间加分：(剩余小时上限, 加分)，按顺序匹配第一个
DEADLINE_BONUSES: tuple[tuple[float, int], ...] = (
    (24, 150),
    (72, 100),
    (168, 50),
)
OVERDUE_BASE_BONUS = 200
OVERDUE_PER_HOUR = 10

# 新建任务临时曝光
RECENCY_BONUSES: tuple[tuple[float, int], ...] = (
    (1, 30),
    (24, 10),
)

SNOOZE_SUPPRESSION = 100
SNOOZE_COUNT_PENALTY = 20

# 升级阶段阈值（小时）
EMERGENCY_OVERDUE_HOURS = 72
CRITICAL_OVERDUE_HOURS = 24
CRITICAL_REMAINING_HOURS = 6
URGENT_REMAINING_HOURS = 24
ATTENTION_REMAINING_HOURS = 72
AVOIDANCE_URGENT_SNOOZES = 5
AVOIDANCE_ATTENTION_SNOOZES = 3

VISUAL_INDICATORS: dict[EscalationStage, VisualIndicators] = {
    EscalationStage.EMERGENCY: VisualIndicators(
        icon="alert", color="red", urgency_level=100, pulse=True, sound=True
    ),
    EscalationStage.CRITICAL: VisualIndicators(
        icon="exclamation", color="orange", urgency_level=85, pulse=True, sound=False
    ),
    EscalationStage.URGENT: VisualIndicators(
        icon="warning", color="yellow", urgency_level=65
    ),
    EscalationStage.ATTENTION: VisualIndicators(
        icon="bell", color="blue", urgency_level=40
    ),
    EscalationStage.NORMAL: VisualIndicators(
        icon="note", color="green", urgency_level=20
    ),
}

# 默认微步骤模板：(描述, 预估耗时)
DEFAULT_MICRO_STEPS: tuple[tuple[str, str], ...] = (
    ("Review what needs to be done", "2 min"),
    ("Break down into smaller parts", "5 min"),
    ("Start with the easiest part", "10 min"),
)


def compute_priority_score(task: CriticalTask, now: datetime) -> float:
    """计算优先级分数（越高越靠前）

    计算顺序固定：
    1. 重要度基础分（未知重要度按 medium）
    2. 截止时间加分（逾期按逾期小时线性增长）
    3. 新建任务加分
    4. 处于推迟期：对累计分数减 100，下限 0
    5. 推迟次数惩罚：每次 +20，无论当前是否处于推迟期

    第 4 步作用在累计分数上而非基础分上，严重逾期的任务即使被推迟，
    逾期加分足够大时仍会重新浮现。

    Args:
        task: 任务快照
        now: 观测时刻

    Returns:
        非负分数
    """
    score: float = PRIORITY_WEIGHTS.get(
        task.importance, PRIORITY_WEIGHTS[Importance.MEDIUM]
    )

    if task.deadline is not None:
        hours_until = hours_between(now, task.deadline)
        if hours_until < 0:
            score += OVERDUE_BASE_BONUS + abs(hours_until) * OVERDUE_PER_HOUR
        else:
            for limit, bonus in DEADLINE_BONUSES:
                if hours_until < limit:
                    score += bonus
                    break

    age_hours = hours_between(task.created_at, now)
    for limit, bonus in RECENCY_BONUSES:
        if age_hours < limit:
            score += bonus
            break

    if task.snoozed_until is not None and task.snoozed_until > now:
        score = max(0.0, score - SNOOZE_SUPPRESSION)

    score += task.snooze_count * SNOOZE_COUNT_PENALTY

    return max(0.0, score)


def determine_escalation_stage(task: CriticalTask, now: datetime) -> EscalationStage:
    """判断升级阶段

    优先级：逾期分支 > 剩余时间分支 > 推迟次数兜底。
    阈值为左闭右开，例如剩余恰好 0 小时属于 < 6h，恰好 6 小时不属于。

    Args:
        task: 任务快照
        now: 观测时刻

    Returns:
        EscalationStage
    """
    if task.deadline is None:
        if task.snooze_count >= AVOIDANCE_URGENT_SNOOZES:
            return EscalationStage.URGENT
        return EscalationStage.NORMAL

    hours_until = hours_between(now, task.deadline)

    if hours_until < 0:
        hours_overdue = abs(hours_until)
        if hours_overdue > EMERGENCY_OVERDUE_HOURS:
            return EscalationStage.EMERGENCY
        if hours_overdue > CRITICAL_OVERDUE_HOURS:
            return EscalationStage.CRITICAL
        return EscalationStage.URGENT

    if hours_until < CRITICAL_REMAINING_HOURS:
        return EscalationStage.CRITICAL
    if hours_until < URGENT_REMAINING_HOURS:
        return EscalationStage.URGENT
    if hours_until < ATTENTION_REMAINING_HOURS:
        return EscalationStage.ATTENTION

    # 多次推迟视为回避，逐步升级
    if task.snooze_count >= AVOIDANCE_URGENT_SNOOZES:
        return EscalationStage.URGENT
    if task.snooze_count >= AVOIDANCE_ATTENTION_SNOOZES:
        return EscalationStage.ATTENTION
    return EscalationStage.NORMAL


def visual_indicators_for(stage: EscalationStage) -> VisualIndicators:
    """按阶段查表，返回独立副本"""
    return VISUAL_INDICATORS[stage].model_copy()


def generate_visual_indicators(task: CriticalTask, now: datetime) -> VisualIndicators:
    return visual_indicators_for(determine_escalation_stage(task, now))


def generate_default_micro_steps() -> list[MicroStep]:
    """生成默认的 3 步启动清单（每次调用 ID 都是新的）"""
    return [
        MicroStep(description=description, estimated_duration=duration)
        for description, duration in DEFAULT_MICRO_STEPS
    ]


def derive_metrics(task: CriticalTask, now: datetime) -> TaskMetrics:
    """一次性计算某一观测时刻的全部派生字段"""
    stage = determine_escalation_stage(task, now)
    return TaskMetrics(
        priority_score=compute_priority_score(task, now),
        escalation_stage=stage,
        visual_indicators=visual_indicators_for(stage),
    )
