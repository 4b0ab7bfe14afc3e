"""派生视图模型

CriticalTaskView = 权威字段 + 某一观测时刻的派生字段。
视图是一次性快照，修改视图不会影响 store 中的权威记录。
"""

from pydantic import BaseModel, Field

from .enums import EscalationStage
from .task import CriticalTask


class VisualIndicators(BaseModel):
    """展示意图（符号化 token，不含具体 emoji / 色值）"""

    icon: str = Field(description="符号图标 token")
    color: str = Field(description="颜色 token")
    urgency_level: int = Field(ge=0, le=100, description="紧迫度 0-100")
    pulse: bool = Field(default=False, description="是否脉冲提示")
    sound: bool = Field(default=False, description="是否声音提示")


class TaskMetrics(BaseModel):
    """单个观测时刻的派生字段"""

    priority_score: float = Field(ge=0, description="优先级分数，仅用于排序")
    escalation_stage: EscalationStage = Field(description="升级阶段")
    visual_indicators: VisualIndicators = Field(description="展示意图")


class CriticalTaskView(CriticalTask):
    """带派生字段的任务快照"""

    priority_score: float = Field(ge=0, description="优先级分数")
    escalation_stage: EscalationStage = Field(description="升级阶段")
    visual_indicators: VisualIndicators = Field(description="展示意图")


class TaskStats(BaseModel):
    """任务统计（阶段计数只统计未完成任务）"""

    total: int = 0
    active: int = 0
    completed: int = 0
    overdue: int = 0
    snoozed: int = 0
    by_stage: dict[EscalationStage, int] = Field(
        default_factory=lambda: {stage: 0 for stage in EscalationStage}
    )
