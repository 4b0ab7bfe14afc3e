"""CriticalTask Domain Model

只保存权威字段（由命令写入）。
priority_score / escalation_stage / visual_indicators 属于派生字段，
在每次观测时由 projection 计算，不在此模型中保存。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator
from ulid import ULID

from ..clock import ensure_aware
from .enums import Importance


def new_id() -> str:
    """生成 ULID 字符串标识"""
    return str(ULID())


class MicroStep(BaseModel):
    """微步骤 -- 降低启动门槛的小任务"""

    step_id: str = Field(default_factory=new_id, description="步骤 ID")
    description: str = Field(description="步骤描述")
    completed: bool = Field(default=False, description="是否完成")
    estimated_duration: str = Field(default="", description="预估耗时，如 '5 min'")


class TaskNote(BaseModel):
    """任务备注（追加写）"""

    note_id: str = Field(default_factory=new_id, description="备注 ID")
    text: str = Field(description="备注内容")
    created_at: datetime = Field(description="创建时间")


class SnoozeRecord(BaseModel):
    """推迟历史记录"""

    snoozed_at: datetime = Field(description="执行推迟的时间")
    snoozed_until: datetime = Field(description="推迟到的时间")
    reason: str = Field(default="", description="推迟原因")


class CriticalTask(BaseModel):
    """关键任务 -- 权威字段

    completed 单调：一旦为 True 不可回退。
    micro_steps 在创建时固定，之后只允许修改单个步骤的 completed。
    notes / snooze_history 只追加。
    """

    task_id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题")
    description: str = Field(default="", description="任务描述")
    importance: Importance = Field(default=Importance.HIGH, description="重要度")
    deadline: datetime | None = Field(default=None, description="截止时间")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    completed: bool = Field(default=False, description="是否已完成")
    completed_at: datetime | None = Field(default=None, description="完成时间")
    snoozed_until: datetime | None = Field(default=None, description="推迟到")
    snooze_count: int = Field(default=0, ge=0, description="累计推迟次数")
    snooze_history: list[SnoozeRecord] = Field(default_factory=list, description="推迟历史")
    micro_steps: list[MicroStep] = Field(default_factory=list, description="微步骤")
    notes: list[TaskNote] = Field(default_factory=list, description="备注")
    tags: list[str] = Field(default_factory=list, description="标签")

    def find_step(self, step_id: str) -> MicroStep | None:
        for step in self.micro_steps:
            if step.step_id == step_id:
                return step
        return None


class NewCriticalTask(BaseModel):
    """创建关键任务的输入"""

    title: str = Field(description="任务标题（必填，去除首尾空白后不能为空）")
    description: str = Field(default="", description="任务描述")
    importance: Importance = Field(default=Importance.HIGH, description="重要度")
    deadline: datetime | None = Field(default=None, description="截止时间，ISO-8601")
    tags: list[str] = Field(default_factory=list, description="标签")
    micro_steps: list[MicroStep] | None = Field(
        default=None,
        description="自定义微步骤，缺省使用默认模板",
    )

    @field_validator("description", "importance", "tags", mode="before")
    @classmethod
    def _none_as_default(cls, value: Any, info) -> Any:
        # 边界层常把缺省字段传成 null
        if value is not None:
            return value
        return cls.model_fields[info.field_name].get_default(call_default_factory=True)

    @field_validator("deadline")
    @classmethod
    def _deadline_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None
