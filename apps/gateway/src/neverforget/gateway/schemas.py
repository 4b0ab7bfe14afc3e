"""网关请求/响应模型

PUT 请求体是按 action 区分的联合类型（complete / snooze / note / step）。
"""

from datetime import datetime
from typing import Annotated, Literal

from neverforget.core.models import CriticalTaskView, Importance
from pydantic import BaseModel, Field


class CreateTaskRequest(BaseModel):
    """创建关键任务请求体"""

    title: str = Field(description="任务标题（必填）")
    description: str | None = Field(default=None, description="任务描述")
    importance: Importance | None = Field(default=None, description="critical|high|medium|low")
    deadline: datetime | None = Field(default=None, description="截止时间，ISO-8601")
    tags: list[str] | None = Field(default=None, description="标签")


class CompleteAction(BaseModel):
    """完成任务"""

    action: Literal["complete"]
    task_id: str


class SnoozeAction(BaseModel):
    """推迟任务"""

    action: Literal["snooze"]
    task_id: str
    until: str = Field(description="推迟到的时间，ISO-8601")
    reason: str = Field(default="", description="推迟原因")


class NoteAction(BaseModel):
    """追加备注"""

    action: Literal["note"]
    task_id: str
    note: str = Field(description="备注内容（不能为空白）")


class StepAction(BaseModel):
    """设置微步骤完成状态"""

    action: Literal["step"]
    task_id: str
    step_id: str
    completed: bool


TaskAction = Annotated[
    CompleteAction | SnoozeAction | NoteAction | StepAction,
    Field(discriminator="action"),
]


class TaskResponse(BaseModel):
    """单任务响应"""

    task: CriticalTaskView
    warning: str | None = None


class TaskListResponse(BaseModel):
    """任务列表响应"""

    count: int
    tasks: list[CriticalTaskView]


class DeleteResponse(BaseModel):
    """删除响应"""

    deleted: int = 0
    cleared: int = 0
