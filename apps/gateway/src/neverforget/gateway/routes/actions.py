"""任务更新路由

PUT /api/never-forget: 按 action 分派更新命令。
- 200: 更新成功（snooze 可能附带回避提示 warning）
- 400: 输入非法（时间无法解析 / 已过去 / 备注为空白）
- 404: 任务或微步骤不存在
- 409: 任务状态不允许（已完成的任务不能再完成或推迟）
"""

from fastapi import APIRouter, Depends
from neverforget.core.exceptions import NeverForgetError

from ..deps import get_task_service
from ..errors import error_response
from ..schemas import TaskAction, TaskResponse

router = APIRouter()


@router.put("/api/never-forget", response_model=TaskResponse)
async def update_task(body: TaskAction, service=Depends(get_task_service)):
    """执行 complete / snooze / note / step 命令"""
    try:
        task, warning = service.apply_action(body)
    except NeverForgetError as e:
        return error_response(e)

    return TaskResponse(task=task, warning=warning)
