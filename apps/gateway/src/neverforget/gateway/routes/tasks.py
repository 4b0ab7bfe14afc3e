"""关键任务路由

GET    /api/never-forget: 任务列表，支持 stats / alerts / top / 阶段筛选 / limit。
GET    /api/never-forget/{task_id}: 单个任务当前视图。
POST   /api/never-forget: 创建关键任务。
DELETE /api/never-forget/{task_id}: 删除单个任务。
DELETE /api/never-forget?clear_completed=true: 清除所有已完成任务。
"""

from fastapi import APIRouter, Depends, Query
from neverforget.core.exceptions import NeverForgetError
from neverforget.core.models import EscalationStage
from starlette.responses import JSONResponse

from ..deps import get_task_service, get_task_store
from ..errors import error_response
from ..schemas import CreateTaskRequest, TaskListResponse, TaskResponse

router = APIRouter()


@router.get("/api/never-forget")
async def list_tasks(
    stats: bool = Query(default=False, description="返回统计信息"),
    alerts: bool = Query(default=False, description="仅返回 critical/emergency 告警"),
    top: int | None = Query(default=None, ge=1, description="返回优先级最高的 N 个任务"),
    include_completed: bool = Query(default=False, description="包含已完成任务"),
    escalation_stage: EscalationStage | None = Query(default=None, description="按阶段筛选"),
    limit: int | None = Query(default=None, ge=1, description="最多返回条数"),
    store=Depends(get_task_store),
):
    """查询关键任务

    优先级：stats > alerts > top > 普通列表。
    """
    if stats:
        return store.get_stats()

    if alerts:
        tasks = store.get_urgent_alerts()
    elif top is not None:
        tasks = store.get_top_priority_tasks(top)
    else:
        try:
            tasks = store.get_critical_tasks(
                include_completed=include_completed,
                escalation_stage=escalation_stage,
                limit=limit,
            )
        except NeverForgetError as e:
            return error_response(e)

    return TaskListResponse(count=len(tasks), tasks=tasks)


@router.get("/api/never-forget/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, store=Depends(get_task_store)):
    """查询单个任务（派生字段按请求时刻计算）"""
    try:
        task = store.get_task(task_id)
    except NeverForgetError as e:
        return error_response(e)
    return TaskResponse(task=task)


@router.post("/api/never-forget")
async def create_task(body: CreateTaskRequest, service=Depends(get_task_service)):
    """创建关键任务

    - 创建成功返回 201
    - 标题为空白返回 400
    """
    try:
        task = service.create_task(body)
    except NeverForgetError as e:
        return error_response(e)

    return JSONResponse(
        status_code=201,
        content=TaskResponse(task=task).model_dump(mode="json"),
    )


@router.delete("/api/never-forget/{task_id}")
async def delete_task(task_id: str, service=Depends(get_task_service)):
    """删除单个任务（通常应标记完成而不是删除）"""
    try:
        result = service.delete(task_id, clear_completed=False)
    except NeverForgetError as e:
        return error_response(e)
    return result


@router.delete("/api/never-forget")
async def clear_tasks(
    clear_completed: bool = Query(default=False, description="清除所有已完成任务"),
    service=Depends(get_task_service),
):
    """批量清除已完成任务"""
    try:
        result = service.delete(None, clear_completed=clear_completed)
    except NeverForgetError as e:
        return error_response(e)
    return result
