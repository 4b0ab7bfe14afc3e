"""TaskService -- 边界层业务编排

把网关请求映射到 CriticalTaskStore 操作：
1. 创建请求 -> add_critical_task
2. 按 action 分派更新命令（complete / snooze / note / step）
3. 推迟次数达到阈值时附带回避提示
"""

import structlog
from neverforget.core.exceptions import TaskValidationError
from neverforget.core.models import CriticalTaskView
from neverforget.core.store import CriticalTaskStore

from ..schemas import (
    CompleteAction,
    CreateTaskRequest,
    DeleteResponse,
    NoteAction,
    SnoozeAction,
    StepAction,
    TaskAction,
)

log = structlog.get_logger()

SNOOZE_AVOIDANCE_WARNING = (
    "This task has been snoozed {count} times - consider tackling it now"
)


class TaskService:
    """关键任务边界服务"""

    def __init__(self, store: CriticalTaskStore, snooze_warning_threshold: int = 3) -> None:
        self._store = store
        self._snooze_warning_threshold = snooze_warning_threshold

    def create_task(self, request: CreateTaskRequest) -> CriticalTaskView:
        """创建关键任务"""
        return self._store.add_critical_task(request.model_dump())

    def apply_action(self, action: TaskAction) -> tuple[CriticalTaskView, str | None]:
        """执行更新命令

        Returns:
            (更新后的任务视图, 提示信息或 None)

        Raises:
            TaskNotFoundError / InvalidTaskStateError / TaskValidationError
        """
        match action:
            case CompleteAction():
                return self._store.complete_task(action.task_id), None
            case SnoozeAction():
                view = self._store.snooze_task(action.task_id, action.until, action.reason)
                return view, self._snooze_warning(view)
            case NoteAction():
                if not action.note.strip():
                    raise TaskValidationError("Note text is required")
                return self._store.add_note(action.task_id, action.note), None
            case StepAction():
                view = self._store.update_micro_step(
                    action.task_id, action.step_id, action.completed
                )
                return view, None
        raise TaskValidationError(f"Unsupported action: {action!r}")

    def _snooze_warning(self, view: CriticalTaskView) -> str | None:
        if view.snooze_count < self._snooze_warning_threshold:
            return None
        log.info(
            "snooze_avoidance_detected",
            task_id=view.task_id,
            snooze_count=view.snooze_count,
        )
        return SNOOZE_AVOIDANCE_WARNING.format(count=view.snooze_count)

    def delete(self, task_id: str | None, clear_completed: bool) -> DeleteResponse:
        """删除单个任务，或批量清除已完成任务

        Raises:
            TaskValidationError: 既没有 task_id 也没有 clear_completed
            TaskNotFoundError: 任务不存在
        """
        if task_id is not None:
            self._store.delete_task(task_id)
            return DeleteResponse(deleted=1)
        if clear_completed:
            return DeleteResponse(cleared=self._store.clear_completed())
        raise TaskValidationError("Task id or clear_completed=true is required")
