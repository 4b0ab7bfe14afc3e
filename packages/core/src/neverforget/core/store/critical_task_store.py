"""CriticalTaskStore -- 关键任务的内存权威集合

只保存权威字段；所有读取都在调用时刻重新投影派生字段。
写命令先完成全部校验与状态检查，再整体替换记录（model_copy + 新列表），
被拒绝的命令不会留下部分修改。

并发：每个公开操作持有同一把粗粒度锁，命令内部的读-改-写不会被交错。
"""

import threading
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..clock import Clock, ensure_aware, parse_instant, utc_now
from ..config import TOP_PRIORITY_DEFAULT_COUNT
from ..exceptions import InvalidTaskStateError, TaskNotFoundError, TaskValidationError
from ..models.enums import ALERT_STAGES, EscalationStage
from ..models.task import CriticalTask, NewCriticalTask, SnoozeRecord, TaskNote, new_id
from ..models.view import CriticalTaskView, TaskStats
from ..projection import project_task, sort_by_priority
from ..scoring import determine_escalation_stage, generate_default_micro_steps

log = structlog.get_logger()


class CriticalTaskStore:
    """关键任务存储

    Args:
        clock: 返回当前时间的无参函数，每个操作只读取一次作为观测时刻
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._tasks: dict[str, CriticalTask] = {}
        self._clock = clock
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._tasks)

    # ---- helpers ----

    def _now(self) -> datetime:
        return ensure_aware(self._clock())

    def _require(self, task_id: str) -> CriticalTask:
        task = self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    @staticmethod
    def _coerce_new_task(data: NewCriticalTask | Mapping[str, Any]) -> NewCriticalTask:
        if isinstance(data, NewCriticalTask):
            return data
        try:
            return NewCriticalTask.model_validate(dict(data))
        except PydanticValidationError as e:
            raise TaskValidationError(f"Invalid task data: {e.errors()[0]['msg']}") from e

    @staticmethod
    def _normalize_tags(tags: list[str]) -> list[str]:
        # 去空白、去重，保持原顺序
        return list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))

    def _select(
        self,
        *,
        include_completed: bool,
        stages: frozenset[EscalationStage] | None,
    ) -> list[CriticalTaskView]:
        now = self._now()
        results: list[CriticalTaskView] = []
        for task in self._tasks.values():
            if task.completed and not include_completed:
                continue
            view = project_task(task, now)
            if stages is not None and view.escalation_stage not in stages:
                continue
            results.append(view)
        return sort_by_priority(results)

    # ---- commands ----

    def add_critical_task(self, data: NewCriticalTask | Mapping[str, Any]) -> CriticalTaskView:
        """创建关键任务

        Raises:
            TaskValidationError: 标题为空，或重要度 / 截止时间不合法
        """
        draft = self._coerce_new_task(data)
        title = draft.title.strip()
        if not title:
            raise TaskValidationError("Task title is required")

        if draft.micro_steps is not None:
            micro_steps = [step.model_copy() for step in draft.micro_steps]
        else:
            micro_steps = generate_default_micro_steps()

        with self._lock:
            now = self._now()
            task = CriticalTask(
                task_id=new_id(),
                title=title,
                description=draft.description.strip(),
                importance=draft.importance,
                deadline=draft.deadline,
                created_at=now,
                updated_at=now,
                micro_steps=micro_steps,
                tags=self._normalize_tags(draft.tags),
            )
            self._tasks[task.task_id] = task

        log.info(
            "critical_task_added",
            task_id=task.task_id,
            importance=task.importance.value,
            has_deadline=task.deadline is not None,
        )
        return project_task(task, now)

    def snooze_task(
        self,
        task_id: str,
        until: datetime | str,
        reason: str = "",
    ) -> CriticalTaskView:
        """推迟任务到指定时间

        Raises:
            TaskNotFoundError: 任务不存在
            InvalidTaskStateError: 任务已完成
            TaskValidationError: until 无法解析或不晚于当前时间
        """
        with self._lock:
            task = self._require(task_id)
            if task.completed:
                raise InvalidTaskStateError(task_id, "Cannot snooze a completed task")

            snooze_until = parse_instant(until, field="snooze time")
            now = self._now()
            if snooze_until <= now:
                raise TaskValidationError("Snooze time must be in the future")

            record = SnoozeRecord(
                snoozed_at=now,
                snoozed_until=snooze_until,
                reason=(reason or "").strip(),
            )
            updated = task.model_copy(
                update={
                    "snoozed_until": snooze_until,
                    "snooze_count": task.snooze_count + 1,
                    "snooze_history": [*task.snooze_history, record],
                    "updated_at": now,
                }
            )
            self._tasks[task_id] = updated

        log.info(
            "critical_task_snoozed",
            task_id=task_id,
            snooze_count=updated.snooze_count,
            snoozed_until=snooze_until.isoformat(),
        )
        return project_task(updated, now)

    def complete_task(self, task_id: str) -> CriticalTaskView:
        """标记任务完成（不幂等：重复完成视为错误）

        派生字段不做额外处理，下次读取时按读取时刻重新投影。

        Raises:
            TaskNotFoundError: 任务不存在
            InvalidTaskStateError: 任务已完成
        """
        with self._lock:
            task = self._require(task_id)
            if task.completed:
                raise InvalidTaskStateError(task_id, "Task is already completed")

            now = self._now()
            # 已完成任务不再处于推迟期，推迟记录保留在 snooze_history 中
            updated = task.model_copy(
                update={
                    "completed": True,
                    "completed_at": now,
                    "updated_at": now,
                    "snoozed_until": None,
                }
            )
            self._tasks[task_id] = updated

        log.info("critical_task_completed", task_id=task_id)
        return project_task(updated, now)

    def update_micro_step(self, task_id: str, step_id: str, completed: bool) -> CriticalTaskView:
        """设置微步骤完成状态

        Raises:
            TaskNotFoundError: 任务或步骤不存在
        """
        with self._lock:
            task = self._require(task_id)
            if task.find_step(step_id) is None:
                raise TaskNotFoundError(task_id, step_id=step_id)

            now = self._now()
            steps = [
                step.model_copy(update={"completed": bool(completed)})
                if step.step_id == step_id
                else step
                for step in task.micro_steps
            ]
            updated = task.model_copy(update={"micro_steps": steps, "updated_at": now})
            self._tasks[task_id] = updated

        log.info(
            "micro_step_updated",
            task_id=task_id,
            step_id=step_id,
            completed=bool(completed),
        )
        return project_task(updated, now)

    def add_note(self, task_id: str, text: str) -> CriticalTaskView:
        """追加备注

        Raises:
            TaskNotFoundError: 任务不存在
        """
        with self._lock:
            task = self._require(task_id)
            now = self._now()
            note = TaskNote(text=text.strip(), created_at=now)
            updated = task.model_copy(
                update={"notes": [*task.notes, note], "updated_at": now}
            )
            self._tasks[task_id] = updated

        log.info("task_note_added", task_id=task_id, note_id=note.note_id)
        return project_task(updated, now)

    def delete_task(self, task_id: str) -> None:
        """显式删除单个任务

        Raises:
            TaskNotFoundError: 任务不存在
        """
        with self._lock:
            self._require(task_id)
            del self._tasks[task_id]
        log.info("critical_task_deleted", task_id=task_id)

    def clear_completed(self) -> int:
        """删除所有已完成任务，返回删除数量"""
        with self._lock:
            completed_ids = [tid for tid, task in self._tasks.items() if task.completed]
            for task_id in completed_ids:
                del self._tasks[task_id]
        log.info("completed_tasks_cleared", count=len(completed_ids))
        return len(completed_ids)

    # ---- queries ----

    def get_task(self, task_id: str) -> CriticalTaskView:
        """查询单个任务的当前视图

        Raises:
            TaskNotFoundError: 任务不存在
        """
        with self._lock:
            task = self._require(task_id)
            return project_task(task, self._now())

    def get_critical_tasks(
        self,
        *,
        include_completed: bool = False,
        escalation_stage: EscalationStage | str | None = None,
        limit: int | None = None,
    ) -> list[CriticalTaskView]:
        """查询任务列表

        流程：过滤已完成 -> 按当前时刻重新投影 -> 按阶段过滤
        -> 按 priority_score 倒序 -> 截断到 limit。

        Raises:
            TaskValidationError: 阶段取值非法或 limit < 1
        """
        if limit is not None and limit < 1:
            raise TaskValidationError("limit must be a positive integer")

        stages = None
        if escalation_stage is not None:
            try:
                stages = frozenset({EscalationStage(escalation_stage)})
            except ValueError as e:
                raise TaskValidationError(
                    f"Invalid escalation stage: {escalation_stage!r}"
                ) from e

        with self._lock:
            results = self._select(include_completed=include_completed, stages=stages)

        if limit is not None:
            return results[:limit]
        return results

    def get_top_priority_tasks(self, count: int = TOP_PRIORITY_DEFAULT_COUNT) -> list[CriticalTaskView]:
        return self.get_critical_tasks(limit=count)

    def get_urgent_alerts(self) -> list[CriticalTaskView]:
        """未完成且处于 critical / emergency 阶段的任务，按分数倒序"""
        with self._lock:
            return self._select(include_completed=False, stages=ALERT_STAGES)

    def get_stats(self) -> TaskStats:
        """单次遍历生成统计，阶段计数只统计未完成任务"""
        stats = TaskStats()
        with self._lock:
            now = self._now()
            for task in self._tasks.values():
                stats.total += 1
                if task.completed:
                    stats.completed += 1
                    continue

                stats.active += 1
                if task.deadline is not None and task.deadline < now:
                    stats.overdue += 1
                if task.snoozed_until is not None and task.snoozed_until > now:
                    stats.snoozed += 1
                stats.by_stage[determine_escalation_stage(task, now)] += 1
        return stats
