"""Never Forget 异常体系

所有失败都是确定性的：不重试，不吞掉，直接抛给边界层。
边界层按 code 映射为对外可见的错误响应。
"""


class NeverForgetError(Exception):
    """Never Forget 包基础异常"""

    code = "NEVER_FORGET_ERROR"

    def __init__(self, message: str, code: str | None = None) -> None:
        """
        Args:
            message: 错误描述
            code: 机器可读错误码，缺省使用类级别 code
        """
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class TaskValidationError(NeverForgetError):
    """输入校验失败（必填字段为空、枚举越界、时间不可解析或已过去）"""

    code = "VALIDATION_ERROR"


class TaskNotFoundError(NeverForgetError):
    """任务或微步骤不存在"""

    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: str, step_id: str | None = None) -> None:
        """
        Args:
            task_id: 查询的任务 ID
            step_id: 查询的微步骤 ID（任务存在但步骤不存在时给出）
        """
        if step_id is None:
            super().__init__(f"Task {task_id} not found")
        else:
            super().__init__(
                f"Micro-step {step_id} not found in task {task_id}",
                code="STEP_NOT_FOUND",
            )
        self.task_id = task_id
        self.step_id = step_id


class InvalidTaskStateError(NeverForgetError):
    """任务当前状态不允许该操作（例如对已完成任务推迟或再次完成）"""

    code = "INVALID_TASK_STATE"

    def __init__(self, task_id: str, message: str) -> None:
        super().__init__(message)
        self.task_id = task_id
