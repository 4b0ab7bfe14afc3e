"""错误响应映射

领域异常 -> HTTP 状态码：
- TaskValidationError: 400
- TaskNotFoundError: 404
- InvalidTaskStateError: 409
"""

import structlog
from neverforget.core.exceptions import (
    InvalidTaskStateError,
    NeverForgetError,
    TaskNotFoundError,
    TaskValidationError,
)
from starlette.responses import JSONResponse

log = structlog.get_logger()

_STATUS_CODES: dict[type[NeverForgetError], int] = {
    TaskValidationError: 400,
    TaskNotFoundError: 404,
    InvalidTaskStateError: 409,
}


def error_response(error: NeverForgetError) -> JSONResponse:
    """把领域异常转换为 {"error": {"code", "message"}} 响应"""
    status_code = _STATUS_CODES.get(type(error), 400)
    log.info(
        "request_rejected",
        error_code=error.code,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": error.code,
                "message": error.message,
            }
        },
    )
