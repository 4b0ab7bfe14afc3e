"""时间工具 -- 观测时刻与 ISO-8601 时间解析

所有内部时间均为带时区的 UTC datetime；
调用方传入的无时区时间按 UTC 解释。
"""

from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .exceptions import TaskValidationError

Clock = Callable[[], datetime]

_DATETIME_ADAPTER = TypeAdapter(datetime)


def utc_now() -> datetime:
    """默认时钟：当前 UTC 时间"""
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """无时区时间视为 UTC，有时区时间统一换算到 UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_instant(value: datetime | str, field: str = "time") -> datetime:
    """解析时间点（datetime 或 ISO-8601 字符串）

    Raises:
        TaskValidationError: 无法解析为合法时间点
    """
    if isinstance(value, str) and not value.strip():
        raise TaskValidationError(f"Invalid {field}: empty value")
    try:
        parsed = _DATETIME_ADAPTER.validate_python(value)
    except PydanticValidationError as e:
        raise TaskValidationError(f"Invalid {field}: {value!r}") from e
    return ensure_aware(parsed)


def hours_between(start: datetime, end: datetime) -> float:
    """end - start，单位小时（可为负）"""
    return (end - start).total_seconds() / 3600
