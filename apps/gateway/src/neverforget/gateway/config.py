"""GatewayConfig -- 网关配置加载

从环境变量加载配置；非法取值记录告警并回退到默认值，不阻塞启动。
"""

import os
from typing import Literal

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

_DEFAULT_SNOOZE_WARNING_THRESHOLD = 3


class GatewayConfig(BaseModel):
    """网关配置 -- 从环境变量加载

    环境变量:
        NEVERFORGET_LOG_FORMAT: 日志渲染模式（dev/json）
        NEVERFORGET_LOG_LEVEL: 日志级别（默认 INFO）
        NEVERFORGET_SNOOZE_WARNING_THRESHOLD: 推迟回避提示阈值（默认 3）
    """

    log_format: Literal["dev", "json"] = Field(
        default="dev",
        description="日志渲染模式：dev pretty print / json 结构化输出",
    )
    log_level: str = Field(default="INFO", description="日志级别")
    snooze_warning_threshold: int = Field(
        default=_DEFAULT_SNOOZE_WARNING_THRESHOLD,
        ge=1,
        description="snooze_count 达到该值时在推迟响应中附带提示",
    )


def load_gateway_config() -> GatewayConfig:
    """从环境变量加载网关配置

    环境变量映射:
        NEVERFORGET_LOG_FORMAT -> log_format (默认 "dev"，非法值回退)
        NEVERFORGET_LOG_LEVEL -> log_level (默认 "INFO")
        NEVERFORGET_SNOOZE_WARNING_THRESHOLD -> snooze_warning_threshold (默认 3)

    Returns:
        GatewayConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("NEVERFORGET_LOG_FORMAT"):
        if val in ("dev", "json"):
            kwargs["log_format"] = val
        else:
            log.warning(
                "invalid_log_format_config",
                env_var="NEVERFORGET_LOG_FORMAT",
                value=val,
                fallback="dev",
            )

    if val := os.environ.get("NEVERFORGET_LOG_LEVEL"):
        kwargs["log_level"] = val.upper()

    if val := os.environ.get("NEVERFORGET_SNOOZE_WARNING_THRESHOLD"):
        try:
            threshold = int(val)
        except ValueError:
            threshold = 0
        if threshold >= 1:
            kwargs["snooze_warning_threshold"] = threshold
        else:
            log.warning(
                "invalid_snooze_warning_threshold_config",
                env_var="NEVERFORGET_SNOOZE_WARNING_THRESHOLD",
                value=val,
                fallback=_DEFAULT_SNOOZE_WARNING_THRESHOLD,
            )

    return GatewayConfig(**kwargs)
