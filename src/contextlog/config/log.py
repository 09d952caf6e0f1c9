"""日志配置解析。

把默认值、外部配置源与环境变量合并为一个静态结构的 `LoggerConfig`，
优先级（由低到高）：

    默认值 < 外部配置源的 ``logger`` 段 < 环境变量（CONTEXTLOG_*）

应用名称（基础绑定 ``_app``）：环境变量 CONTEXTLOG_APPNAME > 外部配置的
``appName`` > 进程的启动脚本（sys.argv[0]）> 进程 ID。

解析过程不会抛出任何异常：配置源读取失败或内容无效时静默使用默认值。
"""

from __future__ import annotations

import os
import re
import sys
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contextlog.config.settings import Settings
from contextlog.config.source import ConfigSource
from contextlog.keys import APP_KEY
from contextlog.utils.log.levels import normalize_level, require_level

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class LoggerConfig(BaseModel):
    """日志引擎配置。

    ``level`` / ``pretty_print`` / ``base`` 是引擎的核心配置，
    其余字段控制 sink（与 loguru 的 add() 参数一一对应）。
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    level: str = "info"
    pretty_print: bool = False
    base: dict[str, Any] = Field(default_factory=dict)

    # 文件 sink（log_dir 为空时不写文件）
    log_dir: Optional[str] = None
    file_name: str = "contextlog"
    rotation: Optional[str] = "10 MB"
    retention: Optional[str] = "14 days"
    compression: Optional[str] = "zip"

    backtrace: bool = True
    diagnose: bool = False
    enqueue: bool = False
    intercept_stdlib: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> str:
        """规范化级别名称（warning -> warn 等），未知级别报错。"""
        return require_level(v)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """递归合并两个映射：override 的值优先，嵌套映射逐键合并而不是整体替换。"""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def snake_case_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """把顶层 camelCase 键（如 prettyPrint）转为 snake_case。"""
    return {_CAMEL_BOUNDARY.sub("_", str(k)).lower(): v for k, v in data.items()}


def default_app_name(
    argv: Optional[Sequence[str]] = None, pid: Optional[int] = None
) -> Union[str, int]:
    """没有显式应用名称时的回退值：启动脚本路径，其次是进程 ID。"""
    if argv is None:
        argv = sys.argv
    if argv and argv[0]:
        return argv[0]
    return pid if pid is not None else os.getpid()


def _read_source(
    source: ConfigSource,
) -> tuple[Optional[Mapping[str, Any]], Optional[Any]]:
    # 配置源可能是任意用户实现，读取失败不能影响日志初始化
    section: Optional[Mapping[str, Any]] = None
    app_name: Optional[Any] = None
    try:
        if source.has("logger"):
            value = source.get("logger")
            if isinstance(value, Mapping):
                section = value
        if source.has("appName"):
            app_name = source.get("appName")
    except Exception:
        return None, None
    return section, app_name


def resolve_logger_config(
    source: Optional[ConfigSource] = None,
    settings: Optional[Settings] = None,
    *,
    argv: Optional[Sequence[str]] = None,
    pid: Optional[int] = None,
    **overrides: Any,
) -> LoggerConfig:
    """按优先级合并出最终的 LoggerConfig。

    ``overrides`` 直接作用于最终配置（例如测试中传入 enqueue=False），
    不参与应用名称解析。
    """
    defaults = LoggerConfig().model_dump(exclude={"base"})
    values: dict[str, Any] = dict(defaults)
    app_name: Optional[Any] = None

    if source is not None:
        section, app_name = _read_source(source)
        if section:
            candidate = deep_merge(defaults, snake_case_keys(section))
            candidate.pop("base", None)
            try:
                values = LoggerConfig.model_validate(candidate).model_dump(
                    exclude={"base"}
                )
            except ValidationError:
                # 外部配置无效：保持默认值
                values = dict(defaults)

    if settings is not None:
        if settings.log_level is not None:
            level = normalize_level(settings.log_level)
            if level is not None:
                values["level"] = level
        if settings.log_pretty is not None:
            values["pretty_print"] = settings.log_pretty
        if settings.appname:
            app_name = settings.appname

    if app_name is None or app_name == "":
        app_name = default_app_name(argv, pid)

    values.update(overrides)
    values["base"] = {APP_KEY: app_name}
    return LoggerConfig.model_validate(values)


__all__ = [
    "LoggerConfig",
    "deep_merge",
    "snake_case_keys",
    "default_app_name",
    "resolve_logger_config",
]
