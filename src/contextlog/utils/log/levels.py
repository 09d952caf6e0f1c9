"""日志级别表。

级别名称沿用结构化日志的惯例（trace < debug < info < warn < error < fatal），
数值与 JSON 输出中的 ``level`` 字段一致；同时给出与 loguru 内置级别的对应关系。
"""

from __future__ import annotations

import math
from typing import Optional

from contextlog.errors import InvalidLevelError

# 级别名称 -> JSON 输出中的数值
LEVEL_VALUES: dict[str, float] = {
    "trace": 10,
    "debug": 20,
    "info": 30,
    "warn": 40,
    "error": 50,
    "fatal": 60,
    "silent": math.inf,
}

# 级别名称 -> loguru 级别名称
LOGURU_LEVELS: dict[str, str] = {
    "trace": "TRACE",
    "debug": "DEBUG",
    "info": "INFO",
    "warn": "WARNING",
    "error": "ERROR",
    "fatal": "CRITICAL",
}

# 常见别名（stdlib logging / loguru 写法）
_ALIASES: dict[str, str] = {
    "warning": "warn",
    "critical": "fatal",
    "success": "info",
    "notset": "trace",
}


def normalize_level(name: object) -> Optional[str]:
    """把级别名称规范化为小写的标准名称，无法识别时返回 None。"""
    if not isinstance(name, str):
        return None
    key = name.strip().lower()
    key = _ALIASES.get(key, key)
    if key in LEVEL_VALUES:
        return key
    return None


def require_level(name: object) -> str:
    """与 `normalize_level` 相同，但无法识别时抛出 InvalidLevelError。"""
    level = normalize_level(name)
    if level is None:
        raise InvalidLevelError(name)
    return level


def from_loguru(name: str) -> str:
    """把 loguru 的级别名称映射回标准名称（用于 stdlib 拦截等场景）。"""
    for level, loguru_name in LOGURU_LEVELS.items():
        if loguru_name == name:
            return level
    return normalize_level(name) or "info"


__all__ = [
    "LEVEL_VALUES",
    "LOGURU_LEVELS",
    "normalize_level",
    "require_level",
    "from_loguru",
]
