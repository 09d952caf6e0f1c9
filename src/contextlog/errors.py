from __future__ import annotations


class ContextLogError(Exception):
    """contextlog 通用错误类型。"""


class ConfigSourceError(ContextLogError):
    """外部配置源缺失、不可读或格式错误。

    由 `FileConfigSource` 抛出，引擎访问器总是会捕获它并回退到默认配置。
    """


class InvalidLevelError(ContextLogError, ValueError):
    """未知的日志级别名称。"""

    def __init__(self, level: object) -> None:
        super().__init__(f"unknown log level: {level!r}")
        self.level = level


__all__ = ["ContextLogError", "ConfigSourceError", "InvalidLevelError"]
