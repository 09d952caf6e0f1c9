"""上下文 logger：对引擎句柄的薄封装。

在引擎之上增加绑定字段约定（模块 ``_mod``、类/文件 ``_cls``、函数 ``_fun``、
事件 ``_event``），并提供函数作用域、事件、断言与子 logger 等便捷调用。

所有级别方法接受与引擎相同的参数形态：

- ``(message, *args)``
- ``(payload, message?, *args)``
- ``(error, message?, *args)``

Examples:
    >>> log = get_context_logger("billing", "InvoiceService")
    >>> log.info("invoice %s created", invoice_id)
    >>> log.info_f("create", {"amount": 10}, "created")
    >>> log.event("INVOICE_PAID", "paid by %s", user)
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from contextlog.accessor import get_engine
from contextlog.keys import CLASS_KEY, EVENT_KEY, FUNCTION_KEY, MODULE_KEY
from contextlog.utils.log.engine import EngineHandle

ASSERTION_FAILED = "Assertion failed!"


class ContextLogger:
    """包装一个引擎句柄的上下文 logger。

    不要直接构造，使用 `get_context_logger()` 或 `get_child_logger()`。
    实例不可变：函数作用域、事件与子 logger 都基于派生出的新句柄。
    """

    def __init__(self, core_logger: EngineHandle) -> None:
        self._core = core_logger

    @classmethod
    def get_context_logger(
        cls,
        module_name: Optional[str] = None,
        class_or_file_name: Optional[str] = None,
        *,
        engine: Optional[EngineHandle] = None,
    ) -> "ContextLogger":
        """获取绑定了模块与类/文件名的上下文 logger。

        值为 None 的绑定会被省略；未传入 engine 时使用进程共享的引擎。
        """
        bindings: dict[str, Any] = {}
        if module_name is not None:
            bindings[MODULE_KEY] = module_name
        if class_or_file_name is not None:
            bindings[CLASS_KEY] = class_or_file_name

        base = engine if engine is not None else get_engine()
        return cls(base.child(bindings))

    # fatal

    def fatal(self, *args: Any) -> Any:
        return self._core.fatal(*args)

    def fatal_f(self, function_name: str, *args: Any) -> Any:
        return self._core.child({FUNCTION_KEY: function_name}).fatal(*args)

    # error

    def error(self, *args: Any) -> Any:
        return self._core.error(*args)

    def error_f(self, function_name: str, *args: Any) -> Any:
        return self._core.child({FUNCTION_KEY: function_name}).error(*args)

    # warn

    def warn(self, *args: Any) -> Any:
        return self._core.warn(*args)

    def warn_f(self, function_name: str, *args: Any) -> Any:
        return self._core.child({FUNCTION_KEY: function_name}).warn(*args)

    # info

    def info(self, *args: Any) -> Any:
        return self._core.info(*args)

    def info_f(self, function_name: str, *args: Any) -> Any:
        return self._core.child({FUNCTION_KEY: function_name}).info(*args)

    # debug

    def debug(self, *args: Any) -> Any:
        return self._core.debug(*args)

    def debug_f(self, function_name: str, *args: Any) -> Any:
        return self._core.child({FUNCTION_KEY: function_name}).debug(*args)

    # trace

    def trace(self, *args: Any) -> Any:
        return self._core.trace(*args)

    def trace_f(self, function_name: str, *args: Any) -> Any:
        return self._core.child({FUNCTION_KEY: function_name}).trace(*args)

    def event(self, event_name: str, *args: Any) -> Any:
        """记录一个事件（info 级别），事件名绑定在 ``_event`` 键上。"""
        return self._core.child({EVENT_KEY: event_name}).info(*args)

    def event_f(self, function_name: str, event_name: str, *args: Any) -> Any:
        """在函数上下文中记录一个事件（info 级别）。"""
        return self._core.child(
            {FUNCTION_KEY: function_name, EVENT_KEY: event_name}
        ).info(*args)

    def assert_(self, check: Any, message: Optional[str] = None, *args: Any) -> Any:
        """check 为假值时记录一条 error 级别日志。

        注意返回值：断言成立时返回 False（不记录日志）；断言失败时返回
        error 调用的返回值（None）。调用方依赖这一行为，不要“修正”。
        """
        if check:
            return False

        if message is None:
            return self.error(AssertionError(ASSERTION_FAILED))
        return self.error(AssertionError(ASSERTION_FAILED), message, *args)

    def get_core_logger(self) -> EngineHandle:
        """返回底层的引擎句柄（直接使用时需自行遵守绑定约定）。"""
        return self._core

    def get_child_logger(self, child_context: Mapping[str, Any]) -> "ContextLogger":
        """派生子 logger：继承当前绑定并叠加 child_context（``level`` 键覆盖级别）。"""
        return ContextLogger(self._core.child(child_context))

    def __repr__(self) -> str:
        return f"ContextLogger({self._core!r})"


def get_context_logger(
    module_name: Optional[str] = None,
    class_or_file_name: Optional[str] = None,
    *,
    engine: Optional[EngineHandle] = None,
) -> ContextLogger:
    """便捷封装：等同于 `ContextLogger.get_context_logger`。"""
    return ContextLogger.get_context_logger(
        module_name, class_or_file_name, engine=engine
    )


__all__ = ["ASSERTION_FAILED", "ContextLogger", "get_context_logger"]
