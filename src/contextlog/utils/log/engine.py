"""基于 loguru 的结构化日志引擎。

`LogEngine` 负责在全局 loguru logger 上注册 sink（控制台、可选的轮转文件），
`EngineHandle` 是带有绑定字段与最低级别的日志句柄：

- 每个级别一个方法（fatal/error/warn/info/debug/trace），接受多种参数形态
- ``child(bindings)`` 派生子句柄，绑定字段叠加，``level`` 键覆盖级别
- 级别过滤在句柄上完成，sink 接收本引擎的全部记录

多个引擎可以同时存在：每条记录都带有引擎标识，sink 只接收自己引擎的记录。
"""

from __future__ import annotations

import logging
import os
import sys
import threading
import uuid
from typing import TYPE_CHECKING, Any, Mapping, Optional

from loguru import logger as _logger

from contextlog.keys import LEVEL_KEY, MODULE_KEY

from .formatting import render_fields, render_json
from .levels import LEVEL_VALUES, LOGURU_LEVELS, from_loguru, require_level
from .types import LogEntry, parse_log_args

if TYPE_CHECKING:
    from contextlog.config.log import LoggerConfig

# extra 中以此前缀开头的键属于引擎内部，不会输出
_INTERNAL_PREFIX = "__contextlog_"
_ENGINE_KEY = "__contextlog_engine__"
_MSG_KEY = "__contextlog_msg__"
_LINE_KEY = "__contextlog_line__"
_CTX_KEY = "__contextlog_ctx__"

_PRETTY_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[" + _CTX_KEY + "]}</cyan> - "
    "<level>{message}</level>\n{exception}"
)
_JSON_FORMAT = "{extra[" + _LINE_KEY + "]}\n"

_default_handler_lock = threading.Lock()
_default_handler_removed = False


def _remove_default_handler() -> None:
    # loguru 默认的 stderr 处理器（id 0）会重复输出所有记录，只移除一次
    global _default_handler_removed
    with _default_handler_lock:
        if _default_handler_removed:
            return
        try:
            _logger.remove(0)
        except ValueError:
            # 应用程序已自行移除
            pass
        _default_handler_removed = True


def _ensure_log_dir(path: str) -> None:
    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        # 尽力创建日志目录，失败时由 loguru 在写入时报告
        pass


def _visible_fields(extra: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in extra.items() if not k.startswith(_INTERNAL_PREFIX)}


def _message_of(record: Mapping[str, Any]) -> Optional[str]:
    extra = record["extra"]
    if _MSG_KEY in extra:
        return extra[_MSG_KEY]
    return record["message"]


def _json_formatter(record: dict[str, Any]) -> str:
    level = from_loguru(record["level"].name)
    time_ms = int(record["time"].timestamp() * 1000)
    record["extra"][_LINE_KEY] = render_json(
        level, time_ms, _visible_fields(record["extra"]), _message_of(record)
    )
    return _JSON_FORMAT


def _pretty_formatter(record: dict[str, Any]) -> str:
    record["extra"][_CTX_KEY] = render_fields(_visible_fields(record["extra"]))
    return _PRETTY_FORMAT


def _stdlib_level(levelno: int) -> str:
    if levelno >= logging.CRITICAL:
        return "fatal"
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warn"
    if levelno >= logging.INFO:
        return "info"
    if levelno >= logging.DEBUG:
        return "debug"
    return "trace"


class InterceptHandler(logging.Handler):
    """把标准库 logging 的记录转发到引擎句柄。

    stdlib logger 名称绑定为 ``_mod``，级别按 levelno 映射。
    """

    def __init__(self, handle: "EngineHandle") -> None:
        super().__init__(level=logging.NOTSET)
        self._handle = handle

    def emit(self, record: logging.LogRecord) -> None:
        level = _stdlib_level(record.levelno)
        handle = self._handle.child({MODULE_KEY: record.name})
        if not handle.is_level_enabled(level):
            return
        error = record.exc_info[1] if record.exc_info else None
        handle._emit(level, LogEntry(message=record.getMessage(), error=error))


class EngineHandle:
    """带绑定字段与最低级别的日志句柄。

    句柄不可变：``child()`` 总是返回新句柄，接收者的绑定与级别保持不变。
    """

    def __init__(
        self,
        engine: "LogEngine",
        bound_logger: Any,
        bindings: Mapping[str, Any],
        level: str,
    ) -> None:
        self._engine = engine
        self._logger = bound_logger
        self._bindings = dict(bindings)
        self._level = level

    @property
    def engine(self) -> "LogEngine":
        return self._engine

    @property
    def bindings(self) -> dict[str, Any]:
        """当前句柄的有效绑定字段（副本）。"""
        return dict(self._bindings)

    @property
    def level(self) -> str:
        return self._level

    def is_level_enabled(self, level: str) -> bool:
        return LEVEL_VALUES[require_level(level)] >= LEVEL_VALUES[self._level]

    def child(self, bindings: Mapping[str, Any]) -> "EngineHandle":
        """派生子句柄：绑定字段叠加在当前绑定之上，``level`` 键覆盖级别。"""
        own = dict(bindings)
        level = self._level
        if LEVEL_KEY in own:
            level = require_level(own.pop(LEVEL_KEY))
        return EngineHandle(
            self._engine,
            self._logger.bind(**own),
            {**self._bindings, **own},
            level,
        )

    def fatal(self, *args: Any) -> None:
        return self._log("fatal", args)

    def error(self, *args: Any) -> None:
        return self._log("error", args)

    def warn(self, *args: Any) -> None:
        return self._log("warn", args)

    def info(self, *args: Any) -> None:
        return self._log("info", args)

    def debug(self, *args: Any) -> None:
        return self._log("debug", args)

    def trace(self, *args: Any) -> None:
        return self._log("trace", args)

    def _log(self, level: str, args: tuple[Any, ...]) -> None:
        if not self.is_level_enabled(level):
            return None
        self._emit(level, parse_log_args(args).render())
        return None

    def _emit(self, level: str, entry: LogEntry) -> None:
        bound = self._logger.bind(**{**entry.payload, _MSG_KEY: entry.message})
        error = entry.error
        if error is not None and error.__traceback__ is None:
            # 未抛出过的异常没有 traceback，堆栈已在 stack 字段中
            error = None
        bound.opt(exception=error).log(LOGURU_LEVELS[level], entry.message or "")

    def __repr__(self) -> str:
        return f"EngineHandle(level={self._level!r}, bindings={self._bindings!r})"


class LogEngine:
    """在全局 loguru logger 上注册 sink 并持有根句柄。

    ``sink`` 可以是任意 loguru 支持的 sink（流、可调用对象、路径），
    默认写到 sys.stdout。
    """

    def __init__(self, config: "LoggerConfig", *, sink: Any = None) -> None:
        self.config = config
        self.id = uuid.uuid4().hex
        self._handler_ids: list[int] = []
        self._previous_root_handlers: Optional[list[logging.Handler]] = None
        self._previous_root_level = logging.NOTSET

        _remove_default_handler()

        engine_id = self.id

        def _only_this_engine(record: dict[str, Any]) -> bool:
            return record["extra"].get(_ENGINE_KEY) == engine_id

        self._filter = _only_this_engine

        # 控制台 sink：pretty_print 时彩色易读，否则一行一个 JSON 对象
        if config.pretty_print:
            console_kwargs: dict[str, Any] = {
                "format": _pretty_formatter,
                "colorize": None if sink is None else False,
            }
        else:
            console_kwargs = {"format": _json_formatter, "colorize": False}
        self._handler_ids.append(
            _logger.add(
                sys.stdout if sink is None else sink,
                level="TRACE",
                filter=self._filter,
                enqueue=config.enqueue,
                backtrace=config.backtrace,
                diagnose=config.diagnose,
                **console_kwargs,
            )
        )

        # 如果指定了日志目录，则添加 JSON 文件 sink
        if config.log_dir:
            _ensure_log_dir(config.log_dir)
            file_path = os.path.join(config.log_dir, f"{config.file_name}.log")
            self._handler_ids.append(
                _logger.add(
                    file_path,
                    format=_json_formatter,
                    level="TRACE",
                    filter=self._filter,
                    rotation=config.rotation,
                    retention=config.retention,
                    compression=config.compression,
                    enqueue=config.enqueue,
                    backtrace=config.backtrace,
                    diagnose=config.diagnose,
                )
            )

        base = dict(config.base)
        self.root = EngineHandle(
            self,
            _logger.bind(**{_ENGINE_KEY: engine_id}).bind(**base),
            base,
            require_level(config.level),
        )

        if config.intercept_stdlib:
            self.intercept_stdlib()

    def intercept_stdlib(self) -> None:
        """把标准库 logging 的根 logger 重定向到本引擎。"""
        if self._previous_root_handlers is None:
            self._previous_root_handlers = list(logging.root.handlers)
            self._previous_root_level = logging.root.level
        logging.root.handlers = [InterceptHandler(self.root)]
        logging.root.setLevel(logging.NOTSET)

    def flush(self) -> None:
        """等待 enqueue 模式下排队的记录写完。"""
        _logger.complete()

    def close(self) -> None:
        """移除本引擎注册的 sink，并恢复 stdlib logging 的处理器。"""
        for handler_id in self._handler_ids:
            _logger.remove(handler_id)
        self._handler_ids.clear()
        if self._previous_root_handlers is not None:
            logging.root.handlers = self._previous_root_handlers
            logging.root.setLevel(self._previous_root_level)
            self._previous_root_handlers = None


__all__ = ["LogEngine", "EngineHandle", "InterceptHandler"]
