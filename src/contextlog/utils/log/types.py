"""日志调用形态（tagged union）。

引擎的每个级别方法接受多种参数形态，这里把它们显式建模为三种调用：

- `MessageCall`：``(message, *args)``，消息模板加占位符参数
- `PayloadCall`：``(fields, message?, *args)``，对象载荷，可选消息
- `FailureCall`：``(error, message?, *args)``，异常对象，可选覆盖消息

`parse_log_args` 负责把位置参数分派为其中一种，`render()` 则产出最终的
`LogEntry`（字段、消息与可选异常）。
"""

from __future__ import annotations

import traceback
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .formatting import format_message, to_json


class LogEntry(BaseModel):
    """渲染完成、即将交给 sink 的一条日志。"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    payload: dict[str, Any] = Field(default_factory=dict)
    message: Optional[str] = None
    error: Optional[BaseException] = None


def serialize_error(error: BaseException) -> dict[str, Any]:
    """把异常序列化为 ``type`` / ``message`` / ``stack`` 字段。"""
    return {
        "type": type(error).__name__,
        "message": str(error),
        "stack": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }


def _template(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return to_json(value)


class MessageCall(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["message"] = "message"
    template: Optional[str] = None
    args: tuple[Any, ...] = ()

    def render(self) -> LogEntry:
        if self.template is None:
            return LogEntry()
        return LogEntry(message=format_message(self.template, self.args))


class PayloadCall(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["payload"] = "payload"
    payload: dict[str, Any] = Field(default_factory=dict)
    template: Optional[str] = None
    args: tuple[Any, ...] = ()

    def render(self) -> LogEntry:
        fields: dict[str, Any] = {}
        for key, value in self.payload.items():
            # 载荷里嵌套的异常同样做序列化
            if isinstance(value, BaseException):
                value = serialize_error(value)
            fields[str(key)] = value

        if self.template is not None:
            message: Optional[str] = format_message(self.template, self.args)
        elif isinstance(self.payload.get("msg"), str):
            message = self.payload["msg"]
        else:
            message = None
        return LogEntry(payload=fields, message=message)


class FailureCall(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["failure"] = "failure"
    error: BaseException
    template: Optional[str] = None
    args: tuple[Any, ...] = ()

    def render(self) -> LogEntry:
        serialized = serialize_error(self.error)
        fields = {
            "type": serialized["type"],
            "message": serialized["message"],
            "stack": serialized["stack"],
        }
        if self.template is not None:
            message = format_message(self.template, self.args)
        else:
            message = serialized["message"]
        return LogEntry(payload=fields, message=message, error=self.error)


LogCall = Union[MessageCall, PayloadCall, FailureCall]


def parse_log_args(args: tuple[Any, ...]) -> LogCall:
    """把级别方法收到的位置参数分派为具体的调用形态。"""
    if not args:
        return MessageCall()

    first, rest = args[0], args[1:]

    if isinstance(first, BaseException):
        if not rest:
            return FailureCall(error=first)
        return FailureCall(error=first, template=_template(rest[0]), args=rest[1:])

    if isinstance(first, (Mapping, BaseModel)):
        if isinstance(first, BaseModel):
            fields = first.model_dump(mode="json")
        else:
            # 载荷的键一律转为字符串
            fields = {str(key): value for key, value in first.items()}
        if not rest:
            return PayloadCall(payload=fields)
        return PayloadCall(payload=fields, template=_template(rest[0]), args=rest[1:])

    return MessageCall(template=_template(first), args=rest)


__all__ = [
    "LogEntry",
    "LogCall",
    "MessageCall",
    "PayloadCall",
    "FailureCall",
    "parse_log_args",
    "serialize_error",
]
