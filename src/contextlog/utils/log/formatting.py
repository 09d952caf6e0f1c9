"""消息格式化与日志行渲染。

- printf 风格占位符替换（%s %d %i %f %j %o %O %%）
- 多余的参数以空格追加到消息末尾
- JSON 行渲染（一行一个对象，字段布局与常见结构化日志一致）
- 彩色控制台模式下的上下文字段渲染
"""

from __future__ import annotations

import json
import math
import re
from typing import Any, Mapping, Optional, Sequence

from .levels import LEVEL_VALUES

_PLACEHOLDER = re.compile(r"%[sdifjoO%]")


def to_json(value: Any) -> str:
    """紧凑 JSON 序列化；无法序列化的对象退化为 str()。"""
    try:
        return json.dumps(
            value, separators=(",", ":"), ensure_ascii=False, default=str
        )
    except ValueError:
        # 循环引用
        return json.dumps("[Circular]")


def _number(value: Any, integer: bool) -> str:
    if isinstance(value, bool):
        value = int(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "NaN"
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if integer:
        return str(math.floor(number))
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _convert(kind: str, value: Any) -> str:
    if kind == "s":
        if isinstance(value, str):
            return value
        if isinstance(value, (Mapping, list, tuple)):
            return to_json(value)
        return str(value)
    if kind in ("d", "i"):
        return _number(value, integer=True)
    if kind == "f":
        return _number(value, integer=False)
    # j / o / O
    return to_json(value)


def format_message(template: str, args: Sequence[Any] = ()) -> str:
    """按 printf 风格替换占位符，并把剩余参数追加到末尾。

    没有参数时模板原样返回（包括其中的 ``%%``）。
    缺少对应参数的占位符保持原样。
    """
    if not args:
        return template

    values = list(args)
    consumed = 0

    def _replace(match: re.Match[str]) -> str:
        nonlocal consumed
        token = match.group()
        if token == "%%":
            return "%"
        if consumed >= len(values):
            return token
        value = values[consumed]
        consumed += 1
        return _convert(token[1], value)

    text = _PLACEHOLDER.sub(_replace, template)

    rest = values[consumed:]
    if rest:
        parts = [v if isinstance(v, str) else to_json(v) for v in rest]
        text = " ".join([text, *parts])
    return text


def render_json(
    level: str,
    time_ms: int,
    fields: Mapping[str, Any],
    message: Optional[str],
) -> str:
    """渲染一行 JSON：level、time、绑定与载荷字段、msg。"""
    entry: dict[str, Any] = {"level": int(LEVEL_VALUES[level]), "time": time_ms}
    entry.update(fields)
    if message is not None:
        entry["msg"] = message
    return json.dumps(entry, ensure_ascii=False, default=str)


def render_fields(fields: Mapping[str, Any]) -> str:
    """把字段渲染为 ``key=value`` 形式，供彩色控制台输出使用。"""
    parts = []
    for key, value in fields.items():
        if key == "stack":
            # 堆栈由 {exception} 或单独的行输出
            continue
        text = value if isinstance(value, str) else to_json(value)
        parts.append(f"{key}={text}")
    return " ".join(parts)


__all__ = ["to_json", "format_message", "render_json", "render_fields"]
