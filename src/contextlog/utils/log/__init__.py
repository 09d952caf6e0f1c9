"""contextlog 的日志引擎模块。

提供基于 loguru 的结构化日志引擎，特性包括：
- 多种调用形态（消息模板、对象载荷、异常对象）
- 可派生的子句柄（绑定字段叠加、级别覆盖）
- JSON 行或彩色控制台输出
- 可选的日志文件轮转与标准库 logging 拦截
"""

from .engine import EngineHandle, LogEngine
from .levels import LEVEL_VALUES, normalize_level
from .types import FailureCall, MessageCall, PayloadCall, parse_log_args

__all__ = [
    "EngineHandle",
    "LogEngine",
    "LEVEL_VALUES",
    "normalize_level",
    "MessageCall",
    "PayloadCall",
    "FailureCall",
    "parse_log_args",
]
