"""
contextlog.utils 包

日志引擎及其辅助工具（级别表、消息格式化、调用形态）。
"""

# 便捷导出
from .log import EngineHandle as EngineHandle, LogEngine as LogEngine

__all__ = ["EngineHandle", "LogEngine"]
