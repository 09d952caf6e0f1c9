"""contextlog：基于 loguru 的上下文日志门面。

    from contextlog import get_context_logger

    log = get_context_logger("billing", "InvoiceService")
    log.info("invoice %s created", "INV-1")
"""

from .accessor import EngineProvider, get_engine
from .context import ContextLogger, get_context_logger
from .errors import ConfigSourceError, ContextLogError, InvalidLevelError
from .utils.log import EngineHandle, LogEngine

__all__ = [
    "ContextLogger",
    "get_context_logger",
    "EngineProvider",
    "get_engine",
    "EngineHandle",
    "LogEngine",
    "ContextLogError",
    "ConfigSourceError",
    "InvalidLevelError",
]
