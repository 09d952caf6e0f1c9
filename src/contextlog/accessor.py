"""引擎访问器：延迟、一次性地构造进程共享的日志引擎。

`EngineProvider` 可以显式创建并注入（测试、嵌入式使用场景），
模块级默认 provider 则支撑 `get_engine()`。
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Sequence

from pydantic import ValidationError

from contextlog.config.log import LoggerConfig, resolve_logger_config
from contextlog.config.settings import Settings, get_settings
from contextlog.config.source import ConfigSource, load_config_source
from contextlog.errors import ConfigSourceError
from contextlog.keys import MODULE_KEY
from contextlog.utils.log.engine import EngineHandle, LogEngine


def _load_settings() -> Settings:
    # 首次构造引擎时重新读取环境，并刷新共享的 Settings 缓存
    try:
        return get_settings(force_reload=True)
    except ValidationError:
        # 环境变量无效（例如 CONTEXTLOG_LOG_PRETTY=maybe）时视为没有覆盖
        return Settings.model_construct()


class EngineProvider:
    """带锁保护的一次性引擎工厂。

    第一次调用 `get()` 时解析配置并构造引擎，之后始终返回同一个根句柄。
    构造过程不会抛出配置相关的异常。

    Args:
        settings: 环境变量覆盖；默认在首次访问时从环境读取。
        config_source: 外部配置源；为 None 时按 settings.config_file 或
            ./config/default.{toml,json} 尽力加载。
        sink: 传给 loguru 的控制台 sink，默认 sys.stdout。
        argv / pid: 应用名称回退值的来源，默认取当前进程。
        engine_factory: 用配置构造引擎的工厂，便于注入替身实现。
        overrides: 直接作用于最终 LoggerConfig 的字段。
    """

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        config_source: Optional[ConfigSource] = None,
        sink: Any = None,
        argv: Optional[Sequence[str]] = None,
        pid: Optional[int] = None,
        engine_factory: Optional[Callable[..., LogEngine]] = None,
        **overrides: Any,
    ) -> None:
        self._settings = settings
        self._config_source = config_source
        self._sink = sink
        self._argv = argv
        self._pid = pid
        self._engine_factory = engine_factory or LogEngine
        self._overrides = overrides
        self._lock = threading.Lock()
        self._handle: Optional[EngineHandle] = None
        self._config: Optional[LoggerConfig] = None

    @property
    def initialized(self) -> bool:
        return self._handle is not None

    @property
    def config(self) -> Optional[LoggerConfig]:
        """已解析的配置；首次访问前为 None。"""
        return self._config

    def get(self) -> EngineHandle:
        handle = self._handle
        if handle is not None:
            return handle
        with self._lock:
            if self._handle is None:
                self._handle = self._build()
            return self._handle

    def _build(self) -> EngineHandle:
        settings = self._settings if self._settings is not None else _load_settings()

        source = self._config_source
        load_error: Optional[ConfigSourceError] = None
        if source is None:
            source, load_error = load_config_source(settings.config_file)

        config = resolve_logger_config(
            source, settings, argv=self._argv, pid=self._pid, **self._overrides
        )
        self._config = config

        engine = self._engine_factory(config, sink=self._sink)
        handle = engine.root
        if load_error is not None:
            handle.child({MODULE_KEY: "contextlog"}).debug(
                "config source unavailable, using defaults: %s", str(load_error)
            )
        return handle


_DEFAULT_PROVIDER = EngineProvider()


def get_default_provider() -> EngineProvider:
    return _DEFAULT_PROVIDER


def get_engine() -> EngineHandle:
    """返回进程共享的引擎根句柄（首次访问时构造）。"""
    return _DEFAULT_PROVIDER.get()


__all__ = ["EngineProvider", "get_default_provider", "get_engine"]
