"""环境变量覆盖（基于 pydantic-settings）。

这些字段全部可选：未设置时不覆盖外部配置或默认值。
"""

from __future__ import annotations

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """日志相关的环境变量覆盖。

    环境变量前缀：CONTEXTLOG_
    例如 CONTEXTLOG_LOG_LEVEL=debug、CONTEXTLOG_LOG_PRETTY=true、CONTEXTLOG_APPNAME=billing
    """

    log_level: Optional[str] = None
    log_pretty: Optional[bool] = None
    appname: Optional[str] = None

    # 外部配置文件路径；留空时在 ./config 下查找 default.toml / default.json
    config_file: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="CONTEXTLOG_")


# module-level cached settings
_SETTINGS: Optional[Settings] = None


def get_settings(force_reload: bool = False) -> Settings:
    """返回全局 Settings 单例（按需从环境加载）。

    如果 force_reload=True，会从环境重新创建实例。
    """

    global _SETTINGS
    if _SETTINGS is None or force_reload:
        _SETTINGS = Settings()
    return _SETTINGS


__all__ = ["Settings", "get_settings"]
