"""外部配置源。

配置源是任意提供 ``has(key)`` / ``get(key)`` 的对象，键支持点号路径
（例如 ``logger.level``）。这里给出两种实现：

- `MappingConfigSource`：包装一个内存中的字典
- `FileConfigSource`：从 TOML 或 JSON 文件加载

`load_config_source` 在文件缺失或不可读时返回 None 与对应错误，从不抛出。
"""

from __future__ import annotations

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from contextlog.errors import ConfigSourceError

_MISSING = object()

# 未指定路径时按顺序查找的默认配置文件
DEFAULT_CONFIG_FILES: tuple[str, ...] = (
    os.path.join("config", "default.toml"),
    os.path.join("config", "default.json"),
)


@runtime_checkable
class ConfigSource(Protocol):
    def has(self, key: str) -> bool: ...

    def get(self, key: str) -> Any: ...


class MappingConfigSource:
    """基于字典的配置源。"""

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Mapping[str, Any] = dict(data or {})

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def get(self, key: str) -> Any:
        value = self._lookup(key)
        if value is _MISSING:
            raise KeyError(f"configuration property not defined: {key}")
        return value

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)


class FileConfigSource(MappingConfigSource):
    """从 TOML（.toml）或 JSON（其余扩展名）文件加载的配置源。"""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        super().__init__(self._read(self.path))

    @staticmethod
    def _read(path: Path) -> Mapping[str, Any]:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ConfigSourceError(f"cannot read config file {path}: {exc}") from exc

        try:
            if path.suffix.lower() == ".toml":
                data = tomllib.loads(raw.decode("utf-8"))
            else:
                data = json.loads(raw)
        except (UnicodeDecodeError, tomllib.TOMLDecodeError, ValueError) as exc:
            raise ConfigSourceError(f"malformed config file {path}: {exc}") from exc

        if not isinstance(data, Mapping):
            raise ConfigSourceError(f"config file {path} must contain a mapping")
        return data


def find_config_file(path: Optional[str] = None) -> Optional[Path]:
    """返回要加载的配置文件路径。

    显式给出的路径直接返回（即使不存在，以便报告读取错误）；
    否则在当前工作目录下查找默认文件，都不存在时返回 None。
    """
    if path:
        return Path(path)
    for candidate in DEFAULT_CONFIG_FILES:
        p = Path.cwd() / candidate
        if p.is_file():
            return p
    return None


def load_config_source(
    path: Optional[str] = None,
) -> tuple[Optional[ConfigSource], Optional[ConfigSourceError]]:
    """尽力加载配置源。

    Returns:
        (source, error)：成功时 error 为 None；没有配置文件时两者都是 None；
        读取失败时 source 为 None、error 为对应的 ConfigSourceError。
    """
    found = find_config_file(path)
    if found is None:
        return None, None
    try:
        return FileConfigSource(found), None
    except ConfigSourceError as exc:
        return None, exc


__all__ = [
    "ConfigSource",
    "MappingConfigSource",
    "FileConfigSource",
    "DEFAULT_CONFIG_FILES",
    "find_config_file",
    "load_config_source",
]
