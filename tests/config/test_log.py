"""测试 contextlog.config.log 模块（配置合并与优先级）。"""

import os
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from contextlog.config.log import (
    LoggerConfig,
    deep_merge,
    default_app_name,
    resolve_logger_config,
    snake_case_keys,
)
from contextlog.config.settings import Settings
from contextlog.config.source import MappingConfigSource


class TestLoggerConfig:
    """测试 LoggerConfig 模型。"""

    def test_defaults(self):
        config = LoggerConfig()
        assert config.level == "info"
        assert config.pretty_print is False
        assert config.base == {}
        assert config.log_dir is None
        assert config.enqueue is False
        assert config.intercept_stdlib is False

    def test_level_is_normalized(self):
        assert LoggerConfig(level="WARNING").level == "warn"

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggerConfig(level="loud")

    def test_frozen(self):
        config = LoggerConfig()
        with pytest.raises(ValidationError):
            config.level = "debug"


class TestDeepMerge:
    """测试递归合并。"""

    def test_override_wins(self):
        assert deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_mappings_merge(self):
        merged = deep_merge({"n": {"x": 1, "y": 2}}, {"n": {"y": 3, "z": 4}})
        assert merged == {"n": {"x": 1, "y": 3, "z": 4}}

    def test_inputs_unchanged(self):
        base = {"n": {"x": 1}}
        deep_merge(base, {"n": {"x": 2}})
        assert base == {"n": {"x": 1}}

    def test_scalar_replaces_mapping(self):
        assert deep_merge({"n": {"x": 1}}, {"n": 5}) == {"n": 5}


def test_snake_case_keys():
    assert snake_case_keys({"prettyPrint": True, "level": "x", "logDir": "/l"}) == {
        "pretty_print": True,
        "level": "x",
        "log_dir": "/l",
    }


class TestDefaultAppName:
    """测试应用名称回退。"""

    def test_argv(self):
        assert default_app_name(["/srv/app/main.py"], 42) == "/srv/app/main.py"

    def test_empty_argv_falls_back_to_pid(self):
        assert default_app_name([""], 42) == 42
        assert default_app_name([], 42) == 42

    def test_current_process_pid(self):
        assert default_app_name([]) == os.getpid()


class TestResolveLoggerConfig:
    """测试 默认值 < 外部配置 < 环境变量 的优先级。"""

    def test_defaults_only(self):
        config = resolve_logger_config(None, Settings(), argv=["main.py"])
        assert config.level == "info"
        assert config.pretty_print is False
        assert config.base == {"_app": "main.py"}

    def test_pid_fallback(self):
        config = resolve_logger_config(argv=[], pid=4242)
        assert config.base == {"_app": 4242}

    def test_external_section(self):
        source = MappingConfigSource(
            {"logger": {"level": "debug", "prettyPrint": True}, "appName": "svc"}
        )
        config = resolve_logger_config(source, Settings(), argv=["main.py"])
        assert config.level == "debug"
        assert config.pretty_print is True
        assert config.base == {"_app": "svc"}

    def test_external_section_sink_options(self, tmp_path):
        source = MappingConfigSource(
            {"logger": {"logDir": str(tmp_path), "rotation": "1 MB"}}
        )
        config = resolve_logger_config(source, argv=["main.py"])
        assert config.log_dir == str(tmp_path)
        assert config.rotation == "1 MB"
        assert config.retention == "14 days"

    def test_external_base_is_replaced(self):
        """测试外部配置中的 base 不会进入基础绑定。"""
        source = MappingConfigSource({"logger": {"base": {"x": 1}}})
        config = resolve_logger_config(source, argv=["main.py"])
        assert config.base == {"_app": "main.py"}

    def test_environment_overrides_external(self):
        source = MappingConfigSource(
            {"logger": {"level": "debug", "prettyPrint": True}, "appName": "svc"}
        )
        settings = Settings(log_level="error", log_pretty=False, appname="env-app")
        config = resolve_logger_config(source, settings, argv=["main.py"])
        assert config.level == "error"
        assert config.pretty_print is False
        assert config.base == {"_app": "env-app"}

    @pytest.mark.parametrize(
        "overrides,expected",
        [
            ({"log_level": "trace"}, ("trace", True, "svc")),
            ({"log_pretty": False}, ("debug", False, "svc")),
            ({"appname": "only-name"}, ("debug", True, "only-name")),
        ],
    )
    def test_overrides_are_independent(self, overrides, expected):
        """测试三个环境变量覆盖互不影响。"""
        source = MappingConfigSource(
            {"logger": {"level": "debug", "prettyPrint": True}, "appName": "svc"}
        )
        config = resolve_logger_config(source, Settings(**overrides), argv=["m"])
        assert (config.level, config.pretty_print, config.base["_app"]) == expected

    def test_unknown_env_level_ignored(self):
        source = MappingConfigSource({"logger": {"level": "warn"}})
        config = resolve_logger_config(source, Settings(log_level="loud"), argv=["m"])
        assert config.level == "warn"

    def test_invalid_external_section_ignored(self):
        source = MappingConfigSource({"logger": {"level": "loud", "prettyPrint": True}})
        config = resolve_logger_config(source, argv=["m"])
        assert config.level == "info"
        assert config.pretty_print is False

    def test_non_mapping_section_ignored(self):
        source = MappingConfigSource({"logger": "debug", "appName": "svc"})
        config = resolve_logger_config(source, argv=["m"])
        assert config.level == "info"
        assert config.base == {"_app": "svc"}

    def test_failing_source_degrades_to_defaults(self):
        """测试配置源读取异常时静默使用默认值。"""
        source = MagicMock()
        source.has.side_effect = RuntimeError("backend down")
        config = resolve_logger_config(source, argv=["main.py"])
        assert config.level == "info"
        assert config.base == {"_app": "main.py"}

    def test_keyword_overrides(self):
        config = resolve_logger_config(argv=["m"], enqueue=True, file_name="svc")
        assert config.enqueue is True
        assert config.file_name == "svc"
