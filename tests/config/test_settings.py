"""测试 contextlog.config.settings 模块。"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from contextlog.config.settings import Settings, get_settings


class TestSettings:
    """测试 Settings 配置类。"""

    def test_default_values(self):
        """测试没有环境变量时所有覆盖都为空。"""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()

        assert settings.log_level is None
        assert settings.log_pretty is None
        assert settings.appname is None
        assert settings.config_file is None

    def test_env_prefix(self):
        """测试环境变量前缀 CONTEXTLOG_ 是否正确工作。"""
        with patch.dict(
            os.environ,
            {
                "CONTEXTLOG_LOG_LEVEL": "debug",
                "CONTEXTLOG_LOG_PRETTY": "true",
                "CONTEXTLOG_APPNAME": "billing",
                "CONTEXTLOG_CONFIG_FILE": "/etc/app/logging.toml",
            },
        ):
            settings = Settings()

        assert settings.log_level == "debug"
        assert settings.log_pretty is True
        assert settings.appname == "billing"
        assert settings.config_file == "/etc/app/logging.toml"

    @pytest.mark.parametrize("raw,expected", [("0", False), ("false", False), ("1", True)])
    def test_pretty_flag_parsing(self, raw, expected):
        """测试布尔环境变量的解析。"""
        with patch.dict(os.environ, {"CONTEXTLOG_LOG_PRETTY": raw}):
            assert Settings().log_pretty is expected

    def test_invalid_pretty_flag(self):
        with patch.dict(os.environ, {"CONTEXTLOG_LOG_PRETTY": "maybe"}):
            with pytest.raises(ValidationError):
                Settings()

    def test_explicit_values(self):
        settings = Settings(log_level="warn", appname="explicit")
        assert settings.log_level == "warn"
        assert settings.appname == "explicit"


class TestGetSettings:
    """测试 get_settings 单例函数。"""

    def test_returns_cached_instance(self):
        first = get_settings(force_reload=True)
        second = get_settings()
        assert first is second

    def test_force_reload(self):
        first = get_settings(force_reload=True)
        with patch.dict(os.environ, {"CONTEXTLOG_APPNAME": "reloaded"}):
            second = get_settings(force_reload=True)
        assert first is not second
        assert second.appname == "reloaded"
