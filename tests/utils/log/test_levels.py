"""测试日志级别表。"""

import pytest

from contextlog.errors import InvalidLevelError
from contextlog.utils.log.levels import (
    LEVEL_VALUES,
    from_loguru,
    normalize_level,
    require_level,
)


class TestLevels:
    """测试级别名称规范化与映射。"""

    def test_order(self):
        """测试 trace < debug < info < warn < error < fatal。"""
        names = ["trace", "debug", "info", "warn", "error", "fatal"]
        values = [LEVEL_VALUES[n] for n in names]
        assert values == sorted(values)
        assert values == [10, 20, 30, 40, 50, 60]

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("INFO", "info"),
            (" debug ", "debug"),
            ("warning", "warn"),
            ("CRITICAL", "fatal"),
            ("silent", "silent"),
            ("verbose", None),
            (None, None),
            (30, None),
        ],
    )
    def test_normalize_level(self, name, expected):
        assert normalize_level(name) == expected

    def test_require_level_raises(self):
        """测试未知级别抛出 InvalidLevelError（同时是 ValueError）。"""
        with pytest.raises(InvalidLevelError, match="unknown log level"):
            require_level("loud")
        with pytest.raises(ValueError):
            require_level("loud")

    @pytest.mark.parametrize(
        "loguru_name,expected",
        [("WARNING", "warn"), ("CRITICAL", "fatal"), ("TRACE", "trace"), ("SUCCESS", "info")],
    )
    def test_from_loguru(self, loguru_name, expected):
        assert from_loguru(loguru_name) == expected
