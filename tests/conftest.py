"""测试公共 fixture：把引擎输出捕获为 JSON 对象列表。"""

import json

import pytest

from contextlog.config.log import LoggerConfig
from contextlog.utils.log.engine import LogEngine


class CapturedLines:
    """loguru 可调用 sink：逐行解析 JSON 并保存。"""

    def __init__(self):
        self.raw = []
        self.entries = []

    def __call__(self, message):
        text = str(message)
        self.raw.append(text)
        self.entries.append(json.loads(text))

    @property
    def last(self):
        return self.entries[-1] if self.entries else None

    def clear(self):
        self.raw.clear()
        self.entries.clear()


@pytest.fixture
def captured():
    return CapturedLines()


@pytest.fixture
def engine(captured):
    eng = LogEngine(LoggerConfig(base={"_app": "test-app"}), sink=captured)
    yield eng
    eng.close()
