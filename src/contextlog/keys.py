"""约定俗成的绑定字段键名（输出格式的一部分，不要修改）。"""

APP_KEY = "_app"
MODULE_KEY = "_mod"
CLASS_KEY = "_cls"
FUNCTION_KEY = "_fun"
EVENT_KEY = "_event"

# 子上下文中的 level 不是标签，而是子句柄的最低级别
LEVEL_KEY = "level"

__all__ = [
    "APP_KEY",
    "MODULE_KEY",
    "CLASS_KEY",
    "FUNCTION_KEY",
    "EVENT_KEY",
    "LEVEL_KEY",
]
