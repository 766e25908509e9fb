"""日志过滤钩子模块

绑定参数在写入日志或调试错误信息之前，需要过滤其中的敏感数据
（密码、token 等），避免泄漏到日志文件。

使用示例:
    from ydbm.log import mask_sensitive, log_filter_hook_manager, SensitiveDataFilterHook

    mask_sensitive({"user_id": 1, "password": "secret"})
    # {"user_id": 1, "password": "*SENSITIVE DATA FILTERED*"}

    # 自定义敏感字段模式
    log_filter_hook_manager.register_hook(
        SensitiveDataFilterHook(sensitive_patterns=[r".*iban.*"])
    )
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Mapping, Optional

# 默认敏感字段名模式
DEFAULT_SENSITIVE_PATTERNS = [
    r".*(password|pwd|passwd|pass).*",
    r".*(token|access_token|refresh_token).*",
    r".*(secret|apikey|api_key).*",
    r".*(credential|credentials).*",
]

FILTERED_PLACEHOLDER = "*SENSITIVE DATA FILTERED*"


class LogFilterHook(ABC):
    """日志过滤钩子抽象基类"""

    @abstractmethod
    def filter(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """过滤参数字典，返回新的字典"""


class SensitiveDataFilterHook(LogFilterHook):
    """敏感数据过滤器

    根据字段名模式把敏感参数的值替换为占位符，支持嵌套字典和列表。
    """

    def __init__(self, sensitive_patterns: List[str] = None):
        self.sensitive_patterns = (
            sensitive_patterns if sensitive_patterns is not None else DEFAULT_SENSITIVE_PATTERNS
        )
        self.compiled_patterns = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.sensitive_patterns
        ]

    def is_sensitive(self, key: str) -> bool:
        return any(pattern.search(str(key)) for pattern in self.compiled_patterns)

    def filter(self, params: Dict[str, Any]) -> Dict[str, Any]:
        filtered = {}
        for key, value in params.items():
            if self.is_sensitive(key):
                filtered[key] = FILTERED_PLACEHOLDER
            elif isinstance(value, dict):
                filtered[key] = self.filter(value)
            elif isinstance(value, list):
                filtered[key] = [self.filter(v) if isinstance(v, dict) else v for v in value]
            else:
                filtered[key] = value
        return filtered


class LogFilterHookManager:
    """日志过滤钩子管理器（单例）"""

    _instance = None
    _hooks: List[LogFilterHook] = []

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LogFilterHookManager, cls).__new__(cls)
            cls._hooks = []
        return cls._instance

    @classmethod
    def register_hook(cls, hook: LogFilterHook):
        cls._hooks.append(hook)

    @classmethod
    def unregister_hook(cls, hook: LogFilterHook):
        if hook in cls._hooks:
            cls._hooks.remove(hook)

    @classmethod
    def get_hooks(cls) -> List[LogFilterHook]:
        return cls._hooks.copy()

    @classmethod
    def apply_filters(cls, params: Dict[str, Any]) -> Dict[str, Any]:
        filtered = dict(params)
        for hook in cls._hooks:
            filtered = hook.filter(filtered)
        return filtered


# 创建全局实例并注册默认的敏感数据过滤器
log_filter_hook_manager = LogFilterHookManager()
log_filter_hook_manager.register_hook(SensitiveDataFilterHook())


def mask_sensitive(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """对绑定参数应用所有已注册的过滤钩子"""
    if not params:
        return {}
    return log_filter_hook_manager.apply_filters(dict(params))
