"""日志模块

提供：
- 日志配置与管理（setup_logger / setup_root_logger / setup_sql_logger）
- 模块名自动推断的 get_logger
- 绑定参数敏感数据过滤

使用示例:
    from ydbm.log import setup_root_logger, get_logger

    setup_root_logger(config=settings.logging)
    logger = get_logger()
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    setup_sql_logger,
    create_formatter,
    MicrosecondFormatter,
    DEFAULT_LOG_FORMAT,
    SQL_LOG_FORMAT,
    sql_logger,
    transaction_logger,
    logger,
    get_logger,
)

from .filter_hooks import (
    LogFilterHook,
    SensitiveDataFilterHook,
    LogFilterHookManager,
    log_filter_hook_manager,
    mask_sensitive,
    DEFAULT_SENSITIVE_PATTERNS,
    FILTERED_PLACEHOLDER,
)

__all__ = [
    "setup_logger",
    "setup_root_logger",
    "setup_sql_logger",
    "create_formatter",
    "MicrosecondFormatter",
    "DEFAULT_LOG_FORMAT",
    "SQL_LOG_FORMAT",
    "sql_logger",
    "transaction_logger",
    "logger",
    "get_logger",

    "LogFilterHook",
    "SensitiveDataFilterHook",
    "LogFilterHookManager",
    "log_filter_hook_manager",
    "mask_sensitive",
    "DEFAULT_SENSITIVE_PATTERNS",
    "FILTERED_PLACEHOLDER",
]
