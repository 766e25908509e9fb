"""软模式模块：审计字段注入与软删除"""

from .rewriter import (
    AuditRewriter,
    SoftModeConfig,
    DELETE_COLUMNS,
    DELETED_FLAG_NO,
    DELETED_FLAG_YES,
    TIMESTAMP_FORMAT,
)

__all__ = [
    "AuditRewriter",
    "SoftModeConfig",
    "DELETE_COLUMNS",
    "DELETED_FLAG_NO",
    "DELETED_FLAG_YES",
    "TIMESTAMP_FORMAT",
]
