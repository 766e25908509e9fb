"""ydbm - 轻量数据库访问门面

提供：
- DBManager: CRUD 快捷方法、原始查询、fetch 系列方法
- 软模式: 审计字段自动写入与软删除
- 基于保存点的嵌套事务
- 流式查询构造器与分页

快速开始:
    from ydbm import DBManager

    db = DBManager.from_url("sqlite:///./app.db", default_actor="system")
    new_id = db.table("Author").insert({"Name": "Victor Hugo"})
"""

__version__ = "0.1.0"

from .manager import DBManager
from .exceptions import (
    Err,
    ErrorCode,
    DBMException,
    ConnectionFailedError,
    ValidationException,
    ExecutionError,
    GENERIC_ERROR_MESSAGE,
)
from .query import (
    ByIdentifier,
    Raw,
    RawWithParams,
    QueryBuilder,
    PageDescriptor,
)
from .soft_mode import AuditRewriter, SoftModeConfig
from .transaction import TransactionManager, TransactionOutcome
from .driver import DriverAdapter, SqlAlchemyDriver
from .config import DBManagerSettings, load_yaml_config

__all__ = [
    "__version__",
    "DBManager",

    "Err",
    "ErrorCode",
    "DBMException",
    "ConnectionFailedError",
    "ValidationException",
    "ExecutionError",
    "GENERIC_ERROR_MESSAGE",

    "ByIdentifier",
    "Raw",
    "RawWithParams",
    "QueryBuilder",
    "PageDescriptor",

    "AuditRewriter",
    "SoftModeConfig",
    "TransactionManager",
    "TransactionOutcome",
    "DriverAdapter",
    "SqlAlchemyDriver",
    "DBManagerSettings",
    "load_yaml_config",
]
