"""异常处理模块

使用示例:
    from ydbm.exceptions import Err, ErrorCode, ValidationException

    try:
        db.insert({"Name": "X", "created_by": 1})
    except ValidationException as e:
        assert e.code == ErrorCode.FORBIDDEN_COLUMN
"""

from .exceptions import (
    Err,
    ErrorCode,
    ErrorCodeType,
    GENERIC_ERROR_MESSAGE,
    DBMException,
    ConnectionFailedError,
    ValidationException,
    ExecutionError,
)

__all__ = [
    "Err",
    "ErrorCode",
    "ErrorCodeType",
    "GENERIC_ERROR_MESSAGE",
    "DBMException",
    "ConnectionFailedError",
    "ValidationException",
    "ExecutionError",
]
