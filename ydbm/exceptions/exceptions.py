"""数据库访问异常类定义

定义 ydbm 使用的异常类体系：

    DBMException
    ├── ConnectionFailedError   连接失败 / 连接已关闭
    ├── ValidationException     参数校验失败（在发送任何 SQL 之前抛出）
    └── ExecutionError          驱动层执行失败（prepare/execute/commit/rollback）
"""

import copy
from enum import Enum
from typing import Optional, List, Any, Dict, Union, Tuple


class ErrorCode(str, Enum):
    """错误代码枚举

    继承自 str，可以直接作为字符串比较。

    使用示例:
        try:
            db.insert({"created_at": "2024-01-01"})
        except ValidationException as e:
            if e.code == ErrorCode.FORBIDDEN_COLUMN:
                ...
    """

    # ==================== 通用错误 ====================
    DBM_ERROR = "DBM_ERROR"

    # ==================== 连接相关 ====================
    CONNECTION_FAILED = "CONNECTION_FAILED"
    CONNECTION_CLOSED = "CONNECTION_CLOSED"
    INVALID_DSN = "INVALID_DSN"

    # ==================== 校验相关 ====================
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FORBIDDEN_COLUMN = "FORBIDDEN_COLUMN"
    INVALID_WHERE = "INVALID_WHERE"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    PARAMETER_CLASH = "PARAMETER_CLASH"
    TABLE_REQUIRED = "TABLE_REQUIRED"
    SELECT_REQUIRED = "SELECT_REQUIRED"
    FROM_REQUIRED = "FROM_REQUIRED"
    BUILDER_EXHAUSTED = "BUILDER_EXHAUSTED"
    UNSUPPORTED_DIALECT = "UNSUPPORTED_DIALECT"

    # ==================== 执行相关 ====================
    EXECUTION_ERROR = "EXECUTION_ERROR"
    TRANSACTION_ERROR = "TRANSACTION_ERROR"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]

# 非调试模式下对外暴露的统一错误消息
GENERIC_ERROR_MESSAGE = "Database error, please contact the administrator"


class DBMException(Exception):
    """数据库访问异常基类

    属性:
        message: 错误消息
        code: 错误代码（ErrorCode 枚举或字符串）
        details: 详细错误信息列表
        extra: 额外的上下文信息
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.DBM_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        self.message = message
        self.code = code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "message": self.message,
            "code": self.code,
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra),
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r})"
        )


class ConnectionFailedError(DBMException):
    """连接异常

    DSN 无效、认证失败，或在连接关闭后继续调用时抛出。

    使用示例:
        raise ConnectionFailedError("连接已关闭", code=ErrorCode.CONNECTION_CLOSED)
    """

    def __init__(
        self,
        message: str = "数据库连接失败",
        code: ErrorCodeType = ErrorCode.CONNECTION_FAILED,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message=message, code=code, details=details, **extra)


class ValidationException(DBMException):
    """数据校验异常

    写入保留审计字段、查询构造器缺少 FROM、分页参数非法等情况下抛出。
    此异常总是在发送任何 SQL 之前抛出。

    使用示例:
        raise ValidationException("`created_at` is forbidden", code=ErrorCode.FORBIDDEN_COLUMN,
                                  column="created_at")
    """

    def __init__(
        self,
        message: str = "数据校验失败",
        code: ErrorCodeType = ErrorCode.VALIDATION_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message=message, code=code, details=details, **extra)


class ExecutionError(DBMException):
    """SQL 执行异常

    驱动层在 prepare/execute/commit/rollback 阶段失败时抛出。

    属性:
        sql: 失败时的 SQL 文本（非调试模式下为 None）
        params: 绑定参数（已脱敏，非调试模式下为 None）
        caller: 触发操作的业务代码位置 (文件名, 行号)
    """

    def __init__(
        self,
        message: str = GENERIC_ERROR_MESSAGE,
        code: ErrorCodeType = ErrorCode.EXECUTION_ERROR,
        details: Optional[List[str]] = None,
        sql: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        caller: Optional[Tuple[str, int]] = None,
        **extra: Any
    ):
        self.sql = sql
        self.params = params
        self.caller = caller
        super().__init__(message=message, code=code, details=details, **extra)

    def describe(self) -> str:
        """生成包含 SQL、参数和调用位置的多行描述"""
        lines = [f"DBM Error: {self.message}"]
        if self.sql:
            lines.append(f"[SQL] {self.sql.strip()}")
        if self.params:
            rendered = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
            lines.append(f"Params: {rendered}")
        if self.caller:
            lines.append(f"file `{self.caller[0]}` on line {self.caller[1]}")
        return "\n".join(lines)


class Err:
    """异常快捷创建类

    使用示例:
        from ydbm import Err

        raise Err.invalid("`deleted` is forbidden", code=ErrorCode.FORBIDDEN_COLUMN)
        raise Err.connection("连接已关闭", code=ErrorCode.CONNECTION_CLOSED)
        raise Err.execution()
    """

    @staticmethod
    def connection(message: str = "数据库连接失败", **kwargs) -> ConnectionFailedError:
        """连接失败"""
        return ConnectionFailedError(message, **kwargs)

    @staticmethod
    def closed() -> ConnectionFailedError:
        """连接已关闭"""
        return ConnectionFailedError("数据库连接已关闭", code=ErrorCode.CONNECTION_CLOSED)

    @staticmethod
    def invalid(message: str = "数据校验失败", **kwargs) -> ValidationException:
        """数据校验失败"""
        return ValidationException(message, **kwargs)

    @staticmethod
    def forbidden_column(column: str) -> ValidationException:
        """写入了保留的审计字段"""
        return ValidationException(
            f"`{column}` is forbidden",
            code=ErrorCode.FORBIDDEN_COLUMN,
            column=column,
        )

    @staticmethod
    def execution(message: str = GENERIC_ERROR_MESSAGE, **kwargs) -> ExecutionError:
        """SQL 执行失败"""
        return ExecutionError(message, **kwargs)
