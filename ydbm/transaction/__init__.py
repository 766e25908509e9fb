"""事务模块

提供基于保存点的嵌套事务管理。

使用示例:
    from ydbm.transaction import TransactionManager

    tm = TransactionManager(driver)
    with tm.scope():
        ...
"""

from .manager import TransactionManager, TransactionOutcome, savepoint_name

__all__ = [
    "TransactionManager",
    "TransactionOutcome",
    "savepoint_name",
]
