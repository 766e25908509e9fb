"""驱动适配器模块"""

from .base import DriverAdapter, ExecutionResult, Statement
from .sqlalchemy_driver import SqlAlchemyDriver, build_url

__all__ = [
    "DriverAdapter",
    "ExecutionResult",
    "Statement",
    "SqlAlchemyDriver",
    "build_url",
]
