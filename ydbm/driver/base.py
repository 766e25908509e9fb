"""驱动适配器接口

DBManager 与具体数据库驱动之间的边界。事务管理器和查询门面只依赖这里定义的
方法，测试中可以用记录 SQL 的假驱动替换真实驱动。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Statement:
    """预处理语句

    SQL 使用命名参数（``:name``）。
    """
    sql: str


@dataclass
class ExecutionResult:
    """一次执行的结果

    查询语句的结果行在执行时一次性取出，门面层的 fetch 系列方法在其上移动游标。

    属性:
        columns: 列名列表（非查询语句为空）
        rows: 结果行（元组）
        rowcount: 影响行数；查询语句为结果行数
        lastrowid: 驱动报告的最后插入 ID
        returns_rows: 是否为返回结果集的语句
    """
    columns: List[str] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)
    rowcount: int = 0
    lastrowid: Optional[int] = None
    returns_rows: bool = False


class DriverAdapter(ABC):
    """驱动适配器抽象基类

    子类实现：
        - prepare / execute: 预处理与执行（命名参数）
        - begin_transaction / commit / rollback: 真实事务
        - exec_raw: 执行原始语句（SAVEPOINT 等）
        - quote_identifier: 按方言引用标识符
        - column_names: 读取表的列名（软模式字段补齐使用）
        - close: 关闭连接（幂等）
    """

    #: SQLAlchemy 方言名：sqlite / mysql / postgresql ...
    dialect_name: str = ""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """连接是否已关闭"""

    @abstractmethod
    def prepare(self, sql: str) -> Statement:
        """预处理 SQL"""

    @abstractmethod
    def execute(self, statement: Statement, params: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        """执行预处理语句"""

    @abstractmethod
    def begin_transaction(self) -> None:
        """开启真实事务"""

    @abstractmethod
    def commit(self) -> None:
        """提交真实事务"""

    @abstractmethod
    def rollback(self) -> None:
        """回滚真实事务"""

    @abstractmethod
    def exec_raw(self, sql: str) -> None:
        """执行不带参数、不返回结果的原始语句"""

    @abstractmethod
    def last_insert_id(self) -> Optional[int]:
        """最后插入的 ID"""

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """引用标识符"""

    @abstractmethod
    def column_names(self, table: str) -> Sequence[str]:
        """返回表的列名"""

    @abstractmethod
    def close(self) -> None:
        """关闭连接，重复调用无副作用"""
