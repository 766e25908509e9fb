"""基于 SQLAlchemy Core 的驱动适配器

连接以 AUTOCOMMIT 隔离级别打开，BEGIN / COMMIT / ROLLBACK / SAVEPOINT 都作为原始
语句发送，事务嵌套深度完全由 TransactionManager 掌控，不受驱动隐式事务影响。

使用示例:
    from ydbm.driver import SqlAlchemyDriver

    driver = SqlAlchemyDriver.connect("sqlite:///./app.db")
    driver = SqlAlchemyDriver.connect(
        driver="mysql+pymysql", host="127.0.0.1", user="root",
        password="secret", database="shop", port=3306,
    )
"""

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine, URL, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from ..exceptions import ConnectionFailedError, ErrorCode, Err, ExecutionError
from ..log import get_logger, mask_sensitive
from .base import DriverAdapter, ExecutionResult, Statement

logger = get_logger()
sql_logger = get_logger("sql")


def build_url(
    driver: str,
    host: Optional[str] = None,
    user: Optional[str] = None,
    password: Optional[str] = None,
    database: Optional[str] = None,
    port: Optional[int] = None,
) -> URL:
    """由分散的连接参数构造 SQLAlchemy URL"""
    return URL.create(
        drivername=driver,
        username=user or None,
        password=password or None,
        host=host or None,
        port=port,
        database=database or None,
    )


class SqlAlchemyDriver(DriverAdapter):
    """SQLAlchemy 驱动适配器

    Args:
        engine: SQLAlchemy 引擎
        owns_engine: 关闭时是否同时 dispose 引擎
    """

    def __init__(self, engine: Engine, owns_engine: bool = False):
        self._engine = engine
        self._owns_engine = owns_engine
        self._last_insert_id: Optional[int] = None
        try:
            self._connection: Optional[Connection] = engine.connect().execution_options(
                isolation_level="AUTOCOMMIT"
            )
        except SQLAlchemyError as exc:
            raise ConnectionFailedError(
                f"数据库连接失败: {exc}",
                code=ErrorCode.CONNECTION_FAILED,
            ) from exc
        self.dialect_name = engine.dialect.name
        logger.debug(f"已连接数据库: dialect={self.dialect_name}")

    @classmethod
    def connect(
        cls,
        url: Union[str, URL, None] = None,
        *,
        driver: Optional[str] = None,
        host: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        database: Optional[str] = None,
        port: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
        echo: bool = False,
        **engine_kwargs,
    ) -> "SqlAlchemyDriver":
        """创建引擎并打开连接

        url 与 driver 至少给出一个。DSN 无法解析或驱动不存在时抛出
        ConnectionFailedError(INVALID_DSN)；连接失败时抛出 ConnectionFailedError。
        """
        try:
            if url is None:
                if not driver:
                    raise Err.connection("缺少数据库驱动或连接URL", code=ErrorCode.INVALID_DSN)
                url = build_url(driver, host, user, password, database, port)
            else:
                url = make_url(url)
            engine = create_engine(url, echo=echo, connect_args=dict(options or {}), **engine_kwargs)
        except (ArgumentError, ImportError) as exc:
            raise ConnectionFailedError(
                f"无效的数据库连接串: {exc}",
                code=ErrorCode.INVALID_DSN,
            ) from exc

        return cls(engine, owns_engine=True)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def closed(self) -> bool:
        return self._connection is None

    def _conn(self) -> Connection:
        if self._connection is None:
            raise Err.closed()
        return self._connection

    # ==================== 执行 ====================

    def prepare(self, sql: str) -> Statement:
        self._conn()
        return Statement(sql)

    def execute(self, statement: Statement, params: Optional[Mapping[str, Any]] = None) -> ExecutionResult:
        conn = self._conn()
        params = dict(params or {})
        sql_logger.debug(f"[SQL] {statement.sql} | params: {mask_sensitive(params)}")
        try:
            result = conn.execute(text(statement.sql), params)
            if result.returns_rows:
                columns = list(result.keys())
                rows = [tuple(row) for row in result.fetchall()]
                outcome = ExecutionResult(
                    columns=columns,
                    rows=rows,
                    rowcount=len(rows),
                    returns_rows=True,
                )
            else:
                outcome = ExecutionResult(rowcount=result.rowcount, lastrowid=result.lastrowid)
        except SQLAlchemyError as exc:
            raise ExecutionError(
                str(getattr(exc, "orig", None) or exc),
                sql=statement.sql,
                params=mask_sensitive(params),
            ) from exc

        if outcome.lastrowid:
            self._last_insert_id = outcome.lastrowid
        return outcome

    def exec_raw(self, sql: str) -> None:
        conn = self._conn()
        sql_logger.debug(f"[SQL] {sql}")
        try:
            conn.exec_driver_sql(sql)
        except SQLAlchemyError as exc:
            raise ExecutionError(
                str(getattr(exc, "orig", None) or exc),
                code=ErrorCode.TRANSACTION_ERROR,
                sql=sql,
            ) from exc

    # ==================== 事务 ====================

    def begin_transaction(self) -> None:
        self.exec_raw("BEGIN")

    def commit(self) -> None:
        self.exec_raw("COMMIT")

    def rollback(self) -> None:
        self.exec_raw("ROLLBACK")

    # ==================== 其他 ====================

    def last_insert_id(self) -> Optional[int]:
        return self._last_insert_id

    def quote_identifier(self, name: str) -> str:
        return self._engine.dialect.identifier_preparer.quote_identifier(name)

    def column_names(self, table: str) -> Sequence[str]:
        try:
            return [col["name"] for col in inspect(self._conn()).get_columns(table)]
        except SQLAlchemyError as exc:
            raise ExecutionError(str(exc), sql=f"-- inspect {table}") from exc

    def close(self) -> None:
        if self._connection is None:
            return
        try:
            self._connection.close()
        finally:
            self._connection = None
            if self._owns_engine:
                self._engine.dispose()
            logger.debug("数据库连接已关闭")
