"""流式查询构造器

DBManager.select() 每次返回一个新的 QueryBuilder。构造器是一次性的：
build()/get_sql() 或 execute() 调用之后，再次调用终结方法会抛出
ValidationException(BUILDER_EXHAUSTED)。

使用示例:
    sql = (
        db.select("ID, Name")
        .from_("users")
        .where("Age > :age")
        .order_by("Name")
        .limit(10)
        .build()
    )

    rows = db.select().from_("users").where(("Name = :name", {"name": "A"})).execute().fetch_all()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from ..exceptions import ErrorCode, Err
from .binds import merge_binds
from .where import WhereInput, coerce_where, render_where

if TYPE_CHECKING:
    from ..manager import DBManager


class QueryBuilder:

    def __init__(self, manager: "DBManager", fields: str = "*"):
        self._manager = manager
        self._fields = fields
        self._from: Optional[str] = None
        self._where: List[str] = []
        self._params: Dict[str, Any] = {}
        self._group_by: Optional[str] = None
        self._having: Optional[str] = None
        self._order_by: Optional[str] = None
        self._limit: Optional[int] = None
        self._include_deleted = False
        self._exhausted = False

    def from_(self, tables: str) -> "QueryBuilder":
        self._from = tables
        return self

    def where(self, condition: WhereInput) -> "QueryBuilder":
        """追加 WHERE 条件，多个条件以 AND 连接，参数累加"""
        spec = coerce_where(condition)
        predicate, params = render_where(spec, self._manager.quote(self._manager.id_column))
        if predicate:
            self._where.append(predicate)
            self._params = merge_binds(self._params, params)
        return self

    def group_by(self, columns: str) -> "QueryBuilder":
        self._group_by = columns
        return self

    def having(self, condition: str) -> "QueryBuilder":
        self._having = condition
        return self

    def order_by(self, columns: str) -> "QueryBuilder":
        self._order_by = columns
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise Err.invalid(f"无效的 LIMIT: {limit!r}", code=ErrorCode.INVALID_PARAMETER)
        self._limit = limit
        return self

    def include_deleted(self, flag: bool = True) -> "QueryBuilder":
        """软模式下也返回已删除的记录"""
        self._include_deleted = flag
        return self

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self._params)

    def _consume(self) -> None:
        if self._exhausted:
            raise Err.invalid("查询构造器已使用过，请重新调用 select()", code=ErrorCode.BUILDER_EXHAUSTED)
        self._exhausted = True

    def _render(self) -> str:
        if not self._fields or not str(self._fields).strip():
            raise Err.invalid("SELECT not initialized", code=ErrorCode.SELECT_REQUIRED)

        source = self._from
        if not source:
            table = self._manager.get_table()
            if not table:
                raise Err.invalid("FROM not initialized", code=ErrorCode.FROM_REQUIRED)
            source = self._manager.quote(table)

        predicates = list(self._where)
        if self._manager.get_soft_mode() and not self._include_deleted:
            predicates.append(self._manager.rewriter.soft_predicate(self._manager.quote))

        parts = [f"SELECT {self._fields}", f"FROM {source}"]
        if predicates:
            if len(predicates) == 1:
                parts.append(f"WHERE {predicates[0]}")
            else:
                parts.append("WHERE " + " AND ".join(f"({p})" for p in predicates))
        if self._group_by:
            parts.append(f"GROUP BY {self._group_by}")
        if self._having:
            parts.append(f"HAVING {self._having}")
        if self._order_by:
            parts.append(f"ORDER BY {self._order_by}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        return " ".join(parts)

    def build(self) -> str:
        """生成 SQL（终结方法）"""
        self._consume()
        return self._render()

    get_sql = build

    def execute(self, params: Optional[Mapping[str, Any]] = None) -> "DBManager":
        """生成 SQL 并通过 DBManager.query 执行（终结方法）"""
        sql = self.build()
        binds = merge_binds(self._params, params or {})
        return self._manager.query(sql, binds)
