"""分页

默认的计数方式是对原查询（去掉末尾顶层 ORDER BY）包一层 COUNT(*) 子查询；
MySQL 下还保留 SQL_CALC_FOUND_ROWS + FOUND_ROWS() 的旧方式。
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from pydantic import BaseModel, Field

from ..config.settings import PaginationSettings
from ..exceptions import ErrorCode, Err
from ..log import get_logger

if TYPE_CHECKING:
    from ..manager import DBManager

logger = get_logger()

FOUND_ROWS_SQL = "SELECT FOUND_ROWS()"
COUNT_ALIAS = "ydbm_count"

MODE_COUNT = "count"
MODE_FOUND_ROWS = "found_rows"

_ORDER_BY = re.compile(r"ORDER\s+BY\b", re.IGNORECASE)
_LEADING_SELECT = re.compile(r"^\s*SELECT\b", re.IGNORECASE)


class PageDescriptor(BaseModel):
    """分页结果

    from 是 Python 关键字，字段名为 from_，序列化时使用别名 "from"：

        page.model_dump(by_alias=True)["from"]
    """
    model_config = {"populate_by_name": True}

    total: int = Field(description="总条数")
    per_page: int = Field(description="每页条数")
    last_page: int = Field(description="最后一页页码，没有数据时为 0")
    current_page: int = Field(description="当前页码")
    from_: int = Field(alias="from", description="当前页第一条的序号")
    to: int = Field(description="当前页最后一条的序号")
    page_start: int = Field(description="页码窗口起始页")
    page_end: int = Field(description="页码窗口结束页")
    data: List[Any] = Field(default_factory=list, description="当前页数据")

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1


def strip_trailing_order_by(sql: str) -> str:
    """去掉末尾的顶层 ORDER BY 子句

    括号内（子查询、窗口函数）和引号内的 ORDER BY 不受影响。
    """
    depth = 0
    quote: Optional[str] = None
    last_top_level = -1
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        elif depth == 0 and ch in "oO" and _ORDER_BY.match(sql, i):
            if i == 0 or not (sql[i - 1].isalnum() or sql[i - 1] == "_"):
                last_top_level = i
        i += 1

    if last_top_level < 0:
        return sql
    return sql[:last_top_level].rstrip()


def page_window(current_page: int, last_page: int, window: int = 10) -> tuple:
    """计算页码窗口 (page_start, page_end)

    窗口宽度为 window；总页数超过窗口且当前页过半后，当前页前保留 window/2 页，
    窗口超出最后一页时整体左移。
    """
    page_start = 1
    page_end = min(window, last_page)

    half = window // 2
    if last_page > window and current_page >= half + 1:
        page_start = current_page - half
        page_end = current_page + half - 1
        if page_end > last_page:
            diff = page_end - last_page
            page_end = last_page
            page_start -= diff

    return page_start, page_end


class Pager:
    """分页器

    Args:
        manager: DBManager 实例
        settings: 分页配置
    """

    def __init__(self, manager: "DBManager", settings: Optional[PaginationSettings] = None):
        self._manager = manager
        self.settings = settings or PaginationSettings()

    def _resolve_per_page(self, per_page: Optional[int]) -> int:
        if per_page is None:
            per_page = self.settings.default_per_page
        if isinstance(per_page, bool) or not isinstance(per_page, int) or per_page <= 0:
            raise Err.invalid(f"无效的每页条数: {per_page!r}", code=ErrorCode.INVALID_PARAMETER)
        return min(per_page, self.settings.max_per_page)

    def paginate(
        self,
        sql: str,
        params: Optional[Mapping[str, Any]] = None,
        page: int = 1,
        per_page: Optional[int] = None,
        mode: str = MODE_COUNT,
    ) -> PageDescriptor:
        per_page = self._resolve_per_page(per_page)
        try:
            current_page = int(page)
        except (TypeError, ValueError):
            current_page = 1
        current_page = max(current_page, 1)

        sql = sql.strip().rstrip(";").rstrip()
        params = dict(params or {})

        if mode == MODE_COUNT:
            total, rows, current_page = self._paginate_count(sql, params, current_page, per_page)
        elif mode == MODE_FOUND_ROWS:
            total, rows, current_page = self._paginate_found_rows(sql, params, current_page, per_page)
        else:
            raise Err.invalid(f"未知的分页方式: {mode!r}", code=ErrorCode.INVALID_PARAMETER)

        last_page = int(math.ceil(total / per_page))

        from_ = (current_page - 1) * per_page + 1
        to = min(from_ + per_page - 1, total)
        page_start, page_end = page_window(current_page, last_page, self.settings.window)

        return PageDescriptor(
            total=total,
            per_page=per_page,
            last_page=last_page,
            current_page=current_page,
            from_=from_,
            to=to,
            page_start=page_start,
            page_end=page_end,
            data=rows,
        )

    def _paginate_count(self, sql, params, current_page, per_page):
        count_sql = f"SELECT COUNT(*) FROM ({strip_trailing_order_by(sql)}) AS {COUNT_ALIAS}"
        total = int(self._manager.query(count_sql, params).fetch_one() or 0)

        last_page = int(math.ceil(total / per_page))
        if last_page == 0:
            current_page = 1
        elif current_page > last_page:
            current_page = last_page

        offset = (current_page - 1) * per_page
        rows = self._manager.query(f"{sql} LIMIT {per_page} OFFSET {offset}", params).fetch_all()
        return total, rows, current_page

    def _paginate_found_rows(self, sql, params, current_page, per_page):
        if self._manager.dialect_name not in ("mysql", "mariadb"):
            raise Err.invalid(
                f"found_rows 分页只支持 MySQL，当前为 {self._manager.dialect_name}",
                code=ErrorCode.UNSUPPORTED_DIALECT,
            )
        data_sql = _LEADING_SELECT.sub("SELECT SQL_CALC_FOUND_ROWS", sql, count=1)

        def fetch_page(page: int):
            offset = (page - 1) * per_page
            rows = self._manager.query(f"{data_sql} LIMIT {per_page} OFFSET {offset}", params).fetch_all()
            return rows, int(self._manager.query(FOUND_ROWS_SQL).fetch_one() or 0)

        rows, total = fetch_page(current_page)
        # 总数只有在执行数据查询之后才知道，页码越界时按最后一页重新查询
        last_page = int(math.ceil(total / per_page))
        if last_page == 0:
            current_page = 1
        elif current_page > last_page:
            current_page = last_page
            rows, total = fetch_page(current_page)
        return total, rows, current_page
