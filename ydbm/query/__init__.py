"""查询模块：WHERE 条件、查询构造器、查询历史、分页"""

from .binds import bind_name, bind_names, normalize_binds, merge_binds, is_id_bind
from .where import ByIdentifier, Raw, RawWithParams, WhereSpec, coerce_where, render_where
from .history import QueryHistory, QueryRecord, DEFAULT_HISTORY_CAPACITY
from .builder import QueryBuilder
from .pager import (
    Pager,
    PageDescriptor,
    page_window,
    strip_trailing_order_by,
    FOUND_ROWS_SQL,
    MODE_COUNT,
    MODE_FOUND_ROWS,
)

__all__ = [
    "bind_name",
    "bind_names",
    "normalize_binds",
    "merge_binds",
    "is_id_bind",

    "ByIdentifier",
    "Raw",
    "RawWithParams",
    "WhereSpec",
    "coerce_where",
    "render_where",

    "QueryHistory",
    "QueryRecord",
    "DEFAULT_HISTORY_CAPACITY",

    "QueryBuilder",

    "Pager",
    "PageDescriptor",
    "page_window",
    "strip_trailing_order_by",
    "FOUND_ROWS_SQL",
    "MODE_COUNT",
    "MODE_FOUND_ROWS",
]
