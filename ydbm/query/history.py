"""查询历史

每个 DBManager 实例保存最近执行的语句。历史达到容量后，下一次写入前整体清空，
而不是滑动淘汰。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_HISTORY_CAPACITY = 20


@dataclass
class QueryRecord:
    sql: str
    params: Dict[str, Any] = field(default_factory=dict)
    result: Any = None


class QueryHistory:
    """有界查询历史

    使用示例:
        history = QueryHistory(capacity=20)
        history.push(QueryRecord("SELECT 1"))
        history.last.sql   # "SELECT 1"
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._records: List[QueryRecord] = []

    def push(self, record: QueryRecord) -> QueryRecord:
        if len(self._records) >= self.capacity:
            self._records.clear()
        self._records.append(record)
        return record

    @property
    def last(self) -> Optional[QueryRecord]:
        return self._records[-1] if self._records else None

    @property
    def records(self) -> List[QueryRecord]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))
