"""审计字段 / 软删除重写器

软模式下，所有写操作在生成 SQL 之前都要经过重写器：

- INSERT: 拒绝调用方写入审计字段，注入 created_at / created_by
- UPDATE: 拒绝调用方写入审计字段，注入 updated_at / updated_by
- DELETE: 转换为 UPDATE，写入 deleted / deleted_at / deleted_by

重写器从不修改传入的字典，总是返回新的字典。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Union

from ..config.settings import DEFAULT_FORBIDDEN_COLUMNS
from ..exceptions import Err

Actor = Union[int, str]

DELETED_FLAG_YES = "YES"
DELETED_FLAG_NO = "NO"

# 删除路径上允许出现的字段
DELETE_COLUMNS = frozenset({"deleted", "deleted_at", "deleted_by"})

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class SoftModeConfig:
    """软模式配置

    属性:
        enabled: 是否启用软模式
        default_actor: 调用方未提供操作人时使用的值
        forbidden_columns: 调用方不允许直接写入的字段
    """
    enabled: bool = True
    default_actor: Actor = ""
    forbidden_columns: FrozenSet[str] = field(
        default_factory=lambda: frozenset(DEFAULT_FORBIDDEN_COLUMNS)
    )


class AuditRewriter:
    """审计字段重写器

    Args:
        config: 软模式配置
        clock: 返回当前时间的函数，测试中可以替换为固定时间

    使用示例:
        rewriter = AuditRewriter(SoftModeConfig(default_actor="system"))
        payload = rewriter.rewrite_insert({"Name": "A"}, actor=7)
        # {"Name": "A", "created_at": "2024-01-01 12:00:00", "created_by": 7}
    """

    def __init__(self, config: Optional[SoftModeConfig] = None, clock: Callable[[], datetime] = datetime.now):
        self.config = config or SoftModeConfig()
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def now(self) -> str:
        """当前时间，精确到秒"""
        return self._clock().strftime(TIMESTAMP_FORMAT)

    def resolve_actor(self, actor: Optional[Actor]) -> Actor:
        """None 和空字符串视为未提供，回退到默认操作人"""
        if actor is None or actor == "":
            return self.config.default_actor
        return actor

    def check_forbidden(self, row: Mapping[str, Any], allowed: FrozenSet[str] = frozenset()) -> None:
        for column in row:
            if column in self.config.forbidden_columns and column not in allowed:
                raise Err.forbidden_column(column)

    def rewrite_insert(self, row: Mapping[str, Any], actor: Optional[Actor] = None) -> Dict[str, Any]:
        if not self.enabled:
            return dict(row)

        self.check_forbidden(row)
        payload = dict(row)
        payload["created_at"] = self.now()
        payload["created_by"] = self.resolve_actor(actor)
        return payload

    def rewrite_update(
        self,
        row: Mapping[str, Any],
        actor: Optional[Actor] = None,
        *,
        from_delete: bool = False,
    ) -> Dict[str, Any]:
        """重写 UPDATE 的 SET 字段

        from_delete 为 True 时（软删除转换而来）允许 deleted / deleted_at / deleted_by，
        且不注入 updated_at / updated_by。
        """
        if not self.enabled:
            return dict(row)

        self.check_forbidden(row, allowed=DELETE_COLUMNS if from_delete else frozenset())
        payload = dict(row)
        if not from_delete:
            payload["updated_at"] = self.now()
            payload["updated_by"] = self.resolve_actor(actor)
        return payload

    def delete_payload(self, actor: Optional[Actor] = None) -> Dict[str, Any]:
        """软删除写入的字段"""
        return {
            "deleted": DELETED_FLAG_YES,
            "deleted_at": self.now(),
            "deleted_by": self.resolve_actor(actor),
        }

    def soft_predicate(self, quote: Callable[[str], str] = lambda name: name) -> str:
        """未删除记录的过滤条件"""
        return f"{quote('deleted')} = '{DELETED_FLAG_NO}'"
