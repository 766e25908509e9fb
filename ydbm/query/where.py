"""WHERE 条件

WHERE 条件是一个带标签的联合类型：

    ByIdentifier(5)                              -> "ID" = 5
    Raw("Status = 'active'")                     -> Status = 'active'
    RawWithParams("Name = :name", {"name": "A"}) -> Name = :name，参数并入绑定

coerce_where 把常见的简写形式（整数、纯数字字符串、字符串、(字符串, 字典) 元组）
转换为上面三种类型之一。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..exceptions import ErrorCode, Err


@dataclass(frozen=True)
class ByIdentifier:
    id: int

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise Err.invalid(f"无效的 ID: {self.id!r}", code=ErrorCode.INVALID_WHERE)


@dataclass(frozen=True)
class Raw:
    predicate: str


@dataclass(frozen=True)
class RawWithParams:
    predicate: str
    params: Mapping[str, Any] = field(default_factory=dict)


WhereSpec = Union[ByIdentifier, Raw, RawWithParams]
WhereInput = Union[WhereSpec, int, str, Tuple[str, Mapping[str, Any]], None]


def coerce_where(value: WhereInput) -> Optional[WhereSpec]:
    """把简写形式转换为 WhereSpec

    None 和空字符串表示没有条件。无法识别的形式抛出 ValidationException(INVALID_WHERE)。
    """
    if value is None:
        return None
    if isinstance(value, (ByIdentifier, Raw, RawWithParams)):
        return value
    if isinstance(value, bool):
        raise Err.invalid(f"无效的 WHERE 条件: {value!r}", code=ErrorCode.INVALID_WHERE)
    if isinstance(value, int):
        return ByIdentifier(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        if stripped.isdigit():
            return ByIdentifier(int(stripped))
        return Raw(stripped)
    if isinstance(value, (tuple, list)) and len(value) == 2:
        predicate, params = value
        if isinstance(predicate, str) and isinstance(params, Mapping):
            return RawWithParams(predicate, dict(params))
    raise Err.invalid(f"无效的 WHERE 条件: {value!r}", code=ErrorCode.INVALID_WHERE)


def render_where(spec: Optional[WhereSpec], id_column: str) -> Tuple[Optional[str], Dict[str, Any]]:
    """生成 WHERE 片段和需要合并的参数

    Args:
        spec: WHERE 条件
        id_column: 已引用的主键列名

    Returns:
        (predicate, params)；没有条件时 predicate 为 None
    """
    if spec is None:
        return None, {}
    if isinstance(spec, ByIdentifier):
        return f"{id_column} = {int(spec.id)}", {}
    if isinstance(spec, RawWithParams):
        return spec.predicate, dict(spec.params)
    return spec.predicate, {}
