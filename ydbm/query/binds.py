"""绑定参数工具"""

import re
from typing import Any, Dict, Mapping, Optional

from ..exceptions import ErrorCode, Err

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_INTEGER = re.compile(r"^\s*-?\d+\s*$")


def bind_name(column: str, index: int) -> str:
    """列名可以直接作为命名参数时使用列名，否则使用 p<序号>"""
    return column if _IDENTIFIER.match(column) else f"p{index}"


def bind_names(columns) -> list:
    """为一组列生成互不重复的命名参数"""
    names = []
    used = set()
    for index, column in enumerate(columns):
        name = bind_name(column, index)
        suffix = 0
        while name in used:
            suffix += 1
            name = f"p{index}_{suffix}"
        used.add(name)
        names.append(name)
    return names


def is_id_bind(name: str) -> bool:
    """名为 id 或以 _id 结尾的参数按整数绑定"""
    lowered = name.lower()
    return lowered == "id" or lowered.endswith("_id")


def _to_int(name: str, value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER.match(value):
        return int(value)
    raise Err.invalid(
        f"参数 `{name}` 需要整数，实际为 {value!r}",
        code=ErrorCode.INVALID_PARAMETER,
        parameter=name,
    )


def normalize_binds(binds: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """规范化调用方传入的绑定参数

    - 去掉参数名前导的 ``:``
    - id / *_id 参数转换为整数
    """
    normalized: Dict[str, Any] = {}
    for key, value in (binds or {}).items():
        name = str(key).lstrip(":")
        normalized[name] = _to_int(name, value) if is_id_bind(name) else value
    return normalized


def merge_binds(base: Dict[str, Any], extra: Mapping[str, Any]) -> Dict[str, Any]:
    """合并 WHERE 参数，与已有参数同名时抛出 ValidationException"""
    merged = dict(base)
    for name, value in normalize_binds(extra).items():
        if name in merged:
            raise Err.invalid(
                f"参数名冲突: `{name}`",
                code=ErrorCode.PARAMETER_CLASH,
                parameter=name,
            )
        merged[name] = value
    return merged
