"""文件大小解析工具

使用示例:
    from ydbm.utils import parse_file_size

    parse_file_size("10MB")   # 10485760
    parse_file_size("1.5GB")  # 1610612736
    parse_file_size(1024)     # 1024
"""

import re
from typing import Union


# 单位转换表
SIZE_UNITS = {
    "B": 1,
    "KB": 1024,
    "MB": 1024 ** 2,
    "GB": 1024 ** 3,
    "TB": 1024 ** 4,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([KMGT]?B?|BYTES?)?\s*$", re.IGNORECASE)


def parse_file_size(size_str: Union[str, int, float]) -> int:
    """解析文件大小字符串为字节数

    支持 B, KB, MB, GB, TB（不区分大小写），单字母 K/M/G/T 视为对应单位。

    Args:
        size_str: 文件大小字符串或数字（字节数）

    Returns:
        字节数

    Raises:
        ValueError: 格式无效时抛出
    """
    if isinstance(size_str, (int, float)):
        return int(size_str)

    match = _SIZE_PATTERN.match(str(size_str))
    if not match:
        raise ValueError(f"无法解析文件大小: {size_str!r}")

    number, unit = match.groups()
    unit = (unit or "B").upper()
    if unit.startswith("BYTE"):
        unit = "B"
    elif not unit.endswith("B"):
        unit += "B"

    return int(float(number) * SIZE_UNITS[unit])
