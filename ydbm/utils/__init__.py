"""工具模块

提供通用工具函数：
- 文件大小解析（日志文件轮转配置使用）
- 调用方定位（调试模式下的错误上下文）

使用示例:
    from ydbm.utils import parse_file_size, find_caller

    size = parse_file_size("10MB")  # 10485760
"""

from .file_size import parse_file_size, SIZE_UNITS
from .caller import find_caller

__all__ = [
    "parse_file_size",
    "SIZE_UNITS",
    "find_caller",
]
