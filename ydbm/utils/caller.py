"""调用方定位

调试模式下，错误信息需要指出是业务代码的哪一行触发了数据库操作，
因此需要跳过 ydbm 包自身以及 contextlib 等包装层的栈帧。
"""

import os
import traceback
from typing import Optional, Tuple

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_WRAPPER_MODULES = frozenset({"contextlib.py", "functools.py"})


def find_caller(package_dir: str = _PACKAGE_DIR) -> Optional[Tuple[str, int]]:
    """返回调用栈中离当前位置最近的业务代码帧 (文件名, 行号)

    Returns:
        (filename, lineno)，找不到时返回 None
    """
    for frame in reversed(traceback.extract_stack()):
        filename = os.path.abspath(frame.filename)
        if filename.startswith(package_dir + os.sep):
            continue
        if os.path.basename(filename) in _WRAPPER_MODULES:
            continue
        return filename, frame.lineno
    return None
