"""测试辅助工具"""

from .recording_driver import RecordingDriver, FailingStep
from .schema_helpers import create_author_table, AUTHOR_COLUMNS

__all__ = [
    "RecordingDriver",
    "FailingStep",
    "create_author_table",
    "AUTHOR_COLUMNS",
]
