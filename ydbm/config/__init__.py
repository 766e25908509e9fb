"""配置模块

提供配置管理功能：
- DBManagerSettings: 聚合配置，支持 YAML + 环境变量
- 子配置类: DatabaseSettings, SoftModeSettings, PaginationSettings, LoggingSettings
- ConfigLoader: YAML 配置加载器

快速开始:
    from ydbm.config import DBManagerSettings, load_yaml_config

    settings = load_yaml_config("config/dbm.yaml", DBManagerSettings)
"""

from .settings import (
    DBManagerSettings,
    DatabaseSettings,
    SoftModeSettings,
    PaginationSettings,
    LoggingSettings,
    DEFAULT_FORBIDDEN_COLUMNS,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    "DBManagerSettings",
    "DatabaseSettings",
    "SoftModeSettings",
    "PaginationSettings",
    "LoggingSettings",
    "DEFAULT_FORBIDDEN_COLUMNS",

    "ConfigLoader",
    "load_yaml_config",
]
