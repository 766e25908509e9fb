"""
配置模块
提供 ydbm 的默认配置，业务项目可以继承并覆盖
"""

from pydantic_settings import BaseSettings
from pydantic import Field, computed_field
from typing import Any, Dict, List, Optional, Union

from ..utils import parse_file_size


DEFAULT_FORBIDDEN_COLUMNS = [
    "deleted",
    "created_at",
    "created_by",
    "updated_at",
    "updated_by",
    "deleted_at",
    "deleted_by",
]


class DatabaseSettings(BaseSettings):
    """数据库连接配置

    可以直接给出 SQLAlchemy URL，也可以分别给出驱动、主机等字段。
    url 非空时优先使用 url。

    使用示例:
        from ydbm.config import DatabaseSettings

        db_config = DatabaseSettings(url="sqlite:///./app.db")

        db_config = DatabaseSettings(
            driver="mysql+pymysql",
            host="127.0.0.1",
            user="root",
            password="secret",
            database="shop",
        )
    """
    url: str = Field(default="", description="数据库连接URL（优先）")
    driver: str = Field(default="mysql+pymysql", description="SQLAlchemy 方言+驱动名")
    host: str = Field(default="localhost", description="主机")
    user: str = Field(default="", description="用户名")
    password: str = Field(default="", description="密码")
    database: str = Field(default="", description="数据库名")
    port: Optional[int] = Field(default=None, description="端口")
    options: Dict[str, Any] = Field(default_factory=dict, description="传给 DBAPI connect() 的额外参数")
    echo: bool = Field(default=False, description="是否由 SQLAlchemy 打印SQL语句")

    class Config:
        env_prefix = "YDBM_DB_"


class SoftModeSettings(BaseSettings):
    """软模式（审计字段 + 软删除）配置

    环境变量:
        YDBM_SOFT_ENABLED=false
        YDBM_SOFT_DEFAULT_ACTOR=system
    """
    enabled: bool = Field(default=True, description="是否启用软模式")
    default_actor: Union[int, str] = Field(default="", description="未传入操作人时写入的默认操作人")
    forbidden_columns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FORBIDDEN_COLUMNS),
        description="软模式下调用方不允许直接写入的审计字段",
    )

    class Config:
        env_prefix = "YDBM_SOFT_"


class PaginationSettings(BaseSettings):
    """分页配置

    使用示例:
        from ydbm.config import PaginationSettings

        page_config = PaginationSettings(max_per_page=500)
    """
    default_per_page: int = Field(default=20, description="默认每页条数")
    max_per_page: int = Field(default=1000, description="每页最大条数，超出时截断")
    window: int = Field(default=10, description="页码窗口宽度")

    class Config:
        env_prefix = "YDBM_PAGE_"


class LoggingSettings(BaseSettings):
    """日志配置

    使用示例:
        from ydbm.config import LoggingSettings

        log_config = LoggingSettings(level="DEBUG", file_path="logs/dbm.log")

        # 获取解析后的字节数
        max_bytes = log_config.parsed_file_max_bytes
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空时不写文件")
    file_max_bytes: str = Field(default="10MB", description="单个日志文件最大大小")
    file_backup_count: int = Field(default=5, description="保留的备份文件数量")
    file_encoding: str = Field(default="utf-8", description="文件编码")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")

    # SQL 日志配置
    sql_log_enabled: bool = Field(default=False, description="是否启用SQL日志")
    sql_log_file_path: str = Field(default="", description="SQL日志文件路径")
    sql_log_level: str = Field(default="DEBUG", description="SQL日志级别")

    @computed_field
    @property
    def parsed_file_max_bytes(self) -> int:
        """解析文件最大字节数字符串为整数"""
        return parse_file_size(self.file_max_bytes)

    class Config:
        env_prefix = "YDBM_LOG_"


class DBManagerSettings(BaseSettings):
    """DBManager 聚合配置

    内置子配置及环境变量前缀:
        - database:   DatabaseSettings   (YDBM_DB_)
        - soft_mode:  SoftModeSettings   (YDBM_SOFT_)
        - pagination: PaginationSettings (YDBM_PAGE_)
        - logging:    LoggingSettings    (YDBM_LOG_)

    使用示例:
        from ydbm import DBManager
        from ydbm.config import DBManagerSettings, load_yaml_config

        settings = load_yaml_config("config/dbm.yaml", DBManagerSettings)
        db = DBManager.from_settings(settings)

    YAML 配置示例 (config/dbm.yaml):
        debug: false
        database:
          url: "sqlite:///./app.db"
        soft_mode:
          enabled: true
          default_actor: "system"
        pagination:
          default_per_page: 20
    """
    database: DatabaseSettings = DatabaseSettings()
    soft_mode: SoftModeSettings = SoftModeSettings()
    pagination: PaginationSettings = PaginationSettings()
    logging: LoggingSettings = LoggingSettings()

    debug: bool = Field(default=False, description="调试模式：错误信息包含SQL、参数和调用位置")
    history_capacity: int = Field(default=20, description="查询历史容量，达到后清空")
    id_column: str = Field(default="ID", description="主键列名")

    class Config:
        env_prefix = "YDBM_"
