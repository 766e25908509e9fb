"""配置类测试"""

import pytest

from ydbm.config import (
    DEFAULT_FORBIDDEN_COLUMNS,
    DBManagerSettings,
    DatabaseSettings,
    LoggingSettings,
    PaginationSettings,
    SoftModeSettings,
)


class TestDefaults:

    def test_soft_mode_defaults(self):
        settings = SoftModeSettings()
        assert settings.enabled is True
        assert set(settings.forbidden_columns) == set(DEFAULT_FORBIDDEN_COLUMNS)

    def test_pagination_defaults(self):
        settings = PaginationSettings()
        assert (settings.default_per_page, settings.max_per_page, settings.window) == (20, 1000, 10)

    def test_manager_defaults(self):
        settings = DBManagerSettings()
        assert settings.id_column == "ID"
        assert settings.history_capacity == 20


class TestEnvironment:
    """环境变量前缀"""

    def test_database_env(self, monkeypatch):
        monkeypatch.setenv("YDBM_DB_URL", "sqlite://")
        monkeypatch.setenv("YDBM_DB_PORT", "3307")
        settings = DatabaseSettings()
        assert settings.url == "sqlite://"
        assert settings.port == 3307

    def test_soft_mode_env(self, monkeypatch):
        monkeypatch.setenv("YDBM_SOFT_ENABLED", "false")
        monkeypatch.setenv("YDBM_SOFT_DEFAULT_ACTOR", "robot")
        settings = SoftModeSettings()
        assert settings.enabled is False
        assert settings.default_actor == "robot"

    def test_pagination_env(self, monkeypatch):
        monkeypatch.setenv("YDBM_PAGE_MAX_PER_PAGE", "50")
        assert PaginationSettings().max_per_page == 50

    def test_top_level_env(self, monkeypatch):
        monkeypatch.setenv("YDBM_DEBUG", "true")
        monkeypatch.setenv("YDBM_ID_COLUMN", "id")
        settings = DBManagerSettings()
        assert settings.debug is True
        assert settings.id_column == "id"


class TestLoggingSettings:

    @pytest.mark.parametrize("raw,expected", [
        ("10MB", 10 * 1024 * 1024),
        ("512KB", 512 * 1024),
        ("1.5GB", int(1.5 * 1024 ** 3)),
    ])
    def test_parsed_file_max_bytes(self, raw, expected):
        assert LoggingSettings(file_max_bytes=raw).parsed_file_max_bytes == expected

    def test_env_file_max_bytes(self, monkeypatch):
        monkeypatch.setenv("YDBM_LOG_FILE_MAX_BYTES", "5MB")
        assert LoggingSettings().parsed_file_max_bytes == 5 * 1024 * 1024

    def test_sql_log_disabled_by_default(self):
        assert LoggingSettings().sql_log_enabled is False
