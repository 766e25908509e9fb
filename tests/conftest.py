"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 内存数据库引擎
- DBManager 实例（软模式 / 普通模式）
- 记录 SQL 的假驱动
"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from ydbm import DBManager

from tests.helpers import RecordingDriver, create_author_table

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 45, 123456)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def memory_engine():
    """创建内存数据库引擎

    使用 StaticPool 和 check_same_thread=False 确保所有操作使用同一个连接。
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def dbm(memory_engine):
    """软模式 DBManager，已创建 Author 表"""
    db = DBManager.from_engine(memory_engine, default_actor="system", clock=fixed_clock)
    create_author_table(db)
    yield db
    db.close()


@pytest.fixture
def plain_dbm(memory_engine):
    """普通模式 DBManager，已创建不含审计字段的 Author 表"""
    db = DBManager.from_engine(memory_engine, soft_mode=False, clock=fixed_clock)
    create_author_table(db, audit=False)
    yield db
    db.close()


@pytest.fixture
def recording_driver():
    return RecordingDriver()


@pytest.fixture
def recorded_dbm(recording_driver):
    """使用假驱动的 DBManager"""
    return DBManager(recording_driver, default_actor="system", clock=fixed_clock)
