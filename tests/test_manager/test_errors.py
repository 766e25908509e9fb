"""错误边界测试

调试模式关闭时对外只暴露统一消息；开启时带上 SQL、脱敏后的参数和调用位置。
"""

import logging
import os

import pytest

from ydbm.exceptions import (
    ErrorCode,
    ExecutionError,
    GENERIC_ERROR_MESSAGE,
    ValidationException,
)
from ydbm.log import FILTERED_PLACEHOLDER

THIS_FILE = os.path.abspath(__file__)


def _dbm_errors(caplog):
    return [r for r in caplog.records if r.levelno == logging.ERROR and "DBM Error" in r.getMessage()]


class TestDebugOff:
    """非调试模式"""

    def test_generic_message(self, dbm):
        dbm.table("Author").insert({"Name": "A"})
        with pytest.raises(ExecutionError) as exc_info:
            dbm.insert({"Name": "A"})

        error = exc_info.value
        assert error.message == GENERIC_ERROR_MESSAGE
        assert error.sql is None
        assert error.params is None
        assert error.__cause__ is None
        assert error.__suppress_context__ is True

    def test_details_are_logged(self, dbm, caplog):
        caplog.set_level(logging.ERROR)
        with pytest.raises(ExecutionError):
            dbm.query("SELECT * FROM missing_table")

        records = _dbm_errors(caplog)
        assert len(records) == 1
        assert "SELECT * FROM missing_table" in records[0].getMessage()

    def test_validation_errors_pass_through(self, dbm):
        with pytest.raises(ValidationException) as exc_info:
            dbm.table("Author").update({"deleted": "YES"}, 1)
        assert exc_info.value.code == ErrorCode.FORBIDDEN_COLUMN


class TestDebugOn:
    """调试模式"""

    def test_detailed_error(self, dbm):
        dbm.set_debug(True).table("Author").insert({"Name": "A"})
        with pytest.raises(ExecutionError) as exc_info:
            dbm.insert({"Name": "A"})

        error = exc_info.value
        assert error.message != GENERIC_ERROR_MESSAGE
        assert "UNIQUE" in error.message
        assert error.sql.startswith('INSERT INTO "Author"')
        assert error.params["Name"] == "A"
        assert error.caller[0] == THIS_FILE
        assert isinstance(error.__cause__, ExecutionError)

    def test_params_are_masked(self, dbm):
        dbm.set_debug(True)
        with pytest.raises(ExecutionError) as exc_info:
            dbm.query("SELECT * FROM missing_table WHERE password = :password", {"password": "hunter2"})
        assert exc_info.value.params == {"password": FILTERED_PLACEHOLDER}
        assert "hunter2" not in exc_info.value.describe()

    def test_describe_mentions_caller(self, dbm):
        dbm.set_debug(True)
        with pytest.raises(ExecutionError) as exc_info:
            dbm.query("SELECT * FROM missing_table")
        assert f"file `{THIS_FILE}` on line" in exc_info.value.describe()


class TestNestedConversion:
    """嵌套调用只在最外层转换一次"""

    def test_transaction_converts_once(self, dbm, caplog):
        caplog.set_level(logging.ERROR)
        dbm.table("Author").insert({"Name": "A"})

        def callback(db):
            db.insert({"Name": "B"})
            db.insert({"Name": "A"})

        with pytest.raises(ExecutionError) as exc_info:
            dbm.transaction(callback)

        assert exc_info.value.message == GENERIC_ERROR_MESSAGE
        assert len(_dbm_errors(caplog)) == 1
        assert dbm.count() == 1

    def test_nested_debug_error_keeps_driver_cause(self, dbm):
        dbm.set_debug(True).table("Author").insert({"Name": "A"})

        with pytest.raises(ExecutionError) as exc_info:
            dbm.transaction(lambda db: db.insert({"Name": "A"}))

        cause = exc_info.value.__cause__
        assert isinstance(cause, ExecutionError)
        assert cause.caller is None
        assert exc_info.value.caller[0] == THIS_FILE

    def test_safe_transaction_error_is_converted(self, dbm):
        dbm.table("Author").insert({"Name": "A"})
        outcome = dbm.safe_transaction(lambda db: db.insert({"Name": "A"}))

        assert outcome.success is False
        assert isinstance(outcome.error, ExecutionError)
        assert outcome.error.message == GENERIC_ERROR_MESSAGE

    def test_nested_safe_transaction_error_is_converted(self, dbm):
        """测试嵌套在事务中的 safe_transaction 也返回统一消息"""
        outcome = dbm.transaction(
            lambda db: db.safe_transaction(lambda inner: inner.query("SELECT * FROM NoSuchTable"))
        )

        assert outcome.success is False
        assert outcome.error.message == GENERIC_ERROR_MESSAGE
        assert outcome.error.sql is None
        assert dbm.in_transaction() is False

    def test_nested_safe_transaction_debug_details(self, dbm):
        dbm.set_debug(True)
        with dbm.transaction_scope():
            outcome = dbm.safe_transaction(lambda db: db.query("SELECT * FROM NoSuchTable"))

        assert "NoSuchTable" in outcome.error.message
        assert outcome.error.sql == "SELECT * FROM NoSuchTable"
        assert outcome.error.caller[0] == THIS_FILE

    def test_transaction_scope_error_is_converted(self, dbm):
        dbm.set_debug(True).table("Author").insert({"Name": "A"})
        with pytest.raises(ExecutionError) as exc_info:
            with dbm.transaction_scope():
                dbm.insert({"Name": "A"})
        assert exc_info.value.caller[0] == THIS_FILE
        assert dbm.in_transaction() is False
