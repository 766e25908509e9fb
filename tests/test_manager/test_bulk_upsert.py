"""批量插入与 upsert 测试"""

import pytest

from ydbm import DBManager
from ydbm.exceptions import ErrorCode, ExecutionError, ValidationException

from tests.helpers import RecordingDriver


class TestInsertBulk:
    """批量插入"""

    def test_chunks_share_one_transaction(self, recorded_dbm, recording_driver):
        rows = [{"Name": name} for name in "ABCDE"]
        total = recorded_dbm.table("Author").insert_bulk(rows, chunk_size=2)

        assert total == 3  # 假驱动每条语句报告 1 行
        inserts = [s for s in recording_driver.statements if s.startswith("INSERT")]
        assert recording_driver.statements[0] == "BEGIN"
        assert recording_driver.statements[-1] == "COMMIT"
        assert len(inserts) == 3
        assert inserts[0] == (
            'INSERT INTO "Author" ("Name", "created_at", "created_by") VALUES '
            "(:r0_Name, :r0_created_at, :r0_created_by), (:r1_Name, :r1_created_at, :r1_created_by)"
        )

    def test_nested_bulk_uses_savepoint(self, recorded_dbm, recording_driver):
        recorded_dbm.table("Author").begin_transaction()
        recorded_dbm.insert_bulk([{"Name": "A"}], chunk_size=10)
        assert recording_driver.statements[1] == "SAVEPOINT sp_1"
        assert recording_driver.statements[-1] == "RELEASE SAVEPOINT sp_1"
        assert recorded_dbm.get_transaction_level() == 1

    def test_sqlite_rows_and_audit(self, dbm):
        rows = [{"Name": f"Author {i}"} for i in range(7)]
        assert dbm.table("Author").insert_bulk(rows, chunk_size=3, actor="loader") == 7

        stored = dbm.find_all(order_by="ID")
        assert len(stored) == 7
        assert {r["created_by"] for r in stored} == {"loader"}

    def test_failed_chunk_rolls_back_all(self, dbm):
        """测试后面的分块失败时，前面已写入的分块也被回滚"""
        rows = [{"Name": name} for name in ("A", "B", "C", "D", "A")]
        with pytest.raises(ExecutionError):
            dbm.table("Author").insert_bulk(rows, chunk_size=2)

        assert dbm.count() == 0
        assert dbm.in_transaction() is False

    def test_mismatched_keys(self, recorded_dbm, recording_driver):
        with pytest.raises(ValidationException) as exc_info:
            recorded_dbm.table("Author").insert_bulk([{"Name": "A"}, {"Title": "B"}], chunk_size=2)
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER
        assert recording_driver.statements == []

    def test_forbidden_column(self, recorded_dbm, recording_driver):
        with pytest.raises(ValidationException):
            recorded_dbm.table("Author").insert_bulk([{"Name": "A", "deleted": "NO"}], chunk_size=1)
        assert recording_driver.statements == []

    @pytest.mark.parametrize("chunk_size", [0, -1, "2", True])
    def test_invalid_chunk_size(self, recorded_dbm, chunk_size):
        with pytest.raises(ValidationException):
            recorded_dbm.table("Author").insert_bulk([{"Name": "A"}], chunk_size=chunk_size)

    def test_empty_rows(self, recorded_dbm, recording_driver):
        assert recorded_dbm.table("Author").insert_bulk([], chunk_size=5) == 0
        assert recording_driver.statements == []


class TestUpsert:
    """upsert（SQLite）"""

    def test_insert_then_update(self, dbm):
        dbm.table("Author")
        new_id = dbm.upsert({"Name": "A", "Birthdate": "1900-01-01"})
        assert dbm.get_by_id(new_id)["Name"] == "A"

        assert dbm.upsert({"ID": new_id, "Name": "A2"}, actor="editor") == new_id
        row = dbm.get_by_id(new_id)
        assert row["Name"] == "A2"
        assert row["updated_by"] == "editor"
        assert row["updated_at"] == "2024-05-01 12:30:45"
        assert row["created_by"] == "system"
        assert dbm.count() == 1

    def test_soft_deleted_row_not_updated(self, dbm):
        """测试冲突行已软删除时 upsert 不修改该行"""
        dbm.table("Author")
        author_id = dbm.insert({"Name": "A"})
        dbm.delete(author_id)

        assert dbm.upsert({"ID": author_id, "Name": "Changed"}) == author_id

        row = dbm.select("Name, deleted, updated_at").include_deleted().where(author_id).execute().fetch()
        assert row == {"Name": "A", "deleted": "YES", "updated_at": None}

    def test_conflict_on_unique_column(self, plain_dbm):
        plain_dbm.table("Author").insert({"Name": "A", "Birthdate": "1900"})
        plain_dbm.upsert({"Name": "A", "Birthdate": "1901"}, conflict_columns=["Name"])

        assert plain_dbm.find_all(fields="Name, Birthdate") == [{"Name": "A", "Birthdate": "1901"}]

    def test_mysql_without_update_columns(self):
        driver = RecordingDriver(dialect_name="mysql")
        db = DBManager(driver, soft_mode=False)
        db.table("Author").upsert({"ID": 3})
        assert driver.statements == ['INSERT INTO "Author" ("ID") VALUES (:ID) ON DUPLICATE KEY UPDATE "ID" = "ID"']
