"""审计字段重写器测试"""

from datetime import datetime

import pytest

from ydbm.exceptions import ErrorCode, ValidationException
from ydbm.soft_mode import AuditRewriter, SoftModeConfig


NOW = datetime(2024, 1, 2, 3, 4, 5, 999999)


@pytest.fixture
def rewriter():
    return AuditRewriter(SoftModeConfig(default_actor="system"), clock=lambda: NOW)


class TestInsertRewrite:
    """INSERT 重写测试"""

    def test_injects_created_fields(self, rewriter):
        """测试注入 created_at / created_by"""
        payload = rewriter.rewrite_insert({"Name": "A"}, actor=7)
        assert payload == {"Name": "A", "created_at": "2024-01-02 03:04:05", "created_by": 7}

    @pytest.mark.parametrize("actor", [None, ""])
    def test_empty_actor_falls_back_to_default(self, rewriter, actor):
        """测试未提供操作人时使用默认操作人"""
        assert rewriter.rewrite_insert({"Name": "A"}, actor=actor)["created_by"] == "system"

    def test_zero_actor_is_kept(self, rewriter):
        """测试操作人为 0 时不回退"""
        assert rewriter.rewrite_insert({"Name": "A"}, actor=0)["created_by"] == 0

    @pytest.mark.parametrize("column", [
        "deleted", "created_at", "created_by", "updated_at", "updated_by", "deleted_at", "deleted_by",
    ])
    def test_rejects_forbidden_columns(self, rewriter, column):
        """测试拒绝所有审计字段"""
        with pytest.raises(ValidationException) as exc_info:
            rewriter.rewrite_insert({"Name": "A", column: "x"})
        assert exc_info.value.code == ErrorCode.FORBIDDEN_COLUMN
        assert exc_info.value.extra["column"] == column
        assert str(exc_info.value) == f"`{column}` is forbidden"

    def test_input_not_mutated(self, rewriter):
        """测试不修改调用方的字典"""
        row = {"Name": "A"}
        rewriter.rewrite_insert(row)
        assert row == {"Name": "A"}

    def test_disabled_passthrough(self):
        """测试关闭软模式时原样返回"""
        rewriter = AuditRewriter(SoftModeConfig(enabled=False))
        row = {"Name": "A", "created_at": "anything"}
        payload = rewriter.rewrite_insert(row)
        assert payload == row
        assert payload is not row


class TestUpdateRewrite:
    """UPDATE 重写测试"""

    def test_injects_updated_fields(self, rewriter):
        """测试注入 updated_at / updated_by"""
        payload = rewriter.rewrite_update({"Name": "B"})
        assert payload == {"Name": "B", "updated_at": "2024-01-02 03:04:05", "updated_by": "system"}

    def test_user_update_cannot_write_deleted(self, rewriter):
        """测试普通更新不能写 deleted"""
        with pytest.raises(ValidationException):
            rewriter.rewrite_update({"deleted": "YES"})

    def test_delete_path_permits_delete_columns(self, rewriter):
        """测试删除路径允许写入删除字段且不注入 updated_*"""
        payload = rewriter.rewrite_update(rewriter.delete_payload(actor=9), from_delete=True)
        assert payload == {"deleted": "YES", "deleted_at": "2024-01-02 03:04:05", "deleted_by": 9}

    def test_delete_path_still_rejects_created_at(self, rewriter):
        """测试删除路径仍然拒绝其他审计字段"""
        with pytest.raises(ValidationException):
            rewriter.rewrite_update({"deleted": "YES", "created_at": "x"}, from_delete=True)

    def test_from_delete_is_keyword_only(self, rewriter):
        """测试 from_delete 只能以关键字传入"""
        with pytest.raises(TypeError):
            rewriter.rewrite_update({"Name": "B"}, None, True)


class TestDeletePayload:
    """软删除字段测试"""

    def test_delete_payload_default_actor(self, rewriter):
        assert rewriter.delete_payload() == {
            "deleted": "YES",
            "deleted_at": "2024-01-02 03:04:05",
            "deleted_by": "system",
        }

    def test_soft_predicate(self, rewriter):
        """测试未删除过滤条件"""
        assert rewriter.soft_predicate() == "deleted = 'NO'"
        assert rewriter.soft_predicate(lambda name: f"`{name}`") == "`deleted` = 'NO'"

    def test_custom_forbidden_columns(self):
        """测试自定义禁止字段"""
        rewriter = AuditRewriter(SoftModeConfig(forbidden_columns=frozenset({"secret"})))
        rewriter.rewrite_insert({"created_at": "allowed now"})
        with pytest.raises(ValidationException):
            rewriter.rewrite_insert({"secret": 1})
