"""嵌套事务演示

外层事务中插入 A，内层（保存点）插入 B 后回滚，外层提交：A 保留，B 被撤销。
"""

from ydbm import DBManager
from ydbm.exceptions import ExecutionError


def list_names(db):
    return db.query("SELECT Name FROM Account ORDER BY ID").fetch_all_one()


def main():
    db = DBManager.from_url("sqlite://", soft_mode=False, debug=True)
    db.query("CREATE TABLE Account (ID INTEGER PRIMARY KEY AUTOINCREMENT, Name VARCHAR(50) UNIQUE)")
    db.table("Account")

    print("=== 手动控制 ===")
    db.begin_transaction()
    db.insert({"Name": "A"})
    db.begin_transaction()                      # SAVEPOINT sp_1
    db.insert({"Name": "B"})
    print(f"当前层级: {db.get_transaction_level()}")
    db.rollback()                               # ROLLBACK TO SAVEPOINT sp_1
    db.commit()                                 # COMMIT
    print(f"结果: {list_names(db)}")

    print("\n=== 回调 ===")

    def add_pair(tx):
        tx.insert({"Name": "C"})
        tx.insert({"Name": "A"})                # 唯一约束冲突

    outcome = db.safe_transaction(add_pair)
    print(f"success={outcome.success}, 结果: {list_names(db)}")
    if isinstance(outcome.error, ExecutionError):
        print(outcome.error.describe())

    print("\n=== 装饰器 ===")

    @db.transactional
    def rename(old, new):
        return db.update({"Name": new}, ("Name = :old", {"old": old}))

    print(f"更新行数: {rename('A', 'A2')}, 结果: {list_names(db)}")

    db.close()


if __name__ == "__main__":
    main()
