"""软模式演示：审计字段、软删除、分页"""

from ydbm import DBManager
from ydbm.exceptions import ValidationException
from ydbm.log import setup_root_logger


def main():
    setup_root_logger(level="INFO")

    db = DBManager.from_url("sqlite://", default_actor="demo")
    db.query(
        "CREATE TABLE Author ("
        "ID INTEGER PRIMARY KEY AUTOINCREMENT, Name VARCHAR(100) NOT NULL, Birthdate VARCHAR(10))"
    )
    # 为已有表补齐 deleted / created_at / ... 字段
    for ddl in db.add_soft_mode_columns("Author"):
        print(f"[DDL] {ddl}")

    db.table("Author")
    hugo = db.insert({"Name": "Victor Hugo", "Birthdate": "1802-02-26"})
    zola = db.insert({"Name": "Emile Zola"}, actor="alice")
    db.insert_bulk([{"Name": f"Author {i}", "Birthdate": None} for i in range(25)], chunk_size=10)
    print(f"[OK] 插入完成: hugo={hugo}, zola={zola}, total={db.count()}")

    db.update({"Birthdate": "1840-04-02"}, zola, actor="bob")
    print(f"[OK] 更新后: {db.get_by_id(zola)}")

    db.delete(hugo, actor="carol")
    print(f"[OK] 软删除后 get_by_id -> {db.get_by_id(hugo)}")
    row = db.select("Name, deleted, deleted_by").include_deleted().where(hugo).execute().fetch()
    print(f"[OK] 数据仍在表中: {row}")

    try:
        db.insert({"Name": "X", "created_by": "mallory"})
    except ValidationException as e:
        print(f"[OK] 审计字段不允许直接写入: {e.message}")

    page = db.paginate("SELECT ID, Name FROM Author WHERE deleted = 'NO' ORDER BY ID", page=2, per_page=10)
    print(f"[OK] 第 {page.current_page}/{page.last_page} 页, {page.from_}-{page.to} of {page.total}")

    db.close()


if __name__ == "__main__":
    main()
