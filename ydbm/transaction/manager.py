"""事务管理器

用一个嵌套深度计数器在单连接上模拟嵌套事务：

    深度 0 -> 1   BEGIN
    深度 n -> n+1 SAVEPOINT sp_n
    深度 n+1 -> n RELEASE SAVEPOINT sp_n      （n == 0 时为 COMMIT）
    深度 n+1 -> n ROLLBACK TO SAVEPOINT sp_n  （n == 0 时为 ROLLBACK）

深度计数器是事务状态的唯一来源，门面层和驱动都不另外维护嵌套状态。
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Generator, Generic, Optional, TypeVar

from ..driver import DriverAdapter
from ..log import get_logger

logger = get_logger("transaction")

T = TypeVar("T")


def savepoint_name(depth: int) -> str:
    """深度对应的保存点名称"""
    return f"sp_{depth}"


@dataclass
class TransactionOutcome(Generic[T]):
    """safe_transaction 的执行结果

    属性:
        success: 是否成功提交
        value: 回调返回值（失败时为 None）
        error: 失败原因（成功时为 None）

    使用示例:
        outcome = db.safe_transaction(lambda db: db.insert({"Name": "A"}))
        if outcome:
            new_id = outcome.value
        else:
            logger.warning(f"写入失败: {outcome.error}")
    """
    success: bool
    value: Optional[T] = None
    error: Optional[BaseException] = None

    def __bool__(self) -> bool:
        return self.success


class TransactionManager:
    """嵌套事务管理器

    Args:
        driver: 驱动适配器
        owner: 传给事务回调的对象（通常是 DBManager），默认是管理器自身

    使用示例:
        tm = TransactionManager(driver)

        tm.begin()                 # BEGIN
        tm.begin()                 # SAVEPOINT sp_1
        tm.rollback()              # ROLLBACK TO SAVEPOINT sp_1
        tm.commit()                # COMMIT

        tm.run(lambda owner: ...)  # 自动 begin/commit，异常时回滚本层
    """

    def __init__(self, driver: DriverAdapter, owner: Any = None):
        self._driver = driver
        self._owner = owner
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def level(self) -> int:
        return self._depth

    def get_transaction_level(self) -> int:
        return self._depth

    @property
    def in_transaction(self) -> bool:
        return self._depth > 0

    # ==================== 状态转换 ====================

    def begin(self) -> None:
        """开启事务或创建保存点

        驱动调用成功后深度才加一，失败时深度不变。
        """
        if self._depth == 0:
            self._driver.begin_transaction()
            logger.debug("事务开始: BEGIN")
        else:
            name = savepoint_name(self._depth)
            self._driver.exec_raw(f"SAVEPOINT {name}")
            logger.debug(f"创建保存点: {name}")
        self._depth += 1

    def commit(self) -> None:
        """提交当前层

        深度为 0 时什么都不做。驱动调用失败时恢复原深度并抛出异常。
        """
        if self._depth <= 0:
            return

        previous = self._depth
        self._depth -= 1
        try:
            if self._depth == 0:
                self._driver.commit()
                logger.debug("事务提交: COMMIT")
            else:
                name = savepoint_name(self._depth)
                self._driver.exec_raw(f"RELEASE SAVEPOINT {name}")
                logger.debug(f"释放保存点: {name}")
        except Exception:
            self._depth = previous
            raise

    def rollback(self) -> None:
        """回滚当前层

        深度为 0 时什么都不做。驱动调用失败时该层视为已放弃，深度保持减一后的值。
        """
        if self._depth <= 0:
            return

        self._depth -= 1
        if self._depth == 0:
            self._driver.rollback()
            logger.debug("事务回滚: ROLLBACK")
        else:
            name = savepoint_name(self._depth)
            self._driver.exec_raw(f"ROLLBACK TO SAVEPOINT {name}")
            logger.debug(f"回滚到保存点: {name}")

    # ==================== 作用域执行 ====================

    def _callback_arg(self) -> Any:
        return self if self._owner is None else self._owner

    def run(self, callback: Callable[[Any], T]) -> T:
        """在新的一层事务中执行回调

        回调或提交失败时只回滚本层，然后原样抛出原始异常。
        回滚本身再失败时记录日志，仍抛出原始异常。
        """
        self.begin()
        try:
            result = callback(self._callback_arg())
            self.commit()
        except Exception as exc:
            try:
                self.rollback()
            except Exception as rollback_exc:
                logger.error(f"回滚失败: {rollback_exc!r}（原始错误: {exc!r}）")
            raise
        return result

    def run_safe(self, callback: Callable[[Any], T]) -> TransactionOutcome[T]:
        """同 run，但把异常转换为失败的 TransactionOutcome"""
        try:
            return TransactionOutcome(success=True, value=self.run(callback))
        except Exception as exc:
            logger.warning(f"事务执行失败: {exc!r}")
            return TransactionOutcome(success=False, error=exc)

    @contextmanager
    def scope(self) -> Generator[Any, None, None]:
        """事务上下文管理器

        使用示例:
            with tm.scope() as db:
                db.insert({"Name": "A"})
        """
        self.begin()
        try:
            yield self._callback_arg()
        except Exception as exc:
            try:
                self.rollback()
            except Exception as rollback_exc:
                logger.error(f"回滚失败: {rollback_exc!r}（原始错误: {exc!r}）")
            raise
        self.commit()

    def transactional(self, func: Optional[Callable[..., T]] = None):
        """事务装饰器

        被装饰函数按原参数调用，整体在一层事务中执行。

        使用示例:
            @db.transactional
            def transfer(src, dst, amount):
                db.update({"Balance": ...}, src)
                db.update({"Balance": ...}, dst)

            @db.transactional()
            def create_order(data):
                return db.insert(data)
        """
        def decorator(fn: Callable[..., T]) -> Callable[..., T]:
            @wraps(fn)
            def wrapper(*args, **kwargs) -> T:
                return self.run(lambda _owner: fn(*args, **kwargs))
            return wrapper

        if func is not None:
            return decorator(func)
        return decorator
