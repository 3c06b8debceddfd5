"""User 持久化服务 -- 事件溯源实现

与 TaskPersistenceService 相同的写入协议，另加创建时的用户名唯一性校验。
更新路径不重新校验用户名唯一性。
"""

import structlog
from ulid import ULID

from ..exceptions import (
    ConsistencyViolationError,
    DuplicateNameError,
    UserNotFoundError,
)
from ..models.event import delete_event_of, insert_event_of, update_event_of
from ..models.user import User
from ..store import StoreGroup
from ..timeutil import utc_now

log = structlog.get_logger()


class UserPersistenceService:
    """业务层 User 持久化端口的事件溯源实现"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def get_all(self) -> list[User]:
        async with self._stores.read_scope("user.get_all"):
            return await self._stores.user_store.list_users()

    async def get_by_id(self, user_id: str) -> User | None:
        async with self._stores.read_scope("user.get_by_id"):
            return await self._stores.user_store.get_user(user_id)

    async def get_by_name(self, name: str) -> User | None:
        async with self._stores.read_scope("user.get_by_name"):
            return await self._stores.user_store.get_user_by_name(name)

    async def upsert(self, user: User, acting_user_id: str | None = None) -> User:
        """创建或更新用户

        Raises:
            DuplicateNameError: 创建时用户名已被占用（未发生任何写入）
            UserNotFoundError: 更新的 id 不存在（未发生任何写入）
            StorageFailureError: 存储失败（事务已回滚）
        """
        if user.id is None:
            return await self._insert(user, acting_user_id)
        return await self._update(user, acting_user_id)

    async def _insert(self, user: User, acting_user_id: str | None) -> User:
        user_store = self._stores.user_store

        async with self._stores.unit_of_work("user.insert"):
            # 在写锁内校验，并发创建同名用户时只有一个成功
            if await user_store.name_exists(user.name):
                raise DuplicateNameError(user.name)

            new_user = user.model_copy(update={"id": str(ULID()), "created_at": utc_now()})
            await user_store.create_user(new_user)
            persisted = await user_store.get_user(new_user.id)
            event = await self._stores.event_store.append_event(
                insert_event_of(persisted, acting_user_id)
            )

        log.info("user_inserted", user_id=persisted.id, event_id=event.event_id)
        return persisted

    async def _update(self, user: User, acting_user_id: str | None) -> User:
        user_store = self._stores.user_store

        async with self._stores.unit_of_work("user.update"):
            existing = await user_store.get_user(user.id)
            if existing is None:
                raise UserNotFoundError(user.id)

            # TODO: 新用户名未做唯一性校验，确定更新语义后补上 DuplicateNameError 检查
            changed = existing.model_copy(update={"name": user.name})
            await user_store.update_user(changed)
            persisted = await user_store.get_user(user.id)
            event = await self._stores.event_store.append_event(
                update_event_of(persisted, acting_user_id)
            )

        log.info("user_updated", user_id=persisted.id, event_id=event.event_id)
        return persisted

    async def delete(self, user_id: str, acting_user_id: str | None = None) -> None:
        """删除用户：DELETE 事件先于行删除，二者同一事务

        Raises:
            UserNotFoundError: 用户不存在（未追加事件）
            ConsistencyViolationError: 提交后用户行仍存在
        """
        user_store = self._stores.user_store

        async with self._stores.unit_of_work("user.delete"):
            existing = await user_store.get_user(user_id)
            if existing is None:
                raise UserNotFoundError(user_id)
            event = await self._stores.event_store.append_event(
                delete_event_of(existing, acting_user_id)
            )
            await user_store.delete_user(user_id)

        async with self._stores.read_scope("user.delete.verify"):
            still_exists = await user_store.user_exists(user_id)
        if still_exists:
            log.critical("user_delete_not_applied", user_id=user_id, event_id=event.event_id)
            raise ConsistencyViolationError(
                f"User with ID {user_id} was not successfully deleted."
            )

        log.info("user_deleted", user_id=user_id, event_id=event.event_id)

    async def clear(self) -> None:
        """删除全部用户，每个用户各追加一条 DELETE 事件

        Raises:
            ConsistencyViolationError: 提交后被清空的用户行仍存在
        """
        user_store = self._stores.user_store

        async with self._stores.unit_of_work("user.clear"):
            existing = await user_store.list_users()
            for user in existing:
                await self._stores.event_store.append_event(delete_event_of(user, None))
            await user_store.delete_all_users()

        # 只校验本次快照内的用户；锁释放后并发创建的新用户不属于本次清空
        cleared_ids = [user.id for user in existing]
        async with self._stores.read_scope("user.clear.verify"):
            remaining = [i for i in cleared_ids if await user_store.user_exists(i)]
        if remaining:
            log.critical("users_clear_not_applied", remaining=remaining)
            raise ConsistencyViolationError("Users not successfully deleted.")

        log.info("users_cleared", count=len(existing))
