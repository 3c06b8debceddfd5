"""UserService -- 用户业务逻辑

创建请求不允许携带 id：标识只由持久化层在首次写入时分配。
"""

import structlog
from taskboard.core.exceptions import MalformedRequestError, UserNotFoundError
from taskboard.core.models import User
from taskboard.core.store.protocols import UserPersistencePort

log = structlog.get_logger()


class UserService:
    """用户业务服务"""

    def __init__(self, persistence: UserPersistencePort) -> None:
        self._persistence = persistence

    async def clear(self) -> None:
        await self._persistence.clear()

    async def get_all(self) -> list[User]:
        return await self._persistence.get_all()

    async def get_by_id(self, user_id: str) -> User | None:
        return await self._persistence.get_by_id(user_id)

    async def create(self, user: User) -> User:
        """创建用户

        Raises:
            MalformedRequestError: 请求携带了 id
            DuplicateNameError: 用户名已存在
        """
        if user.id is not None:
            log.info("user_create_rejected", reason="id_supplied", user_id=user.id)
            raise MalformedRequestError("User ID must not be set.")
        return await self._persistence.upsert(user)

    async def update(self, user_id: str, name: str) -> User:
        """更新用户名

        Raises:
            UserNotFoundError: 用户不存在
        """
        existing = await self._persistence.get_by_id(user_id)
        if existing is None:
            raise UserNotFoundError(user_id)
        return await self._persistence.upsert(existing.model_copy(update={"name": name}))

    async def delete(self, user_id: str) -> None:
        await self._persistence.delete(user_id)
