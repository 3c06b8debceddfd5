"""Taskboard 异常体系

业务层可区分的错误类型。存储层原始异常（aiosqlite / sqlite3）
不跨越持久化边界，统一包装为 StorageFailureError。
"""


class TaskboardError(Exception):
    """Taskboard 基础异常"""

    def __init__(
        self,
        message: str,
        code: str = "TASKBOARD_ERROR",
        recoverable: bool = True,
    ) -> None:
        """
        Args:
            message: 错误描述
            code: 机器可读错误码（API 层直接透出）
            recoverable: 调用方是否可以修正请求后重试
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable


class MalformedRequestError(TaskboardError):
    """创建请求携带了 id（标识只能由存储层分配）"""

    def __init__(self, message: str) -> None:
        super().__init__(message, "MALFORMED_REQUEST")


class DuplicateNameError(TaskboardError):
    """用户名已被现存用户占用"""

    def __init__(self, name: str) -> None:
        super().__init__(f"User with name {name} already exists.", "DUPLICATE_NAME")
        self.name = name


class TaskNotFoundError(TaskboardError):
    """任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with ID {task_id} does not exist.", "TASK_NOT_FOUND")
        self.task_id = task_id


class UserNotFoundError(TaskboardError):
    """用户不存在"""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User with ID {user_id} does not exist.", "USER_NOT_FOUND")
        self.user_id = user_id


class StorageFailureError(TaskboardError):
    """底层存储无法完成读写，事务已整体回滚"""

    def __init__(self, operation: str, original_error: Exception) -> None:
        """
        Args:
            operation: 失败的操作名称
            original_error: 原始存储异常
        """
        super().__init__(
            f"Storage failure during {operation}: {original_error}",
            "STORAGE_FAILURE",
        )
        self.operation = operation
        self.original_error = original_error


class ConsistencyViolationError(TaskboardError):
    """事务提交后的后置校验失败

    表示写入路径存在缺陷，不可重试，不可吞掉。
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, "CONSISTENCY_VIOLATION", recoverable=False)
