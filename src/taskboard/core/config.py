"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、日志模式、用户名校验规则等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKBOARD_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKBOARD_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskboard.db"),
    )


def get_log_format() -> str:
    """日志渲染模式：dev（默认）或 json"""
    return os.environ.get("TASKBOARD_LOG_FORMAT", "dev")


def get_log_level() -> str:
    """日志级别，默认 INFO"""
    return os.environ.get("TASKBOARD_LOG_LEVEL", "INFO")


# 用户名规则：非空、仅包含单词字符
USER_NAME_PATTERN: str = r"^\w+$"

# 任务标题最大长度
TASK_TITLE_MAX_LENGTH: int = int(
    os.environ.get("TASKBOARD_TASK_TITLE_MAX_LENGTH", "200")
)

# SQLite 写锁等待时间（毫秒）
SQLITE_BUSY_TIMEOUT_MS: int = int(
    os.environ.get("TASKBOARD_SQLITE_BUSY_TIMEOUT_MS", "5000")
)
