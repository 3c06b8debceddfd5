"""时间工具 -- 统一 UTC 时间与数据库存储格式"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """返回带时区的 UTC 当前时间"""
    return datetime.now(UTC)


def to_db_ts(value: datetime) -> str:
    """序列化为定长 ISO 字符串（固定到微秒），保证字典序即时间序"""
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_ts(value: str) -> datetime:
    """从数据库字符串还原 datetime"""
    return datetime.fromisoformat(value)
