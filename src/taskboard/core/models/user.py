"""User Domain Model"""

from typing import ClassVar

from pydantic import Field

from .identifiable import Identifiable


class User(Identifiable):
    """User 数据模型 -- name 在现存用户中唯一"""

    schema_version: ClassVar[int] = 1

    name: str = Field(description="用户名（单词字符组成）")
