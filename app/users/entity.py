"""用户实体"""

from enum import Enum
from typing import Optional

from pydantic import Field

from modboot.data import BaseEntity


class UserType(str, Enum):
    ADMIN = "admin"
    NORMAL_USER = "normal_user"


class User(BaseEntity):
    table_name = "users"
    unique_fields = ("email",)

    username: Optional[str] = None
    email: str
    # 只保存哈希，序列化时排除
    password: str = Field(exclude=True)
    user_type: UserType = UserType.NORMAL_USER
    is_account_verified: bool = False
