"""
实体基类

实体为 pydantic 模型，主键与时间戳由仓储在保存时维护
"""

from datetime import datetime
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class BaseEntity(BaseModel):
    """实体基类"""

    model_config = ConfigDict(validate_assignment=True)

    table_name: ClassVar[str] = ""
    # 取值必须在表内唯一的字段
    unique_fields: ClassVar[Tuple[str, ...]] = ()

    id: Optional[int] = Field(default=None, description="主键")
    created_at: Optional[datetime] = Field(default=None, description="创建时间")
    updated_at: Optional[datetime] = Field(default=None, description="更新时间")

    @classmethod
    def get_table_name(cls) -> str:
        return cls.table_name or f"{cls.__name__.lower()}s"
