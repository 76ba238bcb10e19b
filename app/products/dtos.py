"""商品请求 DTO"""

from typing import Optional

from pydantic import Field, field_validator

from modboot.web import RequestDto


class CreateProductDto(RequestDto):
    title: str = Field(min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, min_length=5)
    price: float = Field(ge=0, le=1000)


class UpdateProductDto(RequestDto):
    """部分更新，未出现的字段保持不变"""

    title: Optional[str] = Field(default=None, min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, min_length=5)
    price: Optional[float] = Field(default=None, ge=0, le=1000)

    @field_validator('title', 'price', mode='before')
    @classmethod
    def reject_null(cls, value):
        # 商品的标题和价格不可为空，只能省略
        if value is None:
            raise ValueError("must not be null")
        return value
