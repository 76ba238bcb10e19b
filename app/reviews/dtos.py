"""评论请求 DTO"""

from typing import Optional

from pydantic import Field

from modboot.web import RequestDto


class CreateReviewDto(RequestDto):
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    product_id: Optional[int] = None
