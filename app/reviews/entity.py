"""评论实体"""

from typing import Optional

from pydantic import Field

from modboot.data import BaseEntity


class Review(BaseEntity):
    table_name = "reviews"

    rating: int = Field(ge=1, le=5)
    comment: str
    user_id: int
    product_id: Optional[int] = None
