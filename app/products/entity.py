"""商品实体"""

from typing import Optional

from modboot.data import BaseEntity


class Product(BaseEntity):
    table_name = "products"

    title: str
    description: Optional[str] = None
    price: float
