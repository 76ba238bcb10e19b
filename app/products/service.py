"""商品服务"""

from typing import List

from loguru import logger as loguru_logger

from modboot.data import Repository
from modboot.web import NotFoundError

from .dtos import CreateProductDto, UpdateProductDto
from .entity import Product

logger = loguru_logger.bind(name=__name__)


class ProductsService:
    """商品增删改查"""

    def __init__(self, products_repository: Repository[Product]):
        self.products_repository = products_repository

    def create(self, dto: CreateProductDto) -> Product:
        product = self.products_repository.create(**dto.model_dump())
        product = self.products_repository.save(product)
        logger.info(f"已创建商品: {product.id} {product.title}")
        return product

    def get_all(self) -> List[Product]:
        return self.products_repository.find()

    def get_one(self, id: int) -> Product:
        """
        按主键获取商品

        Raises:
            NotFoundError: 商品不存在
        """
        product = self.products_repository.find_one(id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def update(self, id: int, dto: UpdateProductDto) -> Product:
        product = self.get_one(id)
        for field, value in dto.model_dump(exclude_unset=True).items():
            setattr(product, field, value)
        return self.products_repository.save(product)

    def remove(self, id: int) -> dict:
        product = self.get_one(id)
        self.products_repository.remove(product)
        logger.info(f"已删除商品: {id}")
        return {"message": "Product has been deleted successfully"}
