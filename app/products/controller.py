"""商品接口"""

from typing import List

from modboot.core.decorators import controller, delete, get, post, put

from .dtos import CreateProductDto, UpdateProductDto
from .entity import Product
from .service import ProductsService


@controller('api/products', tags=['products'])
class ProductsController:

    def __init__(self, products_service: ProductsService):
        self.products_service = products_service

    @post('', status_code=201)
    def create_product(self, body: CreateProductDto) -> Product:
        """创建商品"""
        return self.products_service.create(body)

    @get('')
    def get_all_products(self) -> List[Product]:
        return self.products_service.get_all()

    @get('{id}')
    def get_product(self, id: int) -> Product:
        return self.products_service.get_one(id)

    @put('{id}')
    def update_product(self, id: int, body: UpdateProductDto) -> Product:
        return self.products_service.update(id, body)

    @delete('{id}')
    def delete_product(self, id: int) -> dict:
        return self.products_service.remove(id)
