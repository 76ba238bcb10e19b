from .entity import Product
from .module import ProductsModule
from .service import ProductsService

__all__ = ["Product", "ProductsModule", "ProductsService"]
