"""商品模块"""

from modboot.core.di import ControllerDescriptor, ModuleDescriptor, Provider
from modboot.data import DatabaseModule, repository_token

from ..users.module import UsersModule
from .controller import ProductsController
from .entity import Product
from .service import ProductsService

ProductsModule = ModuleDescriptor(
    "ProductsModule",
    imports=[UsersModule, DatabaseModule.for_feature(Product)],
    providers=[Provider(ProductsService, deps=[repository_token(Product)])],
    controllers=[ControllerDescriptor(ProductsController, deps=[ProductsService])],
)
