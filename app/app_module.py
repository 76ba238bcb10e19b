"""根模块"""

from modboot.core import ConfigModule
from modboot.core.di import ModuleDescriptor
from modboot.data import DatabaseModule

from .products import ProductsModule
from .reviews import ReviewsModule
from .users import UsersModule

AppModule = ModuleDescriptor(
    "AppModule",
    imports=[
        ProductsModule,
        UsersModule,
        ReviewsModule,
        ConfigModule.for_root(),
        DatabaseModule.for_root(),
    ],
)
