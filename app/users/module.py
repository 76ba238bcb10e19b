"""用户模块"""

from modboot.core.di import ControllerDescriptor, ModuleDescriptor, Provider, forward_ref
from modboot.data import DatabaseModule, repository_token

from .controller import UsersController
from .entity import User
from .service import UsersService


# 评论模块反过来也导入用户模块，延迟到求值时再导入
def _reviews_module():
    from ..reviews.module import ReviewsModule
    return ReviewsModule


def _reviews_service():
    from ..reviews.service import ReviewsService
    return ReviewsService


UsersModule = ModuleDescriptor(
    "UsersModule",
    imports=[
        forward_ref(_reviews_module, "ReviewsModule"),
        DatabaseModule.for_feature(User),
    ],
    providers=[
        Provider(
            UsersService,
            deps=[repository_token(User), forward_ref(_reviews_service, "ReviewsService")]
        ),
    ],
    controllers=[ControllerDescriptor(UsersController, deps=[UsersService])],
    exports=[UsersService],
)
