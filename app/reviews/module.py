"""评论模块"""

from modboot.core.di import ControllerDescriptor, ModuleDescriptor, Provider, forward_ref
from modboot.data import DatabaseModule, repository_token

from .controller import ReviewsController
from .entity import Review
from .service import ReviewsService


def _users_module():
    from ..users.module import UsersModule
    return UsersModule


def _users_service():
    from ..users.service import UsersService
    return UsersService


ReviewsModule = ModuleDescriptor(
    "ReviewsModule",
    imports=[
        forward_ref(_users_module, "UsersModule"),
        DatabaseModule.for_feature(Review),
    ],
    providers=[
        Provider(
            ReviewsService,
            deps=[repository_token(Review), forward_ref(_users_service, "UsersService")]
        ),
    ],
    controllers=[ControllerDescriptor(ReviewsController, deps=[ReviewsService])],
    exports=[ReviewsService],
)
