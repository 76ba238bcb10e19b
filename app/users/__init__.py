from .entity import User, UserType
from .module import UsersModule
from .service import UsersService

__all__ = ["User", "UserType", "UsersModule", "UsersService"]
