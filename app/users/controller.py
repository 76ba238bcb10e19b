"""用户接口"""

from typing import List

from modboot.core.decorators import controller, get, post

from ..reviews.entity import Review
from .dtos import LoginDto, RegisterDto
from .service import UsersService


@controller('api/users', tags=['users'])
class UsersController:

    def __init__(self, users_service: UsersService):
        self.users_service = users_service

    @get('')
    def get_all_users(self):
        return self.users_service.get_all()

    @post('auth/register', status_code=201)
    def register(self, body: RegisterDto):
        """注册新用户"""
        return self.users_service.register(body)

    @post('auth/login')
    def login(self, body: LoginDto):
        return self.users_service.login(body)

    @get('{id}/reviews')
    def get_user_reviews(self, id: int) -> List[Review]:
        return self.users_service.get_user_reviews(id)
