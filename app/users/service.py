"""
用户服务

与评论服务互相依赖：评论服务以 forward_ref 注入，构造时拿到的是前向句柄，
首次访问其成员时才解析为真实实例。
"""

from typing import TYPE_CHECKING, List

from loguru import logger as loguru_logger

from modboot.data import Repository
from modboot.exceptions import DuplicateEntryError
from modboot.utils import hash_password, verify_password
from modboot.web import BadRequestError, NotFoundError

from .dtos import LoginDto, RegisterDto
from .entity import User

if TYPE_CHECKING:
    from ..reviews.entity import Review
    from ..reviews.service import ReviewsService

logger = loguru_logger.bind(name=__name__)


class UsersService:

    def __init__(self, users_repository: Repository[User], reviews_service: 'ReviewsService'):
        self.users_repository = users_repository
        self.reviews_service = reviews_service

    def register(self, dto: RegisterDto) -> User:
        """
        注册新用户

        Raises:
            BadRequestError: 邮箱已被注册
        """
        if self.users_repository.find_one_by(email=dto.email) is not None:
            raise BadRequestError("User already exists")

        user = self.users_repository.create(
            email=dto.email,
            username=dto.username,
            password=hash_password(dto.password),
        )
        try:
            user = self.users_repository.save(user)
        except DuplicateEntryError:
            # 并发注册时由仓储的唯一约束兜底
            raise BadRequestError("User already exists")
        logger.info(f"新用户注册: {user.id} {user.email}")
        return user

    def login(self, dto: LoginDto) -> User:
        """
        校验邮箱和密码

        Raises:
            BadRequestError: 邮箱或密码错误
        """
        user = self.users_repository.find_one_by(email=dto.email.lower())
        if user is None or not verify_password(dto.password, user.password):
            raise BadRequestError("Invalid email or password")
        return user

    def get_all(self) -> List[User]:
        return self.users_repository.find()

    def get_one(self, id: int) -> User:
        user = self.users_repository.find_one(id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_reviews(self, id: int) -> List['Review']:
        self.get_one(id)
        return self.reviews_service.get_by_user(id)
