"""评论服务"""

from typing import TYPE_CHECKING, List

from loguru import logger as loguru_logger

from modboot.data import Repository

from .dtos import CreateReviewDto
from .entity import Review

if TYPE_CHECKING:
    from ..users.service import UsersService

logger = loguru_logger.bind(name=__name__)


class ReviewsService:

    def __init__(self, reviews_repository: Repository[Review], users_service: 'UsersService'):
        self.reviews_repository = reviews_repository
        self.users_service = users_service

    def get_all(self) -> List[Review]:
        return self.reviews_repository.find()

    def create(self, user_id: int, dto: CreateReviewDto) -> Review:
        """
        为用户创建评论

        Raises:
            NotFoundError: 用户不存在
        """
        user = self.users_service.get_one(user_id)
        review = self.reviews_repository.create(user_id=user.id, **dto.model_dump())
        review = self.reviews_repository.save(review)
        logger.info(f"用户 {user.id} 创建了评论 {review.id}")
        return review

    def get_by_user(self, user_id: int) -> List[Review]:
        return self.reviews_repository.find({'user_id': user_id})
