"""评论接口"""

from typing import List

from modboot.core.decorators import controller, get, post

from .dtos import CreateReviewDto
from .entity import Review
from .service import ReviewsService


@controller('api/reviews', tags=['reviews'])
class ReviewsController:

    def __init__(self, reviews_service: ReviewsService):
        self.reviews_service = reviews_service

    @get('')
    def get_all_reviews(self) -> List[Review]:
        return self.reviews_service.get_all()

    @post('{user_id}', status_code=201)
    def create_review(self, user_id: int, body: CreateReviewDto) -> Review:
        return self.reviews_service.create(user_id, body)
