from .entity import Review
from .module import ReviewsModule
from .service import ReviewsService

__all__ = ["Review", "ReviewsModule", "ReviewsService"]
