"""
Web 模块

提供控制器路由挂载、请求 DTO 基类和 HTTP 异常
"""

from .exceptions import (
    HTTPException,
    BadRequestError,
    NotFoundError,
)
from .models import RequestDto, ErrorResponse, error_response
from .router import mount_controllers, join_path

__all__ = [
    "HTTPException",
    "BadRequestError",
    "NotFoundError",
    "RequestDto",
    "ErrorResponse",
    "error_response",
    "mount_controllers",
    "join_path",
]
