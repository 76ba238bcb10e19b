"""
工具函数模块

包含工具函数和公共模块
"""

from .common import (
    validate_email,
    hash_password,
    verify_password,
    get_local_ip
)

__all__ = [
    "validate_email",
    "hash_password",
    "verify_password",
    "get_local_ip",
]
