"""
公共工具函数

包含网络、校验和密码哈希等辅助方法
"""

import hashlib
import re
import secrets
import socket

from loguru import logger as loguru_logger

logger = loguru_logger.bind(name="utils")

PASSWORD_HASH_ITERATIONS = 100000


def get_local_ip() -> str:
    """获取本机真实 IP 地址，用于日志显示"""
    try:
        # 只用于获取本地出口地址，不实际发送数据
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            s.connect(('8.8.8.8', 80))
            return s.getsockname()[0]
        finally:
            s.close()
    except OSError:
        try:
            ip = socket.gethostbyname(socket.gethostname())
        except OSError:
            return 'localhost'
        return 'localhost' if ip.startswith('127.') else ip


def validate_email(email: str) -> bool:
    """
    验证邮箱格式

    Args:
        email: 邮箱地址

    Returns:
        bool: 是否有效
    """
    pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(pattern, email))


def _pbkdf2(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        PASSWORD_HASH_ITERATIONS
    ).hex()


def hash_password(password: str) -> str:
    """
    哈希密码

    Returns:
        str: "盐:哈希" 格式的字符串
    """
    salt = secrets.token_hex(16)
    return f"{salt}:{_pbkdf2(password, salt)}"


def verify_password(password: str, password_hash: str) -> bool:
    """验证密码与哈希是否匹配"""
    try:
        salt, hash_value = password_hash.split(':')
    except ValueError:
        logger.warning("密码哈希格式无效")
        return False
    return secrets.compare_digest(_pbkdf2(password, salt), hash_value)
