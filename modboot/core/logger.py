"""
日志管理模块

基于 loguru 的日志管理，提供初始化配置功能
所有代码可以直接使用: from loguru import logger
"""

import logging
import os
import sys
from typing import Optional

from loguru import logger as loguru_logger

from .config import get_settings, to_bool

logger = loguru_logger

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# 标准 logging 格式占位符到 loguru 格式的映射
_STD_FORMAT_MAPPING = {
    "%(asctime)s": "{time:YYYY-MM-DD HH:mm:ss}",
    "%(name)s": "{name}",
    "%(levelname)s": "{level: <8}",
    "%(message)s": "{message}",
    "%(filename)s": "{file.name}",
    "%(funcName)s": "{function}",
    "%(lineno)d": "{line}",
}


def _convert_format(user_format: str) -> str:
    for std, loguru_format in _STD_FORMAT_MAPPING.items():
        user_format = user_format.replace(std, loguru_format)
    return user_format


def setup_logging(config_file: Optional[str] = None) -> None:
    """
    根据配置文件初始化 loguru 日志系统

    Args:
        config_file: 配置文件路径，如果为 None 则使用默认配置
    """
    config = get_settings(config_file)

    loguru_logger.remove()

    log_level = str(config.get("logging.level", "INFO")).upper()
    use_json = to_bool(config.get("logging.json", False))

    if use_json:
        console_kwargs = {"serialize": True}
    else:
        user_format = config.get("logging.format", None)
        console_kwargs = {
            "format": _convert_format(user_format) if user_format else DEFAULT_FORMAT,
            "colorize": True,
        }

    common_kwargs = {"level": log_level, "backtrace": True, "diagnose": True}
    loguru_logger.add(sys.stdout, **console_kwargs, **common_kwargs)

    log_file = config.get("logging.file")
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_kwargs = {k: v for k, v in console_kwargs.items() if k != "colorize"}
        loguru_logger.add(
            log_file,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            **file_kwargs,
            **common_kwargs
        )

    # 第三方库只设置标准 logging 级别，不拦截转发
    third_party_config = config.get("logging.third_party", {}) or {}
    for logger_name, level_name in dict(third_party_config).items():
        if isinstance(level_name, str):
            level = getattr(logging, level_name.upper(), logging.INFO)
            logging.getLogger(logger_name).setLevel(level)
