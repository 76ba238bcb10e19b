"""
核心基础设施模块

包含配置、日志、依赖注入容器、应用与服务器等核心功能
"""

from .config import (
    get_settings,
    get_config,
    get_config_str,
    get_config_int,
    get_config_bool,
    reload_config
)
from .logger import logger, setup_logging
from .modules import ConfigModule, SETTINGS

__all__ = [
    "get_settings",
    "get_config",
    "get_config_str",
    "get_config_int",
    "get_config_bool",
    "reload_config",
    "logger",  # loguru logger，建议直接使用
    "setup_logging",
    "ConfigModule",
    "SETTINGS",
]
