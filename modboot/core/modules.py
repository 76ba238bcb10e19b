"""
内置配置模块

ConfigModule.for_root() 以 SETTINGS 令牌提供 Dynaconf 配置对象，默认全局可见
"""

from typing import Optional

from .config import get_settings
from .di import InjectionToken, ModuleDescriptor, Provider

SETTINGS = InjectionToken("SETTINGS")


class ConfigModule:
    """配置模块工厂"""

    @staticmethod
    def for_root(config_file: Optional[str] = None, is_global: bool = True) -> ModuleDescriptor:
        """
        创建配置模块

        Args:
            config_file: 配置文件路径
            is_global: 是否对所有模块可见
        """
        return ModuleDescriptor(
            "ConfigModule",
            providers=[Provider.factory_of(SETTINGS, lambda: get_settings(config_file))],
            exports=[SETTINGS],
            is_global=is_global,
        )
