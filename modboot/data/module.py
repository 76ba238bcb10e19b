"""
数据库模块

- DatabaseModule.for_root(): 全局模块，以 DATA_SOURCE 令牌提供数据源
- DatabaseModule.for_feature(*entities): 为每种实体提供并导出仓储
"""

from functools import partial
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type

from ..core.di import InjectionToken, ModuleDescriptor, Provider
from ..core.modules import SETTINGS
from .datasource import DataSource
from .entity import BaseEntity
from .repository import InMemoryRepository

DATA_SOURCE = InjectionToken("DATA_SOURCE")


def repository_token(entity_class: Type[BaseEntity]) -> str:
    """实体仓储的令牌"""
    return f"Repository<{entity_class.__name__}>"


def database_options(settings: Any) -> Dict[str, Any]:
    """从配置对象读取 database 配置段"""
    section = settings.get("database", {}) or {}
    return {str(key).lower(): value for key, value in dict(section).items()}


class DatabaseModule:
    """数据库模块工厂"""

    # 同一组实体复用同一个模块描述
    _feature_modules: Dict[Tuple[type, ...], ModuleDescriptor] = {}

    @staticmethod
    def for_root(
        use_factory: Optional[Callable[..., Dict[str, Any]]] = None,
        inject: Optional[Iterable[Any]] = None
    ) -> ModuleDescriptor:
        """
        创建全局数据源模块

        Args:
            use_factory: 返回 DataSource 参数的工厂，参数为 inject 中令牌解析后的实例
            inject: 工厂依赖的令牌，默认 [SETTINGS]
        """
        options_factory = use_factory or database_options
        deps = list(inject) if inject is not None else [SETTINGS]

        def create_data_source(*args):
            return DataSource(**options_factory(*args))

        return ModuleDescriptor(
            "DatabaseModule",
            providers=[Provider.factory_of(DATA_SOURCE, create_data_source, inject=deps)],
            exports=[DATA_SOURCE],
            is_global=True,
        )

    @classmethod
    def for_feature(cls, *entities: Type[BaseEntity]) -> ModuleDescriptor:
        """创建实体仓储模块"""
        key = tuple(entities)
        if key not in cls._feature_modules:
            names = ', '.join(entity.__name__ for entity in entities)
            cls._feature_modules[key] = ModuleDescriptor(
                f"DatabaseModule.for_feature({names})",
                providers=[
                    Provider.factory_of(
                        repository_token(entity),
                        partial(InMemoryRepository, entity),
                        inject=[DATA_SOURCE]
                    )
                    for entity in entities
                ],
                exports=[repository_token(entity) for entity in entities],
            )
        return cls._feature_modules[key]
