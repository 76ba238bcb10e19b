"""
依赖注入模块

提供基于模块图的依赖注入容器：作用域单例、跨模块导入导出、
以及通过 forward_ref 打破的模块间循环依赖
"""

from .container import Container
from .lazy import ForwardHandle, LazyRef, forward_ref, unwrap
from .module import ControllerDescriptor, ModuleDescriptor
from .providers import InjectionToken, Provider, ProviderState, token_name
from .registry import ModuleRegistry

__all__ = [
    'Container',
    'ModuleRegistry',
    'ModuleDescriptor',
    'ControllerDescriptor',
    'Provider',
    'ProviderState',
    'InjectionToken',
    'LazyRef',
    'ForwardHandle',
    'forward_ref',
    'unwrap',
    'token_name',
]
