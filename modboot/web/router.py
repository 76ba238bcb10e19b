"""
控制器路由挂载

从容器解析控制器实例，读取路由绑定并注册到 FastAPI
"""

import inspect
from typing import Any, Dict, List

from fastapi import FastAPI
from loguru import logger as loguru_logger

from ..core.decorators import _camel_to_snake
from ..core.di import Container, ControllerDescriptor

logger = loguru_logger.bind(name=__name__)


def join_path(base_path: str, method_path: str) -> str:
    """
    合并控制器基础路径和方法路径

    - 方法路径以 // 开头：绝对路径，去掉一个 /
    - 方法路径为空：基础路径本身
    - 其他：追加到基础路径
    """
    if method_path.startswith('//'):
        return method_path[1:]
    method_path = method_path.strip('/')
    if not method_path:
        return base_path or '/'
    return f"{base_path}/{method_path}"


def route_bindings(controller: ControllerDescriptor, instance: Any) -> List[Dict[str, Any]]:
    """返回控制器实例的路由绑定列表"""
    bindings = []
    for method_name, func in inspect.getmembers(controller.controller_class, inspect.isfunction):
        route_config = getattr(func, '__modboot_route__', None)
        if route_config is None:
            continue
        bindings.append({
            'path': join_path(controller.base_path, route_config['path']),
            'methods': route_config.get('methods', ['GET']),
            'handler': getattr(instance, method_name),
            'name': f"{_camel_to_snake(controller.name)}.{method_name}",
            'kwargs': {**controller.route_kwargs, **route_config.get('kwargs', {})},
        })
    return bindings


def mount_controllers(app: FastAPI, container: Container) -> int:
    """
    挂载容器中所有模块声明的控制器

    Returns:
        注册的路由数量
    """
    count = 0
    for module_name, controller in container.controllers():
        instance = container.get_controller(module_name, controller)
        for binding in route_bindings(controller, instance):
            app.add_api_route(
                binding['path'],
                binding['handler'],
                methods=binding['methods'],
                name=binding['name'],
                **binding['kwargs']
            )
            count += 1
            logger.debug(
                f"注册路由: {binding['methods']} {binding['path']} -> "
                f"{module_name}.{controller.name}.{binding['handler'].__name__}"
            )
        logger.info(f"已挂载控制器: {module_name}.{controller.name}")
    return count
