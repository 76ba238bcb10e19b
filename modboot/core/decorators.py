"""
装饰器模块

为控制器声明路由绑定。装饰器只记录元数据，不做注册；
控制器由模块描述显式声明，由容器构造后交给 Web 层读取路由。
"""

import re
from typing import List


def _camel_to_snake(name: str) -> str:
    """
    将驼峰命名转换为下划线分隔的小写形式

    Examples:
        UsersController -> users_controller
        HTTPClient -> http_client
    """
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', name)
    s2 = re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1)
    return s2.lower()


def route(path: str = '', methods: List[str] = None, **kwargs):
    """
    路由装饰器

    Args:
        path: 路由路径（相对控制器基础路径）
        methods: HTTP 方法列表
        **kwargs: 其他 FastAPI 路由参数，如 status_code
    """
    if methods is None:
        methods = ['GET']

    def decorator(func):
        func.__modboot_route__ = {
            'path': path,
            'methods': methods,
            'kwargs': kwargs
        }
        return func
    return decorator


def get(path: str = '', **kwargs):
    """GET 路由装饰器"""
    return route(path, methods=['GET'], **kwargs)


def post(path: str = '', **kwargs):
    """POST 路由装饰器"""
    return route(path, methods=['POST'], **kwargs)


def put(path: str = '', **kwargs):
    """PUT 路由装饰器"""
    return route(path, methods=['PUT'], **kwargs)


def delete(path: str = '', **kwargs):
    """DELETE 路由装饰器"""
    return route(path, methods=['DELETE'], **kwargs)


def patch(path: str = '', **kwargs):
    """PATCH 路由装饰器"""
    return route(path, methods=['PATCH'], **kwargs)


def controller(base_path: str = '', **kwargs):
    """
    控制器装饰器

    为类中的方法提供基础路径。类中的方法需要显式使用 @get、@post 等装饰器才会生成路由。

    路径合并规则：
    - 方法路径以 // 开头：作为绝对路径使用（去掉一个 /）
    - 其他情况：追加到基础路径
    - 方法路径为空：即基础路径本身

    示例:
        @controller('api/products')
        class ProductsController:
            @post('', status_code=201)  # POST /api/products
            def create_product(self, body: CreateProductDto): ...

            @get('{id}')  # GET /api/products/{id}
            def get_product(self, id: int): ...

    Args:
        base_path: 基础路径
        **kwargs: 该控制器所有路由共享的 FastAPI 参数，如 tags
    """
    def decorator(cls):
        normalized = base_path.strip('/')
        cls.__modboot_controller__ = {
            'base_path': f"/{normalized}" if normalized else '',
            'kwargs': kwargs
        }
        return cls
    return decorator
