"""
ModBoot 应用程序主类

以根模块构建依赖注入容器，挂载控制器并通过 FastAPI 对外提供服务
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .config import get_settings, to_bool
from .di import Container, ModuleDescriptor
from .logger import setup_logging
from .server import ServerManager
from ..exceptions import ModBootException
from ..utils import get_local_ip
from ..web import HTTPException as WebHTTPException
from ..web import error_response, mount_controllers


class Application:
    """ModBoot 应用程序主类"""

    def __init__(
            self,
            root_module: ModuleDescriptor,
            name: Optional[str] = None,
            config_file: Optional[str] = None,
            container: Optional[Container] = None,
            **kwargs
    ):
        """
        初始化应用程序

        Args:
            root_module: 根模块，其直接导入会被递归注册
            name: 应用程序名称，默认读取 app.name
            config_file: 配置文件路径
            container: 依赖注入容器，默认新建
            **kwargs: 覆盖配置项，如 container__eager_bootstrap=False
        """
        self.config = get_settings(config_file)
        self._apply_config(kwargs)

        self.name = name or self.config.get("app.name", "ModBoot App")
        self.version = self.config.get("app.version", "0.1.0")

        setup_logging(config_file)
        self.logger = logger.bind(name=self.name)

        self.root_module = root_module
        self.container = container or Container()
        self.container.register_module_tree(root_module)
        if to_bool(self.config.get("container.eager_bootstrap", True)):
            self.container.bootstrap()

        self.startup_hooks: List[Callable] = []
        self.shutdown_hooks: List[Callable] = []

        self._fastapi_app = self._create_fastapi_app()
        self.server_manager = ServerManager()

    def _apply_config(self, kwargs: Dict[str, Any]) -> None:
        """应用配置参数，键中的 __ 表示嵌套"""
        for key, value in kwargs.items():
            self.config.set(key.replace("__", "."), value)

    def add_startup_hook(self, hook: Callable) -> None:
        """添加启动钩子"""
        self.startup_hooks.append(hook)
        self.logger.debug(f"已添加启动钩子: {hook.__name__}")

    def add_shutdown_hook(self, hook: Callable) -> None:
        """添加关闭钩子"""
        self.shutdown_hooks.append(hook)
        self.logger.debug(f"已添加关闭钩子: {hook.__name__}")

    def resolve(self, module: Any, token: Any) -> Any:
        """在指定模块作用域内解析提供者"""
        return self.container.resolve(module, token)

    async def _run_hooks(self, hooks: List[Callable], stage: str) -> None:
        for hook in hooks:
            try:
                if asyncio.iscoroutinefunction(hook):
                    await hook()
                else:
                    hook()
            except Exception as e:
                self.logger.error(f"{stage}钩子执行失败: {e}")

    def _create_fastapi_app(self) -> FastAPI:
        """创建 FastAPI 应用实例"""

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            """应用生命周期管理"""
            await self._run_hooks(self.startup_hooks, "启动")
            self.logger.info(f"🚀 {self.name} 已启动")

            yield

            self.logger.info(f"🛑 关闭 {self.name}...")
            await self._run_hooks(self.shutdown_hooks, "关闭")
            self.container.close()

        app = FastAPI(
            title=self.name,
            version=self.version,
            lifespan=lifespan,
        )

        # 添加 CORS 中间件（如果配置了 server.cors）
        cors_config = self.config.get("server.cors")
        if cors_config:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=cors_config.get("allow_origins", ["*"]),
                allow_credentials=cors_config.get("allow_credentials", True),
                allow_methods=cors_config.get("allow_methods", ["*"]),
                allow_headers=cors_config.get("allow_headers", ["*"]),
            )
            self.logger.debug("CORS 中间件已启用")

        route_count = mount_controllers(app, self.container)
        self.logger.info(f"已注册 {route_count} 个路由")

        self._register_exception_handlers(app)
        self._add_health_endpoints(app)

        return app

    def _register_exception_handlers(self, app: FastAPI) -> None:
        """注册异常处理器"""

        @app.exception_handler(WebHTTPException)
        async def web_exception_handler(request: Request, exc: WebHTTPException):
            """服务层 HTTP 异常处理器"""
            self.logger.warning(f"HTTP 异常: {exc.status_code} - {exc.message}")
            return JSONResponse(
                status_code=exc.status_code,
                content=error_response(exc.status_code, exc.message, exc.details or None)
            )

        @app.exception_handler(ModBootException)
        async def modboot_exception_handler(request: Request, exc: ModBootException):
            """ModBoot 异常处理器"""
            self.logger.error(f"ModBoot 异常: {exc}")
            return JSONResponse(
                status_code=500,
                content=error_response(500, "Internal Server Error", {"type": exc.__class__.__name__})
            )

        @app.exception_handler(HTTPException)
        async def http_exception_handler(request: Request, exc: HTTPException):
            """FastAPI HTTP 异常处理器"""
            self.logger.warning(f"HTTP 异常: {exc.status_code} - {exc.detail}")
            message = exc.detail if isinstance(exc.detail, str) else "HTTP Error"
            return JSONResponse(
                status_code=exc.status_code,
                content=error_response(exc.status_code, message)
            )

        @app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            """请求验证异常处理器"""
            self.logger.warning(f"请求验证失败: {exc.errors()}")
            return JSONResponse(
                status_code=422,
                content=error_response(
                    422,
                    "Validation Error",
                    {"fieldErrors": jsonable_encoder(exc.errors())}
                )
            )

        @app.exception_handler(Exception)
        async def global_exception_handler(request: Request, exc: Exception):
            """全局异常处理器"""
            self.logger.opt(exception=exc).error(f"未处理的异常: {exc}")
            return JSONResponse(
                status_code=500,
                content=error_response(500, "Internal Server Error", {"type": exc.__class__.__name__})
            )

    def _add_health_endpoints(self, app: FastAPI) -> None:
        """添加健康检查端点"""

        @app.get("/health")
        async def health_check():
            """健康检查端点"""
            return {
                "status": "healthy",
                "app": self.name,
                "version": self.version,
            }

        @app.get("/health/ready")
        async def readiness_check():
            """就绪检查端点"""
            return {
                "status": "ready" if self.container.is_bootstrapped else "starting",
                "app": self.name,
                "container": {
                    "bootstrapped": self.container.is_bootstrapped,
                    "modules": len(self.container.registry.modules),
                }
            }

        @app.get("/health/live")
        async def liveness_check():
            """存活检查端点"""
            return {
                "status": "alive",
                "app": self.name
            }

    def run(
            self,
            host: Optional[str] = None,
            port: Optional[int] = None,
            reload: Optional[bool] = None,
            **kwargs
    ) -> None:
        """
        运行应用程序

        Args:
            host: 主机地址，默认读取 server.host
            port: 端口号，默认读取 server.port
            reload: 是否开启热重载
            **kwargs: 其他服务器参数
        """
        host = host or self.config.get("server.host", "0.0.0.0")
        port = int(port or self.config.get("server.port", 3000))
        if reload is None:
            reload = to_bool(self.config.get("server.reload", False))
        kwargs.setdefault("keep_alive_timeout", self.config.get("server.keep_alive_timeout", 5))
        kwargs.setdefault("graceful_timeout", self.config.get("server.graceful_timeout", 30))

        # 获取真实 IP 用于日志显示（服务器仍然使用配置的 host 绑定）
        display_host = get_local_ip() if host == "0.0.0.0" else host

        self.logger.info(f"🌐 服务器启动: http://{display_host}:{port}")
        self.logger.info(f"📚 API 文档: http://{display_host}:{port}/docs")
        self.logger.info(f"🔍 健康检查: http://{display_host}:{port}/health")

        try:
            self.server_manager.start_server(
                app=self._fastapi_app,
                host=host,
                port=port,
                reload=reload,
                **kwargs
            )
        except KeyboardInterrupt:
            self.logger.info("收到中断信号，正在关闭...")
        finally:
            self.container.close()
            self.logger.info("应用程序已关闭")

    def get_fastapi_app(self) -> FastAPI:
        """获取 FastAPI 应用实例"""
        return self._fastapi_app


def create_app(
        root_module: ModuleDescriptor,
        name: Optional[str] = None,
        config_file: Optional[str] = None,
        **kwargs
) -> Application:
    """创建 ModBoot 应用程序实例"""
    return Application(root_module, name, config_file, **kwargs)
