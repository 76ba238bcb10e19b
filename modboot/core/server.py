"""
服务器管理器

使用 Hypercorn 作为 ASGI 服务器
"""

import asyncio
import signal
from typing import Any, Optional

from loguru import logger

from ..utils import get_local_ip


class HypercornServer:
    """Hypercorn 服务器（单进程）"""

    def __init__(self, app, host: str = "0.0.0.0", port: int = 3000, **kwargs):
        self.app = app
        self.host = host
        self.port = port
        self.kwargs = kwargs
        self._running = False
        self._shutdown_event: Optional[asyncio.Event] = None

    def _build_config(self) -> Any:
        """构建 Hypercorn 配置"""
        from hypercorn.config import Config

        config = Config()
        config.bind = [f"{self.host}:{self.port}"]
        config.use_reloader = self.kwargs.get('reload', False)
        config.keep_alive_timeout = self.kwargs.get('keep_alive_timeout', 5)
        config.graceful_timeout = self.kwargs.get('graceful_timeout', 30)

        for key, value in self.kwargs.items():
            if hasattr(config, key) and key != 'reload':
                setattr(config, key, value)

        return config

    def start(self) -> None:
        """启动 Hypercorn 服务器，阻塞直到关闭"""
        import hypercorn.asyncio

        config = self._build_config()

        async def serve() -> None:
            self._shutdown_event = asyncio.Event()
            await hypercorn.asyncio.serve(self.app, config, shutdown_trigger=self._shutdown_event.wait)

        self._running = True
        try:
            asyncio.run(serve())
        except Exception as e:
            logger.error(f"Hypercorn 服务器启动失败: {e}")
            raise
        finally:
            self._running = False

    def stop(self) -> None:
        """停止 Hypercorn 服务器"""
        if self._shutdown_event is not None:
            self._shutdown_event.set()
        self._running = False

    @property
    def is_running(self) -> bool:
        """检查服务器是否运行中"""
        return self._running

    def get_url(self) -> str:
        """获取服务器 URL"""
        display_host = get_local_ip() if self.host == "0.0.0.0" else self.host
        return f"http://{display_host}:{self.port}"


class ServerManager:
    """简化的服务器管理器"""

    def __init__(self):
        self._current_server: Optional[HypercornServer] = None

    def start_server(self, app, host: str = "0.0.0.0", port: int = 3000, **kwargs) -> None:
        """
        启动 Hypercorn 服务器

        Args:
            app: ASGI 应用
            host: 主机地址
            port: 端口号
            **kwargs: 其他配置参数，包括 reload、keep_alive_timeout、graceful_timeout
        """
        if self._current_server and self._current_server.is_running:
            logger.warning("服务器已在运行中，请先停止当前服务器")
            return

        self._current_server = HypercornServer(app, host, port, **kwargs)
        self._register_signal_handlers()

        try:
            self._current_server.start()
        except KeyboardInterrupt:
            logger.info("收到中断信号，正在关闭服务器...")
        finally:
            self.stop_server()

    def stop_server(self) -> None:
        """停止当前服务器"""
        if self._current_server:
            self._current_server.stop()
            self._current_server = None

    def _register_signal_handlers(self) -> None:
        """注册信号处理器"""
        def signal_handler(signum, frame):
            logger.info(f"收到信号 {signum}，正在关闭服务器...")
            self.stop_server()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)
