"""主应用文件"""

from typing import Optional

from modboot.core.application import Application, create_app
from modboot.data import DATA_SOURCE

from .app_module import AppModule


def create_application(config_file: Optional[str] = None, **kwargs) -> Application:
    """以 AppModule 为根模块创建应用"""
    application = create_app(AppModule, config_file=config_file, **kwargs)

    def close_data_source():
        application.resolve(AppModule, DATA_SOURCE).close()

    application.add_shutdown_hook(close_data_source)
    return application


if __name__ == "__main__":
    create_application().run()
