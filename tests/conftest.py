"""测试公共夹具"""

import pytest
from fastapi.testclient import TestClient

from modboot.core.config import reload_config
from modboot.core.di import Container


@pytest.fixture(autouse=True)
def fresh_settings():
    """每个用例重新加载配置"""
    reload_config()
    yield
    reload_config()


@pytest.fixture
def container():
    container = Container()
    yield container
    container.close()


@pytest.fixture
def application():
    from app.main import create_application

    return create_application()


@pytest.fixture
def client(application):
    with TestClient(application.get_fastapi_app()) as client:
        yield client
