"""配置加载"""

import textwrap

from modboot.core import ConfigModule, SETTINGS
from modboot.core.config import (
    get_config,
    get_config_bool,
    get_config_int,
    get_config_str,
    get_settings,
    to_bool,
)


def write_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return str(path)


def test_defaults_fill_missing_keys(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_FILE", write_config(tmp_path, """
        app:
          name: "Custom"
    """))

    assert get_config_str("app.name") == "Custom"
    assert get_config("app.version") is not None
    assert get_config_bool("container.eager_bootstrap") is True
    assert get_config("database.type") == "memory"


def test_explicit_config_file(tmp_path):
    config_file = write_config(tmp_path, """
        server:
          port: 9100
        container:
          eager_bootstrap: false
    """)

    settings = get_settings(config_file)

    assert settings is get_settings()
    assert get_config_int("server.port") == 9100
    assert get_config_bool("container.eager_bootstrap") is False


def test_to_bool():
    assert to_bool("yes") is True
    assert to_bool("off") is False
    assert to_bool(1) is True
    assert to_bool(False) is False


def test_config_module_provides_settings(container, tmp_path):
    config_file = write_config(tmp_path, """
        app:
          name: "From Module"
    """)
    module = ConfigModule.for_root(config_file)
    container.register_module(module)

    settings = container.resolve(module, SETTINGS)

    assert settings.get("app.name") == "From Module"
    assert module.is_global


def test_setup_logging_writes_file(tmp_path, monkeypatch):
    from loguru import logger

    from modboot.core.logger import setup_logging

    log_file = tmp_path / "logs" / "app.log"
    monkeypatch.setenv("CONFIG_FILE", write_config(tmp_path, f"""
        logging:
          level: "DEBUG"
          file: "{log_file.as_posix()}"
    """))

    setup_logging()
    logger.bind(name="test").debug("hello file")
    # 移除处理器时关闭文件
    logger.remove()

    assert "hello file" in log_file.read_text(encoding="utf-8")
