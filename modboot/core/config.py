"""
配置管理模块

使用 Dynaconf 提供配置管理功能
支持远程加载文件、配置文件优先级、环境变量覆盖等
"""

import hashlib
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from dynaconf import Dynaconf
from loguru import logger as loguru_logger

logger = loguru_logger.bind(name=__name__)

DEFAULT_SETTINGS = {
    "app": {
        "name": "ModBoot App",
        "version": "0.1.0"
    },
    "server": {
        "host": "0.0.0.0",
        "port": 3000,
        "reload": False,
        "keep_alive_timeout": 5,
        "graceful_timeout": 30
    },
    "logging": {
        "level": "INFO"
    },
    "container": {
        "eager_bootstrap": True
    },
    "database": {
        "type": "memory",
        "name": "modboot"
    }
}


def _find_project_root() -> str:
    """查找项目根目录"""
    current_dir = Path(__file__).parent.absolute()

    while current_dir.parent != current_dir:
        if (current_dir / 'pyproject.toml').exists():
            return str(current_dir)
        current_dir = current_dir.parent

    return os.getcwd()


def _is_url(path: str) -> bool:
    """检查是否为 URL"""
    return bool(path) and path.startswith(('http://', 'https://'))


def _download_config(url: str, cache_dir: str) -> str:
    """下载配置文件到缓存，下载失败时回退到已有缓存"""
    url_hash = hashlib.md5(url.encode()).hexdigest()
    cache_path = os.path.join(cache_dir, f"{url_hash}.yaml")

    try:
        logger.info(f"正在下载配置文件: {url}")
        response = requests.get(url, timeout=30)
        response.raise_for_status()

        with open(cache_path, 'w', encoding='utf-8') as f:
            f.write(response.text)

        logger.info(f"配置文件已缓存到: {cache_path}")
        return cache_path
    except requests.RequestException as e:
        if os.path.exists(cache_path):
            logger.warning(f"下载配置文件失败 ({e})，使用缓存: {cache_path}")
            return cache_path
        logger.error(f"下载配置文件失败且无可用缓存: {e}")
        raise


def _get_config_files(config_file: Optional[str] = None) -> List[str]:
    """获取配置文件列表，按加载顺序排列

    优先级：环境变量 > 参数指定 > 项目根目录/conf > 项目根目录
    """
    project_root = _find_project_root()
    cache_dir = os.path.join(tempfile.gettempdir(), 'modboot_config_cache')
    os.makedirs(cache_dir, exist_ok=True)

    config_files = []
    config_paths = [
        os.getenv('CONFIG_FILE'),
        config_file,
        os.path.join(project_root, 'conf', 'config.yaml'),
        os.path.join(project_root, 'conf', 'config.yml'),
        os.path.join(project_root, 'config.yaml'),
        os.path.join(project_root, 'config.yml'),
    ]

    for config_path in config_paths:
        if not config_path:
            continue

        if _is_url(config_path):
            config_path = _download_config(config_path, cache_dir)
        elif not os.path.exists(config_path):
            continue

        if config_path not in config_files:
            config_files.append(config_path)

    # Dynaconf 中后加载的文件覆盖先加载的，优先级最高的放最后
    return list(reversed(config_files))


def _apply_defaults(settings: Dynaconf, defaults: Dict[str, Any], prefix: str = "") -> None:
    """为配置文件和环境变量都未提供的叶子键填充默认值"""
    for key, value in defaults.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            _apply_defaults(settings, value, f"{dotted}.")
        elif not settings.exists(dotted):
            settings.set(dotted, value)


def create_settings(config_file: Optional[str] = None) -> Dynaconf:
    """创建 Dynaconf 设置实例"""
    settings = Dynaconf(
        settings_files=_get_config_files(config_file),
        # 禁用前缀，嵌套键使用 __ 分隔，如 DATABASE__NAME
        envvar_prefix=False,
        envvar_separator="__",
        env_parse_values=True,
        ignore_unknown_envvars=True,
        merge_enabled=True,
    )
    _apply_defaults(settings, DEFAULT_SETTINGS)
    return settings


# 全局配置实例
_settings: Optional[Dynaconf] = None


def get_settings(config_file: Optional[str] = None) -> Dynaconf:
    """获取 Dynaconf 设置实例"""
    global _settings

    if _settings is None:
        _settings = create_settings(config_file)

    return _settings


def get_config(key: str, default: Any = None) -> Any:
    """获取配置值的便捷函数"""
    return get_settings().get(key, default)


def get_config_str(key: str, default: str = "") -> str:
    """获取字符串配置值的便捷函数"""
    value = get_config(key, default)
    return str(value) if value is not None else default


def get_config_int(key: str, default: int = 0) -> int:
    """获取整数配置值的便捷函数"""
    value = get_config(key, default)
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def to_bool(value: Any) -> bool:
    """将配置值转换为布尔值"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def get_config_bool(key: str, default: bool = False) -> bool:
    """获取布尔配置值的便捷函数"""
    return to_bool(get_config(key, default))


def reload_config() -> None:
    """重新加载配置"""
    global _settings
    _settings = None
