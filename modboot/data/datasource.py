"""
内存数据源

按表保存实体，并为每张表生成自增主键
"""

import threading
from typing import Any, Dict

from loguru import logger as loguru_logger

from ..exceptions import ConfigurationError

logger = loguru_logger.bind(name=__name__)

SUPPORTED_TYPES = ('memory',)


class DataSource:
    """内存数据源"""

    def __init__(self, type: str = 'memory', name: str = 'modboot', **options):
        """
        初始化数据源

        Args:
            type: 数据源类型，目前只支持 memory
            name: 数据源名称
            **options: 其他配置项（保留）

        Raises:
            ConfigurationError: 不支持的数据源类型
        """
        if type not in SUPPORTED_TYPES:
            raise ConfigurationError(
                f"不支持的数据源类型: {type}",
                config_key="database.type",
                details={'supported': list(SUPPORTED_TYPES)}
            )
        self.type = type
        self.name = name
        self.options = options
        self._tables: Dict[str, Dict[int, Any]] = {}
        self._sequences: Dict[str, int] = {}
        # 仓储的读改写操作在同一把锁内完成
        self.lock = threading.RLock()
        logger.info(f"数据源已初始化: {name} ({type})")

    def table(self, table_name: str) -> Dict[int, Any]:
        """获取表（不存在时创建）"""
        with self.lock:
            return self._tables.setdefault(table_name, {})

    def next_id(self, table_name: str) -> int:
        """生成表的下一个主键"""
        with self.lock:
            self._sequences[table_name] = self._sequences.get(table_name, 0) + 1
            return self._sequences[table_name]

    def reserve_id(self, table_name: str, id: int) -> None:
        """登记显式指定的主键，之后生成的主键都大于它"""
        with self.lock:
            self._sequences[table_name] = max(self._sequences.get(table_name, 0), id)

    def close(self) -> None:
        """清空所有表的数据，表对象本身保留"""
        with self.lock:
            for rows in self._tables.values():
                rows.clear()
            self._sequences.clear()
        logger.debug(f"数据源已关闭: {self.name}")
