"""
仓储

Repository 定义每种实体的持久化契约；InMemoryRepository 基于 DataSource 实现。
容器只负责构造和缓存仓储对象，不关心其实现。
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from ..exceptions import DuplicateEntryError
from .datasource import DataSource
from .entity import BaseEntity

E = TypeVar('E', bound=BaseEntity)


class Repository(ABC, Generic[E]):
    """实体仓储契约"""

    @abstractmethod
    def find(self, where: Optional[Dict[str, Any]] = None) -> List[E]:
        """按字段相等条件查询，条件为空时返回全部"""

    @abstractmethod
    def find_one(self, id: int) -> Optional[E]:
        """按主键查询，不存在时返回 None"""

    @abstractmethod
    def find_one_by(self, **where: Any) -> Optional[E]:
        """按字段相等条件查询第一条"""

    @abstractmethod
    def create(self, **values: Any) -> E:
        """创建实体对象（不持久化）"""

    @abstractmethod
    def save(self, entity: E) -> E:
        """插入或更新实体"""

    @abstractmethod
    def remove(self, entity: E) -> None:
        """删除实体"""


class InMemoryRepository(Repository[E]):
    """内存仓储，保存和返回的都是实体副本"""

    def __init__(self, entity_class: Type[E], data_source: DataSource):
        self.entity_class = entity_class
        self.table_name = entity_class.get_table_name()
        self._data_source = data_source
        self._rows = data_source.table(self.table_name)

    @staticmethod
    def _matches(entity: E, where: Dict[str, Any]) -> bool:
        return all(getattr(entity, field, None) == value for field, value in where.items())

    def find(self, where: Optional[Dict[str, Any]] = None) -> List[E]:
        with self._data_source.lock:
            rows = sorted(self._rows.values(), key=lambda row: row.id)
        return [row.model_copy(deep=True) for row in rows if self._matches(row, where or {})]

    def find_one(self, id: int) -> Optional[E]:
        row = self._rows.get(id)
        return row.model_copy(deep=True) if row is not None else None

    def find_one_by(self, **where: Any) -> Optional[E]:
        found = self.find(where)
        return found[0] if found else None

    def create(self, **values: Any) -> E:
        return self.entity_class(**values)

    def save(self, entity: E) -> E:
        if not isinstance(entity, self.entity_class):
            raise TypeError(
                f"{self.entity_class.__name__} 仓储不能保存 {type(entity).__name__} 实例"
            )

        with self._data_source.lock:
            self._check_unique(entity)

            now = datetime.now()
            stored = entity.model_copy(deep=True)
            if stored.id is None:
                stored.id = self._data_source.next_id(self.table_name)
            else:
                self._data_source.reserve_id(self.table_name, stored.id)
            if stored.id not in self._rows:
                stored.created_at = now
            stored.updated_at = now

            self._rows[stored.id] = stored
            return stored.model_copy(deep=True)

    def _check_unique(self, entity: E) -> None:
        """
        Raises:
            DuplicateEntryError: 其他行的唯一字段取值相同
        """
        for field in self.entity_class.unique_fields:
            value = getattr(entity, field)
            for row in self._rows.values():
                if row.id != entity.id and getattr(row, field) == value:
                    raise DuplicateEntryError(self.table_name, field, value)

    def remove(self, entity: E) -> None:
        if entity.id is not None:
            with self._data_source.lock:
                self._rows.pop(entity.id, None)

    def count(self) -> int:
        return len(self._rows)
