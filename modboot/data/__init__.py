"""
数据模块

提供实体基类、内存数据源、仓储契约及数据库模块
"""

from .datasource import DataSource
from .entity import BaseEntity
from .module import DATA_SOURCE, DatabaseModule, repository_token
from .repository import InMemoryRepository, Repository

__all__ = [
    "BaseEntity",
    "DataSource",
    "Repository",
    "InMemoryRepository",
    "DatabaseModule",
    "DATA_SOURCE",
    "repository_token",
]
