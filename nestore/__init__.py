"""
Nestore - 嵌套式交互表格存储

进程托管多个数据库，每个数据库托管多个无固定 schema 的存储，
每个存储以自增整数 id 保存记录。支持 JSON 持久化和 SQL 脚本导出。
"""

import logging

from .core import (
    Store,
    Database,
    ValueKind,
    infer_value,
    values_equal,
    compare_values,
    display_value,
)
from .query import QueryOperator, Condition, SQLCompiler
from .common.options import JsonBackendOptions, SqlExportOptions
from .common.exceptions import (
    NestoreException,
    NotFoundError,
    DatabaseNotFoundError,
    StoreNotFoundError,
    RecordNotFoundError,
    AttributeNotFoundError,
    ValidationError,
    TypeConversionError,
    InvalidInputError,
    QueryError,
    SerializationError,
    DeserializationError,
    StorageIOError,
    ConfigurationError,
)

__version__ = '0.1.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core
    'Store',
    'Database',
    'ValueKind',
    'infer_value',
    'values_equal',
    'compare_values',
    'display_value',
    # Query & SQL
    'QueryOperator',
    'Condition',
    'SQLCompiler',
    # Options
    'JsonBackendOptions',
    'SqlExportOptions',
    # Exceptions
    'NestoreException',
    'NotFoundError',
    'DatabaseNotFoundError',
    'StoreNotFoundError',
    'RecordNotFoundError',
    'AttributeNotFoundError',
    'ValidationError',
    'TypeConversionError',
    'InvalidInputError',
    'QueryError',
    'SerializationError',
    'DeserializationError',
    'StorageIOError',
    'ConfigurationError',
]
