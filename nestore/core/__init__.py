"""
Nestore 核心模块

包含值类型系统、记录存储和数据库
"""

from .types import (
    Value,
    Record,
    ValueKind,
    kind_of,
    infer_value,
    values_equal,
    compare_values,
    display_value,
    validate_record,
)
from .storage import Store, Database

__all__ = [
    # Types
    'Value',
    'Record',
    'ValueKind',
    'kind_of',
    'infer_value',
    'values_equal',
    'compare_values',
    'display_value',
    'validate_record',
    # Storage
    'Store',
    'Database',
]
