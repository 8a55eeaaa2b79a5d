"""
Nestore 后端模块

提供 JSON 持久化和 SQL 脚本导出
"""

from .base import StorageBackend, write_atomic
from .backend_json import JSONBackend
from .backend_sql import SQLScriptWriter

__all__ = [
    'StorageBackend',
    'write_atomic',
    'JSONBackend',
    'SQLScriptWriter',
]
