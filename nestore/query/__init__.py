"""
Nestore 查询子系统

包含查询引擎（过滤、操作符查询、排序）和 SQL 编译器
"""

from .builder import (
    QueryOperator,
    Condition,
    OPERATOR_DESCRIPTIONS,
    filter_records,
    filter_records_by_pairs,
    query_records,
    sort_records,
)
from .compiler import SQLCompiler, quote_literal

__all__ = [
    # Builder
    'QueryOperator',
    'Condition',
    'OPERATOR_DESCRIPTIONS',
    'filter_records',
    'filter_records_by_pairs',
    'query_records',
    'sort_records',
    # Compiler
    'SQLCompiler',
    'quote_literal',
]
