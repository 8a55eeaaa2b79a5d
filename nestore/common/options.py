"""
Nestore 配置选项 dataclass 定义

该模块定义了持久化后端和 SQL 导出的配置选项，替代 **kwargs 参数。
"""
from dataclasses import dataclass
from typing import Optional, Literal


JSON_IMPLS = ('json', 'orjson', 'ujson')


@dataclass(slots=True)
class JsonBackendOptions:
    """JSON 后端配置选项"""
    indent: Optional[int] = None  # 缩进空格数
    ensure_ascii: bool = False  # 是否强制 ASCII 编码
    impl: Optional[Literal['json', 'orjson', 'ujson']] = None  # 指定JSON库名，None 使用标准库


@dataclass(slots=True)
class SqlExportOptions:
    """SQL 脚本导出配置选项"""
    include_drop: bool = True  # 脚本末尾是否追加 DROP DATABASE
    encoding: str = 'utf-8'  # 脚本文件编码


def get_default_backend_options() -> JsonBackendOptions:
    """返回默认的 JSON 后端选项"""
    return JsonBackendOptions()


def get_default_export_options() -> SqlExportOptions:
    """返回默认的 SQL 导出选项"""
    return SqlExportOptions()
