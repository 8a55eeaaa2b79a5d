"""
Nestore 存储引擎

提供记录存储（Store）和数据库（Database）
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Set, Tuple, Union

from ..backends.backend_json import JSONBackend
from ..backends.backend_sql import SQLScriptWriter
from ..common.exceptions import (
    DatabaseNotFoundError,
    RecordNotFoundError,
    StoreNotFoundError,
)
from ..common.options import JsonBackendOptions, SqlExportOptions, get_default_backend_options
from ..query.builder import (
    QueryOperator,
    filter_records,
    filter_records_by_pairs,
    query_records,
    sort_records,
)
from ..query.compiler import SQLCompiler
from .types import Record, Value, validate_record

logger = logging.getLogger(__name__)


class Store:
    """
    记录存储

    类似一张没有固定 schema 的表：记录以自增整数 id 为键，
    属性集随插入的记录自动扩展。
    """

    def __init__(self, name: str, attributes: Optional[Iterable[str]] = None):
        """
        初始化存储

        Args:
            name: 存储名
            attributes: 初始属性集（仅作为种子，不强制约束）
        """
        self.name = name
        self.attributes: Set[str] = set(attributes or ())
        self.records: Dict[int, Record] = {}  # {id: record}
        self.next_id = 0

    def add_record(self, record: Mapping[str, Any]) -> int:
        """
        插入记录

        未出现过的属性会被加入属性集，不会因属性不匹配而失败。

        Args:
            record: 记录字典

        Returns:
            新记录的 id

        Raises:
            TypeConversionError: 值类型不受支持（此时存储不做任何修改）
        """
        validated = validate_record(record)

        record_id = self.next_id
        self.attributes.update(validated)
        self.records[record_id] = validated
        self.next_id += 1

        logger.debug("Store '%s': added record %d", self.name, record_id)
        return record_id

    def delete_record(self, record_id: int) -> None:
        """
        删除记录（id 不会被复用）

        Raises:
            RecordNotFoundError: 记录不存在
        """
        if record_id not in self.records:
            raise RecordNotFoundError(self.name, record_id)

        del self.records[record_id]
        logger.debug("Store '%s': deleted record %d", self.name, record_id)

    def update_record(self, record_id: int, record: Mapping[str, Any]) -> None:
        """
        整体替换记录，保留原 id

        Args:
            record_id: 记录 id
            record: 新的记录内容

        Raises:
            RecordNotFoundError: 记录不存在
            TypeConversionError: 值类型不受支持
        """
        if record_id not in self.records:
            raise RecordNotFoundError(self.name, record_id)

        validated = validate_record(record)
        self.attributes.update(validated)
        self.records[record_id] = validated
        logger.debug("Store '%s': replaced record %d", self.name, record_id)

    def get_record(self, record_id: int) -> Record:
        """
        获取记录副本

        Raises:
            RecordNotFoundError: 记录不存在
        """
        if record_id not in self.records:
            raise RecordNotFoundError(self.name, record_id)

        return self.records[record_id].copy()

    def get_all_records(self) -> Dict[int, Record]:
        """获取所有记录的快照副本"""
        return {record_id: record.copy() for record_id, record in self.records.items()}

    def add_attribute(self, attribute: str) -> bool:
        """
        显式声明属性

        Returns:
            属性是新加入的返回 True，已存在返回 False
        """
        if attribute in self.attributes:
            return False
        self.attributes.add(attribute)
        return True

    def scan(self) -> Iterator[Tuple[int, Record]]:
        """
        按 id 升序扫描所有记录

        Yields:
            (id, 记录字典)
        """
        for record_id in sorted(self.records):
            yield record_id, self.records[record_id].copy()

    # ========== 查询 ==========

    def filter(self, attribute: str, text: str) -> Dict[int, Record]:
        """按单个属性的文本值精确过滤，见 filter_records"""
        return filter_records(self, attribute, text)

    def filter_attributes(self, attributes: Sequence[str], values: Sequence[str]) -> Dict[int, Record]:
        """按多个属性的文本值精确过滤，见 filter_records_by_pairs"""
        return filter_records_by_pairs(self, attributes, values)

    def query(self, attribute: str, operator: Union[QueryOperator, str], value: Value) -> Dict[int, Record]:
        """按操作符查询，operator 可以是关键字字符串"""
        if not isinstance(operator, QueryOperator):
            operator = QueryOperator.parse(operator)
        return query_records(self, attribute, operator, value)

    def sort_by(self, attribute: str, ascending: bool = True) -> List[Tuple[int, Record]]:
        """按属性稳定排序，见 sort_records"""
        return sort_records(self, attribute, ascending)

    def __len__(self) -> int:
        return len(self.records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Store):
            return NotImplemented
        return (
            self.name == other.name
            and self.next_id == other.next_id
            and self.attributes == other.attributes
            and self.records == other.records
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Store(name='{self.name}', records={len(self.records)}, attributes={len(self.attributes)})"


class Database:
    """数据库：按名称管理多个存储，并负责 JSON 持久化和 SQL 导出"""

    def __init__(
        self,
        name: str,
        data_dir: Optional[Union[str, Path]] = None,
        backend_options: Optional[JsonBackendOptions] = None,
    ):
        """
        初始化空数据库

        Args:
            name: 数据库名（同时决定文件名 <name>.json / <name>.sql）
            data_dir: 数据文件所在目录（None 表示当前目录）
            backend_options: JSON 后端配置选项
        """
        self.name = name
        self.data_dir = Path(data_dir) if data_dir is not None else Path('.')
        self.stores: Dict[str, Store] = {}

        if backend_options is None:
            backend_options = get_default_backend_options()
        self.backend = JSONBackend(self.data_dir / f"{name}{JSONBackend.FILE_SUFFIX}", backend_options)

    @property
    def file_path(self) -> Path:
        """JSON 数据文件路径"""
        return self.backend.file_path

    @property
    def script_path(self) -> Path:
        """SQL 脚本文件路径"""
        return self.data_dir / f"{self.name}{SQLScriptWriter.FILE_SUFFIX}"

    def add_store(self, name: str, attributes: Optional[Iterable[str]] = None) -> Store:
        """
        创建存储

        Args:
            name: 存储名
            attributes: 初始属性集

        Returns:
            新建的存储；同名存储已存在时返回已有存储，不做修改
        """
        if name in self.stores:
            logger.debug("Database '%s': store '%s' already exists", self.name, name)
            return self.stores[name]

        store = Store(name, attributes)
        self.stores[name] = store
        logger.debug("Database '%s': created store '%s'", self.name, name)
        return store

    def delete_store(self, name: str) -> None:
        """
        删除存储

        Raises:
            StoreNotFoundError: 存储不存在
        """
        if name not in self.stores:
            raise StoreNotFoundError(name)

        del self.stores[name]
        logger.debug("Database '%s': deleted store '%s'", self.name, name)

    def get_store(self, name: str) -> Store:
        """
        获取存储

        Raises:
            StoreNotFoundError: 存储不存在
        """
        if name not in self.stores:
            raise StoreNotFoundError(name)

        return self.stores[name]

    def has_store(self, name: str) -> bool:
        return name in self.stores

    def store_names(self) -> List[str]:
        """按创建顺序返回所有存储名"""
        return list(self.stores)

    # ========== 持久化 ==========

    def save(self) -> Path:
        """
        保存到 <data_dir>/<name>.json

        Returns:
            JSON 文件路径

        Raises:
            SerializationError: 编码失败
            StorageIOError: 写入失败
        """
        self.backend.save(self.stores)
        return self.file_path

    @classmethod
    def load(
        cls,
        name: str,
        data_dir: Optional[Union[str, Path]] = None,
        backend_options: Optional[JsonBackendOptions] = None,
    ) -> 'Database':
        """
        从 <data_dir>/<name>.json 加载数据库

        Raises:
            DatabaseNotFoundError: 文件不存在
            DeserializationError: 文件内容与预期结构不符
            StorageIOError: 读取失败
        """
        database = cls(name, data_dir, backend_options)
        if not database.backend.exists():
            raise DatabaseNotFoundError(name, database.file_path)

        database.stores = database.backend.load()
        return database

    @classmethod
    def open(
        cls,
        name: str,
        data_dir: Optional[Union[str, Path]] = None,
        backend_options: Optional[JsonBackendOptions] = None,
    ) -> Tuple['Database', bool]:
        """
        文件存在时加载，否则创建空数据库

        Returns:
            (数据库, 是否从文件加载)
        """
        try:
            return cls.load(name, data_dir, backend_options), True
        except DatabaseNotFoundError:
            logger.info("Database file for '%s' not found, creating a new one", name)
            return cls(name, data_dir, backend_options), False

    # ========== SQL ==========

    def to_sql_script(self, include_drop: bool = True) -> str:
        """生成完整 SQL 脚本"""
        return SQLCompiler.full_script(self, include_drop=include_drop)

    def export_sql(self, options: Optional[SqlExportOptions] = None) -> Path:
        """
        导出 SQL 脚本到 <data_dir>/<name>.sql

        Returns:
            脚本文件路径

        Raises:
            StorageIOError: 写入失败
        """
        return SQLScriptWriter(self.script_path, options).write(self)

    def __repr__(self) -> str:
        return f"Database(name='{self.name}', stores={len(self.stores)})"
