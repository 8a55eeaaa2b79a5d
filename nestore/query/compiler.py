"""
Nestore SQL 编译器

把存储和数据库渲染为 SQL 语句。所有方法都是纯字符串生成，不做任何 I/O。

约定：
- 建表时所有属性列都声明为 TEXT，不保留值的实际类型
- INSERT 中所有值都以单引号字符串形式输出（单引号转义为两个单引号）
- UPDATE 中只有文本值加引号，其他值使用展示形式
"""

from typing import List, Mapping, Optional, Sequence, TYPE_CHECKING

from ..common.exceptions import InvalidInputError
from ..core.types import Value, ValueKind, display_value, kind_of

if TYPE_CHECKING:
    from ..core.storage import Database, Store


def quote_literal(text: str) -> str:
    """单引号包裹字符串，内部单引号加倍"""
    return "'" + text.replace("'", "''") + "'"


class SQLCompiler:
    """SQL 语句生成器"""

    PRIMARY_KEY_COLUMN = 'id INTEGER PRIMARY KEY'

    @staticmethod
    def create_table(store: 'Store', table_name: str) -> str:
        """
        生成 CREATE TABLE 语句

        列按属性名字典序排列，全部声明为 TEXT。

        Args:
            store: 源存储
            table_name: 表名

        Returns:
            CREATE TABLE 语句
        """
        columns = [SQLCompiler.PRIMARY_KEY_COLUMN]
        columns.extend(f"{attr} TEXT" for attr in sorted(store.attributes))
        return f"CREATE TABLE {table_name} ({', '.join(columns)});"

    @staticmethod
    def insert(table_name: str, record_id: int, record: Mapping[str, Value]) -> str:
        """生成单条记录的 INSERT 语句（列为该记录自身的属性，按字典序）"""
        attributes = sorted(record)
        columns = ', '.join(['id'] + attributes)
        values = ', '.join([str(record_id)] + [quote_literal(display_value(record[attr])) for attr in attributes])
        return f"INSERT INTO {table_name} ({columns}) VALUES ({values});"

    @staticmethod
    def inserts(store: 'Store', table_name: str) -> List[str]:
        """
        生成存储中所有记录的 INSERT 语句

        Args:
            store: 源存储
            table_name: 表名

        Returns:
            按记录 id 升序排列的语句列表
        """
        return [
            SQLCompiler.insert(table_name, record_id, record)
            for record_id, record in sorted(store.get_all_records().items())
        ]

    @staticmethod
    def select(table_name: str, columns: Optional[Sequence[str]] = None) -> str:
        """生成 SELECT 语句，保持调用方给出的列顺序"""
        selected = ', '.join(columns) if columns else '*'
        return f"SELECT {selected} FROM {table_name};"

    @staticmethod
    def delete(table_name: str, condition: str) -> str:
        """生成 DELETE 语句（条件文本原样拼接，不做校验）"""
        return f"DELETE FROM {table_name} WHERE {condition};"

    @staticmethod
    def update(table_name: str, record_id: int, updates: Mapping[str, Value]) -> str:
        """
        生成 UPDATE 语句

        子句顺序与 updates 的迭代顺序一致。

        Raises:
            InvalidInputError: updates 为空
        """
        if not updates:
            raise InvalidInputError("UPDATE requires at least one column")

        assignments = []
        for attribute, value in updates.items():
            if kind_of(value) == ValueKind.TEXT:
                rendered = quote_literal(value)
            else:
                rendered = display_value(value)
            assignments.append(f"{attribute} = {rendered}")
        return f"UPDATE {table_name} SET {', '.join(assignments)} WHERE id = {record_id};"

    @staticmethod
    def create_database(database: 'Database') -> str:
        return f"CREATE DATABASE {database.name};"

    @staticmethod
    def drop_database(database: 'Database') -> str:
        return f"DROP DATABASE {database.name};"

    @classmethod
    def statements(cls, database: 'Database', include_drop: bool = True) -> List[str]:
        """
        生成整个数据库的语句列表

        顺序：建库；每个存储（按创建顺序）建表及其全部插入；最后删库。
        表名使用存储在数据库中的键名。

        Args:
            database: 源数据库
            include_drop: 是否追加 DROP DATABASE
        """
        result = [cls.create_database(database)]
        for table_name, store in database.stores.items():
            result.append(cls.create_table(store, table_name))
            result.extend(cls.inserts(store, table_name))
        if include_drop:
            result.append(cls.drop_database(database))
        return result

    @classmethod
    def full_script(cls, database: 'Database', include_drop: bool = True) -> str:
        """生成完整脚本，每条语句一行，末尾带换行"""
        return ''.join(statement + '\n' for statement in cls.statements(database, include_drop))
