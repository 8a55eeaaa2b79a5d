"""
Nestore 查询引擎

在存储的记录快照上执行精确过滤、多属性过滤、操作符查询和排序。
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from ..common.exceptions import (
    AttributeNotFoundError,
    InvalidInputError,
    QueryError,
    TypeConversionError,
)
from ..core.types import (
    NUMERIC_KINDS,
    Record,
    Value,
    ValueKind,
    compare_values,
    kind_of,
    values_equal,
)

if TYPE_CHECKING:
    from ..core.storage import Store


class QueryOperator(Enum):
    """查询操作符"""
    EQ = 'eq'
    NEQ = 'neq'
    GT = 'gt'
    LT = 'lt'
    GE = 'ge'
    LE = 'le'
    CONTAINS = 'contains'

    @classmethod
    def parse(cls, text: str) -> 'QueryOperator':
        """
        解析操作符关键字（不区分大小写）

        Raises:
            QueryError: 未知的操作符
        """
        try:
            return cls(text.strip().lower())
        except ValueError:
            valid = ', '.join(op.value for op in cls)
            raise QueryError(f"Invalid operator: '{text}'. Valid operators: {valid}") from None


OPERATOR_DESCRIPTIONS: Dict[QueryOperator, str] = {
    QueryOperator.EQ: 'Equal to',
    QueryOperator.NEQ: 'Not equal to',
    QueryOperator.GT: 'Greater than',
    QueryOperator.LT: 'Less than',
    QueryOperator.GE: 'Greater than or equal to',
    QueryOperator.LE: 'Less than or equal to',
    QueryOperator.CONTAINS: 'Checks if a string contains a substring',
}

_RELATIONAL = {
    QueryOperator.GT: lambda c: c > 0,
    QueryOperator.LT: lambda c: c < 0,
    QueryOperator.GE: lambda c: c >= 0,
    QueryOperator.LE: lambda c: c <= 0,
}


class Condition:
    """单个查询条件：字段 操作符 值"""

    def __init__(self, field: str, operator: QueryOperator, value: Value):
        self.field = field
        self.operator = operator
        self.value = value

    def evaluate(self, record: Record) -> bool:
        """
        在一条记录上评估条件

        记录缺少该字段时不匹配；类型组合不适用于操作符时不匹配（不抛异常）。
        """
        if self.field not in record:
            return False
        actual = record[self.field]

        if self.operator == QueryOperator.EQ:
            return values_equal(actual, self.value)
        if self.operator == QueryOperator.NEQ:
            return not values_equal(actual, self.value)

        if self.operator == QueryOperator.CONTAINS:
            if _is_text(actual) and _is_text(self.value):
                return self.value in actual
            return False

        if not (_is_numeric(actual) and _is_numeric(self.value)):
            return False
        result = compare_values(actual, self.value)
        if result is None:
            return False
        return _RELATIONAL[self.operator](result)

    def __repr__(self) -> str:
        return f"Condition({self.field!r} {self.operator.value} {self.value!r})"


def _safe_kind(value: Any) -> Optional[ValueKind]:
    try:
        return kind_of(value)
    except TypeConversionError:
        return None


def _is_text(value: Any) -> bool:
    return _safe_kind(value) == ValueKind.TEXT


def _is_numeric(value: Any) -> bool:
    return _safe_kind(value) in NUMERIC_KINDS


def _snapshot(store: 'Store') -> List[Tuple[int, Record]]:
    """按 id 升序获取记录快照"""
    records = store.get_all_records()
    return sorted(records.items())


def filter_records(store: 'Store', attribute: str, text: str) -> Dict[int, Record]:
    """
    按单个属性精确过滤

    探测值始终是文本，因此只有文本类型的存储值可能匹配；
    数值或布尔值即使展示形式相同也不匹配。

    Args:
        store: 目标存储
        attribute: 属性名
        text: 文本探测值

    Returns:
        {记录id: 记录}

    Raises:
        AttributeNotFoundError: 属性不在存储的属性集中
        InvalidInputError: 探测值不是文本
    """
    if not isinstance(text, str):
        raise InvalidInputError(f"Filter value must be text, got {type(text).__name__}")
    if attribute not in store.attributes:
        raise AttributeNotFoundError(store.name, attribute)

    result: Dict[int, Record] = {}
    for record_id, record in _snapshot(store):
        if attribute in record and values_equal(record[attribute], text):
            result[record_id] = record
    return result


def filter_records_by_pairs(
    store: 'Store',
    attributes: Sequence[str],
    values: Sequence[str]
) -> Dict[int, Record]:
    """
    按多个属性精确过滤

    属性和值按位置一一配对，因此两者都必须是有序序列。
    记录必须包含每个属性，且对应值为相等的文本。

    Args:
        store: 目标存储
        attributes: 属性名序列
        values: 文本探测值序列

    Returns:
        {记录id: 记录}

    Raises:
        InvalidInputError: 参数为无序集合或长度不一致，或值不是文本
    """
    if isinstance(attributes, (set, frozenset)) or isinstance(values, (set, frozenset)):
        raise InvalidInputError("attributes and values must be ordered sequences, not sets")
    if len(attributes) != len(values):
        raise InvalidInputError(
            "attributes and values must have the same length",
            details={'attributes': len(attributes), 'values': len(values)}
        )
    if not all(isinstance(probe, str) for probe in values):
        raise InvalidInputError("Filter values must be text")

    pairs = list(zip(attributes, values))
    result: Dict[int, Record] = {}
    for record_id, record in _snapshot(store):
        if all(attr in record and values_equal(record[attr], probe) for attr, probe in pairs):
            result[record_id] = record
    return result


def query_records(
    store: 'Store',
    attribute: str,
    operator: QueryOperator,
    value: Value
) -> Dict[int, Record]:
    """
    按操作符查询

    Args:
        store: 目标存储
        attribute: 属性名
        operator: 查询操作符
        value: 比较值

    Returns:
        {记录id: 记录}，无匹配时为空字典
    """
    condition = Condition(attribute, operator, value)
    return {
        record_id: record
        for record_id, record in _snapshot(store)
        if condition.evaluate(record)
    }


def sort_records(store: 'Store', attribute: str, ascending: bool = True) -> List[Tuple[int, Record]]:
    """
    按属性稳定排序

    数值与数值、文本与文本分别排序，并放回各自原来占据的位置；
    缺少该属性或其值没有可比较对象的记录保持原位置。
    升序和降序在每个可比较类内部互为精确逆序，相等值在两次排序中
    都保持输入顺序。

    Args:
        store: 目标存储
        attribute: 排序属性
        ascending: True 为升序，False 为降序

    Returns:
        [(记录id, 记录)] 列表
    """
    rows = _snapshot(store)

    numeric_slots: List[int] = []
    text_slots: List[int] = []
    for position, (_, record) in enumerate(rows):
        if attribute not in record:
            continue
        kind = _safe_kind(record[attribute])
        if kind in NUMERIC_KINDS:
            numeric_slots.append(position)
        elif kind == ValueKind.TEXT:
            text_slots.append(position)

    result = list(rows)
    for slots in (numeric_slots, text_slots):
        # 单个元素没有可比较对象，视为平局
        if len(slots) < 2:
            continue
        group = [rows[position] for position in slots]
        # sort 的 reverse=True 同样保持相等元素的原始顺序
        group.sort(key=lambda row: row[1][attribute], reverse=not ascending)
        for position, row in zip(slots, group):
            result[position] = row

    return result
