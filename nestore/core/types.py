"""
Nestore 类型系统

定义记录值的封闭联合类型（整数、浮点、布尔、文本），
以及文本推断、相等性、排序和展示规则。
"""

import math
import re
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Union

from ..common.exceptions import TypeConversionError


# 记录值：int / float / bool / str 四选一
Value = Union[int, float, bool, str]
Record = Dict[str, Value]

I64_MIN = -(2 ** 63)
I64_MAX = 2 ** 63 - 1

_INT_PATTERN = re.compile(r'[+-]?[0-9]+')
_FLOAT_PATTERN = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')


class ValueKind(IntEnum):
    """值类型编码"""
    INTEGER = 1
    FLOAT = 2
    BOOL = 3
    TEXT = 4


NUMERIC_KINDS = frozenset({ValueKind.INTEGER, ValueKind.FLOAT})


def kind_of(value: Any) -> ValueKind:
    """
    获取值的类型编码

    bool 是 int 的子类，必须先于 int 判断。

    Args:
        value: 待分类的值

    Returns:
        值类型编码

    Raises:
        TypeConversionError: 值不属于支持的四种类型，或整数超出 64 位范围
    """
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        if not I64_MIN <= value <= I64_MAX:
            raise TypeConversionError(f"Integer {value} is out of 64-bit range", value=value)
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.TEXT
    raise TypeConversionError(f"Unsupported value type: {type(value).__name__}", value=value)


def infer_value(text: str) -> Value:
    """
    从用户输入的文本推断值

    推断顺序固定：64 位整数 -> 浮点数 -> 不区分大小写的 true/false -> 原文本。
    无法持久化为 JSON 的非有限浮点数（inf、nan）保留为文本。

    Args:
        text: 输入文本

    Returns:
        推断出的值
    """
    if _INT_PATTERN.fullmatch(text):
        number = int(text)
        if I64_MIN <= number <= I64_MAX:
            return number

    if _FLOAT_PATTERN.fullmatch(text):
        return float(text)

    lowered = text.lower()
    if lowered == 'true':
        return True
    if lowered == 'false':
        return False

    return text


def values_equal(a: Any, b: Any) -> bool:
    """
    同类型结构相等

    不同类型的值永远不相等（5 与 5.0、True 与 1 均不相等）。
    """
    try:
        if kind_of(a) != kind_of(b):
            return False
    except TypeConversionError:
        return False
    return a == b


def compare_values(a: Any, b: Any) -> Optional[int]:
    """
    比较两个值

    仅数值与数值、文本与文本之间可比较。数值比较使用 Python 的
    精确 int/float 比较，不做有损的浮点转换。

    Args:
        a: 左值
        b: 右值

    Returns:
        -1 / 0 / 1；不可比较时返回 None
    """
    try:
        kind_a = kind_of(a)
        kind_b = kind_of(b)
    except TypeConversionError:
        return None

    if kind_a in NUMERIC_KINDS and kind_b in NUMERIC_KINDS:
        # NaN 与任何值都不可比较
        if (kind_a == ValueKind.FLOAT and math.isnan(a)) or (kind_b == ValueKind.FLOAT and math.isnan(b)):
            return None
    elif not (kind_a == ValueKind.TEXT and kind_b == ValueKind.TEXT):
        return None

    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def display_value(value: Value) -> str:
    """
    值的展示形式

    布尔值显示为 true/false，浮点数使用 repr，文本原样返回。
    """
    kind = kind_of(value)
    if kind == ValueKind.BOOL:
        return 'true' if value else 'false'
    if kind == ValueKind.FLOAT:
        return repr(value)
    return str(value)


def check_value(value: Any, attribute: Optional[str] = None) -> Value:
    """
    校验单个记录值

    Args:
        value: 记录值
        attribute: 所属属性名（用于错误信息）

    Returns:
        原值

    Raises:
        TypeConversionError: 值类型不受支持，或为非有限浮点数
    """
    try:
        kind = kind_of(value)
    except TypeConversionError as e:
        raise TypeConversionError(e.message, value=value, attribute=attribute) from None
    if kind == ValueKind.FLOAT and not math.isfinite(value):
        raise TypeConversionError(f"Non-finite float {value!r} cannot be stored", value=value, attribute=attribute)
    return value


def validate_record(record: Mapping[str, Any]) -> Record:
    """
    校验一条记录并返回其副本

    Args:
        record: 属性名到值的映射

    Returns:
        校验后的新字典

    Raises:
        TypeConversionError: 属性名不是字符串或值不受支持
    """
    validated: Record = {}
    for attribute, value in record.items():
        if not isinstance(attribute, str):
            raise TypeConversionError(f"Attribute name must be str, got {type(attribute).__name__}", value=attribute)
        validated[attribute] = check_value(value, attribute)
    return validated
