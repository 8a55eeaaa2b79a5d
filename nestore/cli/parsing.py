"""
Shell 输入解析

把已按空白切分的命令参数转换为核心层需要的结构化参数。
"""

import json
import re
from typing import Dict, List

from ..common.exceptions import InvalidInputError
from ..core.types import Record, Value, ValueKind, display_value, infer_value, kind_of

_RECORD_ID_PATTERN = re.compile(r'[+-]?[0-9]+')


def parse_record_map(text: str) -> Record:
    """
    解析记录映射文本

    格式：``attr:value, attr:value``。每对只在第一个冒号处拆分，
    键和值两侧空白会被去掉，值按 infer_value 推断类型。

    Examples:
        >>> parse_record_map('name:John Doe, age:30')
        {'name': 'John Doe', 'age': 30}

    Raises:
        InvalidInputError: 缺少冒号或属性名为空
    """
    if not text.strip():
        raise InvalidInputError("Record map is empty. Use 'attribute:value, ...'.")

    record: Dict[str, Value] = {}
    for pair in text.split(','):
        pair = pair.strip()
        if not pair:
            continue
        key, sep, raw_value = pair.partition(':')
        key = key.strip()
        if not sep or not key:
            raise InvalidInputError(f"Invalid record format: '{pair}'. Use 'attribute:value'.")
        record[key] = infer_value(raw_value.strip())

    if not record:
        raise InvalidInputError("Record map is empty. Use 'attribute:value, ...'.")
    return record


def parse_name_list(text: str) -> List[str]:
    """解析逗号分隔的列表，保持顺序并去掉空项"""
    return [item.strip() for item in text.split(',') if item.strip()]


def parse_record_id(text: str) -> int:
    """
    解析记录 id

    Raises:
        InvalidInputError: 不是整数
    """
    if not _RECORD_ID_PATTERN.fullmatch(text):
        raise InvalidInputError(f"Invalid record ID: '{text}'. Must be an integer.")
    return int(text)


def parse_direction(text: str) -> bool:
    """
    解析排序方向

    Returns:
        asc 返回 True，desc 返回 False

    Raises:
        InvalidInputError: 其他取值
    """
    direction = text.lower()
    if direction == 'asc':
        return True
    if direction == 'desc':
        return False
    raise InvalidInputError(f"Invalid sort direction: '{text}'. Use 'asc' or 'desc'.")


def format_value(value: Value) -> str:
    """文本加双引号显示，其他值使用展示形式"""
    if kind_of(value) == ValueKind.TEXT:
        return json.dumps(value, ensure_ascii=False)
    return display_value(value)


def format_record(record: Record) -> str:
    """格式化一条记录：{attr: value, ...}"""
    return '{' + ', '.join(f"{key}: {format_value(value)}" for key, value in record.items()) + '}'
