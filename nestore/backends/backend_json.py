"""
Nestore JSON存储引擎

整个数据库保存为单个 JSON 对象：{存储名: 存储对象}。
存储对象结构：
    {
        "id": 下一个记录 id,
        "name": 存储名,
        "attributes": [属性名, ...],
        "values": {"<十进制记录id>": {属性名: 标量值}}
    }
"""

import importlib
import json
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, Tuple, Union, TYPE_CHECKING

from .base import StorageBackend, write_atomic
from ..common.exceptions import (
    ConfigurationError,
    DeserializationError,
    SerializationError,
    StorageIOError,
    TypeConversionError,
)
from ..common.options import JSON_IMPLS, JsonBackendOptions
from ..core.types import check_value, I64_MAX, I64_MIN

if TYPE_CHECKING:
    from ..core.storage import Store

logger = logging.getLogger(__name__)

STORE_KEYS = ('id', 'name', 'attributes', 'values')
_RECORD_KEY_PATTERN = re.compile(r'0|-?[1-9][0-9]*')


def _resolve_impl(options: JsonBackendOptions) -> Tuple[str, Callable[[Any], bytes], Callable[[str], Any]]:
    """
    根据选项选择 JSON 实现，并把参数适配到该实现

    Returns:
        (实现名, dumps, loads)

    Raises:
        ConfigurationError: 未知实现或未安装
    """
    impl = options.impl or 'json'
    if impl not in JSON_IMPLS:
        raise ConfigurationError(
            f"Unknown JSON implementation '{impl}'. Valid: {', '.join(JSON_IMPLS)}"
        )

    if impl == 'json':
        def dumps(obj: Any) -> bytes:
            return json.dumps(obj, indent=options.indent, ensure_ascii=options.ensure_ascii).encode('utf-8')
        return impl, dumps, json.loads

    try:
        module = importlib.import_module(impl)
    except ImportError:
        raise ConfigurationError(
            f"{impl} is required for impl='{impl}'. Install with: pip install nestore[{impl}]"
        ) from None

    if impl == 'orjson':
        # orjson 只支持 2 空格缩进，且始终输出 UTF-8
        flags = module.OPT_INDENT_2 if options.indent else 0

        def dumps(obj: Any) -> bytes:
            return module.dumps(obj, option=flags)
        return impl, dumps, module.loads

    def dumps(obj: Any) -> bytes:
        return module.dumps(obj, indent=options.indent or 0, ensure_ascii=options.ensure_ascii).encode('utf-8')
    return impl, dumps, module.loads


class JSONBackend(StorageBackend):
    """JSON format storage engine"""

    ENGINE_NAME = 'json'
    FILE_SUFFIX = '.json'

    def __init__(self, file_path: Union[str, Path], options: JsonBackendOptions):
        """
        初始化 JSON 后端

        Args:
            file_path: JSON 文件路径
            options: JSON 后端配置选项
        """
        assert isinstance(options, JsonBackendOptions), "options must be an instance of JsonBackendOptions"
        super().__init__(file_path, options)
        self.options: JsonBackendOptions = options
        self._impl_name, self._dumps, self._loads = _resolve_impl(options)

    def save(self, stores: Dict[str, 'Store']) -> None:
        """保存所有存储到 JSON 文件"""
        payload = {name: self._serialize_store(store) for name, store in stores.items()}
        try:
            data = self._dumps(payload)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode database as JSON: {e}") from e

        write_atomic(self.file_path, data)
        logger.info("Saved %d store(s) to %s using %s", len(stores), self.file_path, self._impl_name)

    def load(self) -> Dict[str, 'Store']:
        """从 JSON 文件加载所有存储"""
        if not self.exists():
            raise FileNotFoundError(f"JSON file not found: {self.file_path}")

        try:
            raw = self.file_path.read_bytes()
        except OSError as e:
            raise StorageIOError(f"Failed to read {self.file_path}: {e}") from e

        try:
            payload = self._loads(raw.decode('utf-8'))
        except (ValueError, UnicodeDecodeError) as e:
            raise DeserializationError(f"Invalid JSON in {self.file_path}: {e}") from e

        if not isinstance(payload, dict):
            raise DeserializationError(f"Expected a JSON object at top level of {self.file_path}")

        stores = {}
        for store_name, data in payload.items():
            stores[store_name] = self._deserialize_store(store_name, data)

        logger.info("Loaded %d store(s) from %s", len(stores), self.file_path)
        return stores

    @staticmethod
    def _serialize_store(store: 'Store') -> Dict[str, Any]:
        """序列化单个存储（JSON 对象键只能是字符串，记录 id 转为十进制字符串）"""
        return {
            'id': store.next_id,
            'name': store.name,
            'attributes': sorted(store.attributes),
            'values': {
                str(record_id): dict(record)
                for record_id, record in sorted(store.records.items())
            },
        }

    @staticmethod
    def _deserialize_store(store_name: str, data: Any) -> 'Store':
        """
        反序列化单个存储

        Raises:
            DeserializationError: 结构与预期不符
        """
        from ..core.storage import Store

        if not isinstance(data, dict):
            raise DeserializationError(f"Store '{store_name}' must be a JSON object")
        missing = [key for key in STORE_KEYS if key not in data]
        if missing:
            raise DeserializationError(f"Store '{store_name}' is missing keys: {', '.join(missing)}")

        next_id = data['id']
        if isinstance(next_id, bool) or not isinstance(next_id, int) or not I64_MIN <= next_id <= I64_MAX:
            raise DeserializationError(f"Store '{store_name}': 'id' must be a 64-bit integer")
        if not isinstance(data['name'], str):
            raise DeserializationError(f"Store '{store_name}': 'name' must be a string")
        attributes = data['attributes']
        if not isinstance(attributes, list) or not all(isinstance(a, str) for a in attributes):
            raise DeserializationError(f"Store '{store_name}': 'attributes' must be an array of strings")
        values = data['values']
        if not isinstance(values, dict):
            raise DeserializationError(f"Store '{store_name}': 'values' must be an object")

        store = Store(data['name'], attributes)
        store.next_id = next_id
        for key, record in values.items():
            if not _RECORD_KEY_PATTERN.fullmatch(key):
                raise DeserializationError(
                    f"Store '{store_name}': record key '{key}' is not a canonical decimal integer"
                )
            record_id = int(key)
            if not isinstance(record, dict):
                raise DeserializationError(f"Store '{store_name}': record {key} must be an object")
            try:
                store.records[record_id] = {attr: check_value(value, attr) for attr, value in record.items()}
            except TypeConversionError as e:
                raise DeserializationError(f"Store '{store_name}': record {key}: {e.message}") from e
            store.attributes.update(record)

        if store.records and next_id <= max(store.records):
            raise DeserializationError(
                f"Store '{store_name}': 'id' {next_id} must be greater than every record id",
                details={'id': next_id, 'max_record_id': max(store.records)}
            )

        return store
