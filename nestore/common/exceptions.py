"""
Nestore 异常定义

异常层次：

    NestoreException
    ├── NotFoundError
    │   ├── DatabaseNotFoundError
    │   ├── StoreNotFoundError
    │   └── RecordNotFoundError
    ├── AttributeNotFoundError
    ├── ValidationError
    │   ├── TypeConversionError
    │   └── InvalidInputError
    ├── QueryError
    ├── SerializationError
    │   └── DeserializationError
    ├── StorageIOError
    └── ConfigurationError
"""

from typing import Any, Dict, Optional


class NestoreException(Exception):
    """Nestore 基础异常类"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details: Dict[str, Any] = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为字典（便于日志和展示）

        Returns:
            包含异常类型、消息和附加信息的字典
        """
        result: Dict[str, Any] = {
            'error': type(self).__name__,
            'message': self.message,
        }
        if self.details:
            result['details'] = dict(self.details)
        return result


class NotFoundError(NestoreException):
    """对象不存在异常（数据库 / 存储 / 记录）"""


class DatabaseNotFoundError(NotFoundError):
    """数据库文件不存在异常"""
    def __init__(self, database_name: str, path: Any = None):
        self.database_name = database_name
        self.path = path
        super().__init__(
            f"Database '{database_name}' not found",
            details={'path': str(path)} if path is not None else None
        )


class StoreNotFoundError(NotFoundError):
    """存储不存在异常"""
    def __init__(self, store_name: str):
        self.store_name = store_name
        super().__init__(f"Store '{store_name}' not found")


class RecordNotFoundError(NotFoundError):
    """记录不存在异常"""
    def __init__(self, store_name: str, record_id: Any):
        self.store_name = store_name
        self.record_id = record_id
        super().__init__(f"Record with id '{record_id}' not found in store '{store_name}'")


class AttributeNotFoundError(NestoreException):
    """属性不存在异常"""
    def __init__(self, store_name: str, attribute: str):
        self.store_name = store_name
        self.attribute = attribute
        super().__init__(f"Attribute '{attribute}' not found in store '{store_name}'")


class ValidationError(NestoreException):
    """数据验证异常"""


class TypeConversionError(ValidationError):
    """值类型不受支持异常"""
    def __init__(self, message: str, value: Any = None, attribute: Optional[str] = None):
        self.value = value
        self.attribute = attribute
        details: Dict[str, Any] = {'value': repr(value)}
        if attribute is not None:
            details['attribute'] = attribute
        super().__init__(message, details=details)


class InvalidInputError(ValidationError):
    """输入参数不合法异常"""


class QueryError(NestoreException):
    """查询构建异常（如未知的操作符）"""


class SerializationError(NestoreException):
    """序列化异常"""


class DeserializationError(SerializationError):
    """反序列化异常（文件内容与预期结构不符）"""


class StorageIOError(NestoreException):
    """文件读写异常"""


class ConfigurationError(NestoreException):
    """配置异常"""
