"""
Nestore 存储后端抽象基类
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Union, TYPE_CHECKING

from ..common.exceptions import StorageIOError

if TYPE_CHECKING:
    from ..core.storage import Store

logger = logging.getLogger(__name__)


def write_atomic(file_path: Path, data: bytes) -> None:
    """
    原子性写入：先写临时文件，再重命名覆盖目标文件

    Args:
        file_path: 目标文件路径
        data: 要写入的字节

    Raises:
        StorageIOError: 写入或重命名失败
    """
    temp_path = file_path.parent / (file_path.name + '.tmp')
    try:
        with open(temp_path, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(file_path)
    except OSError as e:
        # 清理临时文件
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.warning("Could not remove temp file %s", temp_path)
        raise StorageIOError(f"Failed to write {file_path}: {e}") from e
    logger.debug("Wrote %d bytes to %s", len(data), file_path)


class StorageBackend(ABC):
    """
    存储后端抽象基类

    子类负责把 {存储名: Store} 整体写入单个文件，并从文件中恢复。
    """

    ENGINE_NAME: str = ''
    FILE_SUFFIX: str = ''

    def __init__(self, file_path: Union[str, Path], options: Any):
        """
        初始化后端

        Args:
            file_path: 数据文件路径
            options: 后端配置选项
        """
        self.file_path = Path(file_path)
        self.options = options

    @abstractmethod
    def save(self, stores: Dict[str, 'Store']) -> None:
        """保存所有存储"""

    @abstractmethod
    def load(self) -> Dict[str, 'Store']:
        """加载所有存储"""

    def exists(self) -> bool:
        """检查文件是否存在"""
        return self.file_path.exists()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(engine='{self.ENGINE_NAME}', file_path='{self.file_path}')"
