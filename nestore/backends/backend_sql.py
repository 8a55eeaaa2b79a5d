"""
Nestore SQL 脚本导出

把数据库渲染为 SQL 脚本并写入 <数据库名>.sql。只写不读。
"""

import logging
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from .base import write_atomic
from ..common.exceptions import SerializationError
from ..common.options import SqlExportOptions, get_default_export_options
from ..query.compiler import SQLCompiler

if TYPE_CHECKING:
    from ..core.storage import Database

logger = logging.getLogger(__name__)


class SQLScriptWriter:
    """SQL script exporter (write only)"""

    FILE_SUFFIX = '.sql'

    def __init__(self, file_path: Union[str, Path], options: Optional[SqlExportOptions] = None):
        """
        初始化 SQL 脚本导出器

        Args:
            file_path: 脚本文件路径
            options: SQL 导出配置选项
        """
        if options is None:
            options = get_default_export_options()
        assert isinstance(options, SqlExportOptions), "options must be an instance of SqlExportOptions"
        self.file_path = Path(file_path)
        self.options: SqlExportOptions = options

    def write(self, database: 'Database') -> Path:
        """
        生成脚本并写入文件

        Returns:
            脚本文件路径

        Raises:
            SerializationError: 编码失败
            StorageIOError: 写入失败
        """
        script = SQLCompiler.full_script(database, include_drop=self.options.include_drop)
        try:
            data = script.encode(self.options.encoding)
        except (LookupError, UnicodeEncodeError) as e:
            raise SerializationError(f"Cannot encode SQL script as {self.options.encoding}: {e}") from e

        write_atomic(self.file_path, data)
        logger.info("Exported database '%s' to %s", database.name, self.file_path)
        return self.file_path

    def exists(self) -> bool:
        """检查脚本文件是否存在"""
        return self.file_path.exists()

    def __repr__(self) -> str:
        return f"SQLScriptWriter(file_path='{self.file_path}')"
