"""
Pytest 配置和共享 fixtures

此文件提供 pytest 测试所需的共享配置和 fixtures。
"""
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# 确保可以导入 nestore
sys.path.insert(0, str(Path(__file__).parent.parent))

from nestore import Database, Store


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    提供临时目录 fixture

    使用 TemporaryDirectory 确保测试隔离，
    测试结束后自动清理。

    Yields:
        临时目录的 Path 对象
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def people() -> Store:
    """
    三条记录的 people 存储

    id 0: Alice 30 Paris
    id 1: Bob 25 London
    id 2: Charlie 35 Paris
    """
    store = Store('people', {'name', 'age', 'city'})
    store.add_record({'name': 'Alice', 'age': 30, 'city': 'Paris'})
    store.add_record({'name': 'Bob', 'age': 25, 'city': 'London'})
    store.add_record({'name': 'Charlie', 'age': 35, 'city': 'Paris'})
    return store


@pytest.fixture
def shop(temp_dir: Path) -> Database:
    """位于临时目录、包含两个存储的 shop 数据库"""
    db = Database('shop', data_dir=temp_dir)
    items = db.add_store('items', ['name', 'price'])
    items.add_record({'name': 'Pen', 'price': 1.5})
    items.add_record({'name': "Kid's Book", 'price': 12, 'in_stock': True})
    customers = db.add_store('customers', ['name'])
    customers.add_record({'name': 'Alice', 'age': 30})
    return db
