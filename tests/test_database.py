"""
数据库测试

覆盖范围：
- 存储的创建、获取、删除
- 同名存储不会被覆盖
- 文件路径与数据目录
"""

from pathlib import Path

import pytest

from nestore import Database, StoreNotFoundError


class TestStores:
    """存储管理"""

    def test_add_and_get(self, temp_dir):
        db = Database('d', data_dir=temp_dir)
        store = db.add_store('people', ['name'])
        assert db.get_store('people') is store
        assert store.attributes == {'name'}
        assert db.has_store('people')

    def test_add_existing_returns_existing(self, shop):
        items = shop.get_store('items')
        again = shop.add_store('items', ['other'])
        assert again is items
        assert 'other' not in items.attributes
        assert len(items) == 2

    def test_delete(self, shop):
        shop.delete_store('items')
        assert not shop.has_store('items')
        assert shop.store_names() == ['customers']

    def test_delete_missing(self, shop):
        with pytest.raises(StoreNotFoundError) as exc_info:
            shop.delete_store('ghost')
        assert exc_info.value.store_name == 'ghost'

    def test_get_missing(self, shop):
        with pytest.raises(StoreNotFoundError):
            shop.get_store('ghost')

    def test_store_names_in_creation_order(self, temp_dir):
        db = Database('d', data_dir=temp_dir)
        for name in ('c', 'a', 'b'):
            db.add_store(name)
        assert db.store_names() == ['c', 'a', 'b']


class TestPaths:
    """文件路径"""

    def test_paths(self, temp_dir):
        db = Database('shop', data_dir=temp_dir)
        assert db.file_path == temp_dir / 'shop.json'
        assert db.script_path == temp_dir / 'shop.sql'

    def test_default_data_dir(self):
        db = Database('shop')
        assert db.file_path == Path('.') / 'shop.json'

    def test_str_data_dir(self, temp_dir):
        db = Database('shop', data_dir=str(temp_dir))
        assert db.data_dir == temp_dir

    def test_repr(self, shop):
        assert repr(shop) == "Database(name='shop', stores=2)"
