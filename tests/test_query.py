"""
查询引擎测试

测试方法：
- 等价类划分：文本 / 数值 / 布尔值在各操作符下的行为
- 性质测试：eq 与 neq 对含该属性的记录构成划分
- 场景设计：混合类型列的排序

覆盖范围：
- filter 只匹配文本值
- filter_attributes 的有序配对和参数校验
- 七种查询操作符
- 稳定排序：升降序、平局、缺失和不可比较的值
"""

import pytest

from nestore import (
    Store, QueryOperator, Condition,
    AttributeNotFoundError, InvalidInputError, QueryError,
)


def ids(result):
    """查询结果的 id 集合"""
    return set(result)


def order(rows):
    """排序结果的 id 序列"""
    return [record_id for record_id, _ in rows]


class TestFilter:
    """单属性过滤"""

    def test_text_match(self, people):
        assert ids(people.filter('city', 'Paris')) == {0, 2}

    def test_no_match(self, people):
        assert people.filter('city', 'Berlin') == {}

    def test_numeric_value_never_matches_text_probe(self, people):
        """age 存为整数，filter('age', '30') 为空"""
        assert people.filter('age', '30') == {}

    def test_text_stored_number_matches(self):
        store = Store('s')
        store.add_record({'code': '30'})
        store.add_record({'code': 30})
        assert ids(store.filter('code', '30')) == {0}

    @pytest.mark.parametrize('probe', [30, 30.0, True])
    def test_non_text_probe_rejected(self, people, probe):
        """探测值必须是文本"""
        with pytest.raises(InvalidInputError):
            people.filter('age', probe)

    def test_unknown_attribute(self, people):
        with pytest.raises(AttributeNotFoundError) as exc_info:
            people.filter('email', 'x')
        assert exc_info.value.attribute == 'email'
        assert exc_info.value.store_name == 'people'

    def test_declared_but_unused_attribute(self):
        """已声明但没有记录使用的属性返回空结果而不是报错"""
        store = Store('s', ['email'])
        store.add_record({'name': 'Alice'})
        assert store.filter('email', 'a@example.com') == {}

    def test_result_is_copy(self, people):
        result = people.filter('name', 'Alice')
        result[0]['name'] = 'Eve'
        assert people.get_record(0)['name'] == 'Alice'


class TestFilterAttributes:
    """多属性过滤"""

    def test_pairs_by_position(self, people):
        assert ids(people.filter_attributes(['city', 'name'], ['Paris', 'Alice'])) == {0}
        assert ids(people.filter_attributes(['name', 'city'], ['Charlie', 'Paris'])) == {2}

    def test_all_pairs_must_match(self, people):
        assert people.filter_attributes(['city', 'name'], ['London', 'Alice']) == {}

    def test_tuples_accepted(self, people):
        assert ids(people.filter_attributes(('city',), ('Paris',))) == {0, 2}

    def test_numeric_never_matches(self, people):
        assert people.filter_attributes(['name', 'age'], ['Bob', '25']) == {}

    def test_non_text_values_rejected(self, people):
        with pytest.raises(InvalidInputError):
            people.filter_attributes(['name', 'age'], ['Alice', 30])

    def test_length_mismatch(self, people):
        with pytest.raises(InvalidInputError) as exc_info:
            people.filter_attributes(['name', 'city'], ['Alice'])
        assert exc_info.value.details == {'attributes': 2, 'values': 1}

    @pytest.mark.parametrize('attributes, values', [
        ({'name'}, ['Alice']),
        (['name'], {'Alice'}),
        (frozenset({'name'}), frozenset({'Alice'})),
    ])
    def test_sets_rejected(self, people, attributes, values):
        """无序集合无法确定配对关系"""
        with pytest.raises(InvalidInputError):
            people.filter_attributes(attributes, values)


class TestQuery:
    """操作符查询"""

    def test_gt(self, people):
        assert ids(people.query('age', QueryOperator.GT, 26)) == {0, 2}

    def test_single_match(self):
        store = Store('people', {'name', 'age'})
        store.add_record({'name': 'Alice', 'age': 30})
        store.add_record({'name': 'Bob', 'age': 25})
        result = store.query('age', QueryOperator.GT, 26)
        assert result == {0: {'name': 'Alice', 'age': 30}}

    @pytest.mark.parametrize('operator, value, expected', [
        ('lt', 30, {1}),
        ('le', 30, {0, 1}),
        ('ge', 30, {0, 2}),
        ('gt', 35, set()),
        ('gt', 29.5, {0, 2}),
        ('le', 25.0, {1}),
    ])
    def test_relational(self, people, operator, value, expected):
        assert ids(people.query('age', operator, value)) == expected

    def test_eq_same_kind_only(self, people):
        assert ids(people.query('age', 'eq', 30)) == {0}
        assert people.query('age', 'eq', 30.0) == {}
        assert people.query('age', 'eq', '30') == {}

    def test_neq(self, people):
        assert ids(people.query('name', 'neq', 'Bob')) == {0, 2}

    def test_neq_cross_kind_matches(self, people):
        """不同类型的值永远不相等，因此 neq 匹配"""
        assert ids(people.query('age', 'neq', '30')) == {0, 1, 2}

    def test_eq_neq_partition(self, people):
        """eq 与 neq 对含该属性的记录构成划分"""
        people.add_record({'name': 'Dana', 'age': 'unknown'})
        people.add_record({'name': 'Eve'})
        having_age = {rid for rid, record in people.scan() if 'age' in record}
        for probe in (30, 30.0, '30', 'unknown', True):
            eq = ids(people.query('age', 'eq', probe))
            neq = ids(people.query('age', 'neq', probe))
            assert eq | neq == having_age
            assert eq & neq == set()

    def test_contains(self, people):
        assert ids(people.query('name', 'contains', 'li')) == {0, 2}

    def test_contains_requires_text(self, people):
        assert people.query('age', 'contains', '3') == {}
        assert people.query('name', 'contains', 3) == {}

    def test_relational_on_text_does_not_match(self, people):
        assert people.query('name', 'gt', 'A') == {}

    def test_relational_on_bool_does_not_match(self):
        store = Store('s')
        store.add_record({'flag': True})
        store.add_record({'flag': 1})
        assert ids(store.query('flag', 'ge', 1)) == {1}

    def test_missing_attribute_is_skipped(self, people):
        assert people.query('email', 'eq', 'x') == {}
        assert people.query('email', 'neq', 'x') == {}

    def test_operator_keyword_case_insensitive(self, people):
        assert ids(people.query('age', 'GT', 26)) == {0, 2}

    def test_unknown_operator(self, people):
        with pytest.raises(QueryError):
            people.query('age', 'like', 1)

    def test_condition_repr(self):
        assert repr(Condition('age', QueryOperator.GT, 26)) == "Condition('age' gt 26)"


class TestSort:
    """稳定排序"""

    def test_ascending(self, people):
        assert order(people.sort_by('age', True)) == [1, 0, 2]

    def test_descending(self, people):
        assert order(people.sort_by('age', False)) == [2, 0, 1]

    def test_two_record_example(self):
        store = Store('people', {'name', 'age'})
        store.add_record({'name': 'Alice', 'age': 30})
        store.add_record({'name': 'Bob', 'age': 25})
        rows = store.sort_by('age', True)
        assert rows == [(1, {'name': 'Bob', 'age': 25}), (0, {'name': 'Alice', 'age': 30})]

    def test_text(self, people):
        assert order(people.sort_by('name', False)) == [2, 1, 0]

    def test_ties_keep_input_order(self):
        """相等值在升序和降序中都保持 id 顺序"""
        store = Store('s')
        for value in (1, 1, 0, 1):
            store.add_record({'v': value})
        assert order(store.sort_by('v', True)) == [2, 0, 1, 3]
        assert order(store.sort_by('v', False)) == [0, 1, 3, 2]

    def test_descending_reverses_distinct_values(self):
        store = Store('s')
        for value in (5, 2.5, 9, -1, 3):
            store.add_record({'v': value})
        ascending = order(store.sort_by('v', True))
        descending = order(store.sort_by('v', False))
        assert descending == list(reversed(ascending))

    def test_int_and_float_sorted_together(self):
        store = Store('s')
        for value in (2, 1.5, 3.0, 1):
            store.add_record({'v': value})
        assert order(store.sort_by('v', True)) == [3, 1, 0, 2]

    def test_mixed_column_keeps_uncomparable_slots(self):
        """数值和文本各自排序；缺失值和布尔值不动"""
        store = Store('s')
        store.add_record({'v': 30})     # 0
        store.add_record({'v': 'x'})    # 1
        store.add_record({})            # 2
        store.add_record({'v': 10})     # 3
        store.add_record({'v': 'a'})    # 4
        store.add_record({'v': True})   # 5
        assert order(store.sort_by('v', True)) == [3, 4, 2, 0, 1, 5]
        assert order(store.sort_by('v', False)) == [0, 1, 2, 3, 4, 5]

    def test_missing_attribute_everywhere(self, people):
        assert order(people.sort_by('email', True)) == [0, 1, 2]

    def test_empty_store(self):
        assert Store('s').sort_by('v') == []

    def test_sort_does_not_modify_store(self, people):
        before = people.get_all_records()
        people.sort_by('age', False)
        assert people.get_all_records() == before
