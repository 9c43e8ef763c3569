# -*- coding: utf-8 -*-

from pledge import lazy_array, promise
from pledge.lazy_array import LazyArray, ListSource


class DelayedSource(object):
    """Source whose iteration starts after a short delay."""

    def __init__(self, items, total_count=None):
        self.items = items
        self.total_count = total_count

    def some(self, callback):
        return promise.delay(0.01).then(
            lambda _: ListSource(self.items).some(callback))


class TestLazyArray(object):

    def test_length_of_list(self):
        array = LazyArray([1, 2, 3])
        assert array.length == 3
        assert array.total_count is None

    def test_length_of_unknown_source(self):
        array = LazyArray(DelayedSource([1, 2], total_count=30))
        assert array.length is None
        assert array.total_count == 30

    def test_some(self):
        visited = []

        def stop_at_two(item):
            visited.append(item)
            return item == 2

        assert LazyArray([1, 2, 3]).some(stop_at_two).result(0.01) is True
        assert visited == [1, 2]

    def test_some_not_stopped(self):
        assert LazyArray([1, 2, 3]).some(lambda x: x > 5).result(0.01) \
            is False

    def test_some_async_source(self):
        array = LazyArray(DelayedSource([1, 2, 3]))
        assert array.some(lambda x: x == 3).result(1) is True

    def test_filter(self):
        p = LazyArray([1, 2, 3, 4]).filter(lambda x: x % 2 == 0)
        assert p.result(0.01) == [2, 4]

    def test_every(self):
        assert LazyArray([2, 4]).every(lambda x: x % 2 == 0).result(0.01) \
            is True
        assert LazyArray([2, 3]).every(lambda x: x % 2 == 0).result(0.01) \
            is False

    def test_for_each(self):
        visited = []
        p = LazyArray([1, 2, 3]).for_each(visited.append)
        assert p.result(0.01) is None
        assert visited == [1, 2, 3]

    def test_map(self):
        array = LazyArray([1, 2, 3]).map(lambda x: x * 2)
        assert isinstance(array, LazyArray)
        assert array.length == 3
        assert array.to_real_array().result(0.01) == [2, 4, 6]

    def test_map_is_lazy(self):
        calls = []

        def double(x):
            calls.append(x)
            return x * 2

        array = LazyArray([1, 2, 3]).map(double)
        assert calls == []
        assert array.get(1).result(0.01) == 4
        assert calls == [1, 2]

    def test_concat(self):
        array = LazyArray([1, 2]).concat([3, 4])
        assert array.length == 4
        assert array.to_real_array().result(0.01) == [1, 2, 3, 4]

    def test_concat_async_sources(self):
        array = LazyArray(DelayedSource([1, 2])).concat(
            LazyArray(DelayedSource([3])))
        assert array.length is None
        assert array.to_real_array().result(1) == [1, 2, 3]

    def test_concat_stopped_in_first_part(self):
        visited = []

        def stop_at_one(item):
            visited.append(item)
            return item == 1

        array = LazyArray([1, 2]).concat([3, 4])
        assert array.some(stop_at_one).result(0.01) is True
        assert visited == [1]

    def test_to_real_array_async_source(self):
        array = LazyArray(DelayedSource([1, 2, 3]))
        assert array.to_real_array().result(1) == [1, 2, 3]

    def test_join(self):
        assert LazyArray([1, 2, 3]).join().result(0.01) == '1,2,3'
        assert LazyArray(['a', 'b']).join(' - ').result(0.01) == 'a - b'

    def test_sort(self):
        assert LazyArray([3, 1, 2]).sort().result(0.01) == [1, 2, 3]
        assert LazyArray(['bb', 'a', 'ccc']).sort(key=len, reverse=True) \
            .result(0.01) == ['ccc', 'bb', 'a']

    def test_reverse(self):
        assert LazyArray([1, 2, 3]).reverse().result(0.01) == [3, 2, 1]

    def test_get(self):
        array = LazyArray(['a', 'b', 'c'])
        assert array.get(0).result(0.01) == 'a'
        assert array.item(2).result(0.01) == 'c'

    def test_get_out_of_range(self):
        assert LazyArray(['a']).get(3).result(0.01) is None


class TestModuleFunctions(object):

    def test_get_on_regular_array(self):
        assert lazy_array.get([1, 2, 3], 1).result(0.01) == 2

    def test_first(self):
        assert lazy_array.first([1, 2, 3]).result(0.01) == 1
        assert lazy_array.first([]).result(0.01) is None

    def test_last(self):
        assert lazy_array.last([1, 2, 3]).result(0.01) == 3

    def test_last_of_unknown_length(self):
        array = LazyArray(DelayedSource([1, 2, 3]))
        assert lazy_array.last(array).result(1) == 3

    def test_last_of_empty_array(self):
        assert lazy_array.last(LazyArray(DelayedSource([]))).result(1) is None
