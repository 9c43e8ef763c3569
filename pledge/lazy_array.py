# -*- coding: utf-8 -*-

"""Lazy arrays: sequences whose items are iterated asynchronously.

A lazy array is built upon a source providing a single primitive,
``some(callback)``: it calls `callback` with each item, in order, until the
callback returns a true value. ``some()`` returns the boolean result, or a
promise of it when the iteration is asynchronous. All other operations are
built on this primitive, and return promises.

    >>> array = LazyArray([3, 1, 2])
    >>> array.map(lambda x: x * 2).to_real_array().result()
    [6, 2, 4]
"""

from .promise import when


class ListSource(object):
    """Source iterating synchronously over the items of a list."""

    def __init__(self, items):
        self.items = list(items)
        self.length = len(self.items)

    def some(self, callback):
        for item in self.items:
            if callback(item):
                return True
        return False


class _MappedSource(object):

    def __init__(self, source, map_fn):
        self.source = source
        self.map_fn = map_fn
        self.length = getattr(source, 'length', None)

    def some(self, callback):
        return self.source.some(lambda item: callback(self.map_fn(item)))


class _ConcatSource(object):

    def __init__(self, source, other):
        self.source = source
        self.other = other
        length = getattr(source, 'length', None)
        other_length = getattr(other, 'length', None)
        if length is None or other_length is None:
            self.length = None
        else:
            self.length = length + other_length

    def some(self, callback):
        def continue_with_other(stopped):
            return stopped or self.other.some(callback)

        return when(self.source.some(callback), continue_with_other)


def _as_source(array):
    if isinstance(array, LazyArray):
        return array.source
    if isinstance(array, (list, tuple)):
        return ListSource(array)
    return array


class LazyArray(object):
    """Array-like interface over a source having a `some()` method.

    Attributes:
        source: the object providing `some()`.
        length (int): number of items, if known by the source. None otherwise.
        total_count (int): total count of items of the source (for partial
            results), if known. None otherwise.
    """

    def __init__(self, source):
        self.source = _as_source(source)
        self.length = getattr(self.source, 'length', None)
        self.total_count = getattr(self.source, 'total_count', None)

    def some(self, callback):
        """Call callback on each item, until it returns a true value.

        Returns:
            Promise<bool>: True if the iteration has been stopped by the
                callback.
        """
        return when(self.source.some(callback), bool)

    def filter(self, fn):
        """Returns: Promise<list>: the items for which fn returns True."""
        results = []

        def keep_matching(item):
            if fn(item):
                results.append(item)

        return when(self.source.some(keep_matching), lambda _: results)

    def every(self, fn):
        """Returns: Promise<bool>: True if fn is true for all items."""
        return when(self.source.some(lambda item: not fn(item)),
                    lambda stopped: not stopped)

    def for_each(self, fn):
        """Call fn on each item.

        Returns:
            Promise<None>: fulfilled when all items have been visited.
        """
        def visit(item):
            fn(item)

        return when(self.source.some(visit), lambda _: None)

    def concat(self, other):
        """Returns: LazyArray: the items of this array, then of `other`."""
        return LazyArray(_ConcatSource(self.source, _as_source(other)))

    def map(self, map_fn):
        """Returns: LazyArray: the lazily transformed items."""
        return LazyArray(_MappedSource(self.source, map_fn))

    def to_real_array(self):
        """Returns: Promise<list>: all the items."""
        items = []

        def collect(item):
            items.append(item)

        return when(self.source.some(collect), lambda _: items)

    def join(self, separator=','):
        def join_items(items):
            return separator.join(str(item) for item in items)

        return when(self.to_real_array(), join_items)

    def sort(self, key=None, reverse=False):
        """Returns: Promise<list>: the items, sorted."""
        return when(self.to_real_array(),
                    lambda items: sorted(items, key=key, reverse=reverse))

    def reverse(self):
        """Returns: Promise<list>: the items, in reversed order."""
        return when(self.to_real_array(), lambda items: items[::-1])

    def get(self, index):
        """Lazily retrieve an item.

        Returns:
            Promise<*>: the item at index, or None if there is no such item.
        """
        found = []

        def find(item):
            if len(found) == index:
                found.append(item)
                return True
            found.append(None)

        return when(self.source.some(find),
                    lambda stopped: found[index] if stopped else None)

    item = get


def get(array, index):
    """Lazily retrieve an item from a regular array or a lazy array.

    Returns:
        Promise<*>: the item.
    """
    return LazyArray(array).get(index)


def first(array):
    """Lazily return the first item in the array."""
    return get(array, 0)


def last(array):
    """Lazily return the last item in the array.

    If the length of the array is unknown, all the items are iterated.
    """
    array = LazyArray(array)
    if array.length is None:
        return when(array.to_real_array(),
                    lambda items: items[-1] if items else None)
    return array.get(array.length - 1)
