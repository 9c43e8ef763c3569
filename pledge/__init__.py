# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

from . import promise
from .lazy_array import LazyArray
from .promise import (all, all_keys, call, convert_async, defer, delay,
                      execute, first, get, put, race, rejected, resolved, seq,
                      unhandled_rejections, when, when_call, CancelError,
                      Deferred, Promise, TimeoutError)
from .schedule import schedule

__all__ = [
    'promise', 'LazyArray', 'all', 'all_keys', 'call', 'convert_async',
    'defer', 'delay', 'execute', 'first', 'get', 'put', 'race', 'rejected',
    'resolved', 'seq', 'unhandled_rejections', 'when', 'when_call',
    'CancelError', 'Deferred', 'Promise', 'TimeoutError', 'schedule'
]
