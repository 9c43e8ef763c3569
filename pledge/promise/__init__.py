# -*- coding: utf-8 -*-

from .combinators import (all, all_keys, call, convert_async, delay, execute,
                          first, get, put, race, seq, when, when_call)
from .decorators import wrap_promise
from .deferred import Deferred, defer, rejected, resolved
from .errors import (AlreadySettledError, CancelError, ProgrammingError,
                     TimeoutError)
from .promise import Cancellable, CancellableFutureValue, FutureValue, Promise
from .reduce_coroutine import reduce_coroutine
from .unhandled import UnhandledRejectionRegistry, unhandled_rejections
from .util import is_cancellable, is_thenable

__all__ = [
    'all', 'all_keys', 'call', 'convert_async', 'delay', 'execute', 'first',
    'get', 'put', 'race', 'seq', 'when', 'when_call', 'wrap_promise',
    'Deferred', 'defer', 'rejected', 'resolved', 'AlreadySettledError',
    'CancelError', 'ProgrammingError', 'TimeoutError', 'Cancellable',
    'CancellableFutureValue', 'FutureValue', 'Promise', 'reduce_coroutine',
    'UnhandledRejectionRegistry', 'unhandled_rejections', 'is_cancellable',
    'is_thenable'
]
