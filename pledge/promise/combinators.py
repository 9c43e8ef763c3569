# -*- coding: utf-8 -*-

"""Functions composing future values and plain values into future values.

Every function accepts plain values wherever a promise is expected: they're
considered as already fulfilled promises. Every function returns a Promise.
"""

from collections.abc import Iterable, Mapping
from functools import partial, wraps
import inspect
import logging
from threading import Lock

from .deferred import Deferred, as_promise, rejected, to_thenable
from .errors import ProgrammingError
from .promise import get_method, get_property, set_property
from .timer import call_later
from .util import is_cancellable

_logger = logging.getLogger(__name__)


def when(value, on_fulfilled=None, on_rejected=None, on_progress=None):
    """Register callbacks on a value who may, or may not, be a promise.

    Returns:
        Promise<*>: the promise returned by ``then()``.
    """
    return as_promise(value).then(on_fulfilled, on_rejected, on_progress)


def when_call(init, on_fulfilled=None, on_rejected=None, on_progress=None):
    """Call a function, then register callbacks on its result.

    It's like ``when()``, except that an exception raised by `init` is
    handled like a rejection.

    Example:

        >>> when_call(lambda: do_something_maybe_async(),
        ...           on_success, on_error)
    """
    try:
        value = init()
    except ProgrammingError:
        raise
    except Exception as error:
        return rejected(error).then(None, on_rejected)
    return when(value, on_fulfilled, on_rejected, on_progress)


def _perform(target, on_promise, on_value):
    try:
        thenable = to_thenable(target)
        if thenable is None:
            value = on_value(target)
        else:
            value = on_promise(thenable)
    except ProgrammingError:
        raise
    except Exception as error:
        return rejected(error)
    return as_promise(value)


def get(target, name):
    """Get a property of a promise or a value, in a future turn.

    Args:
        target: promise or value for target object.
        name (str): name of the attribute, or key of the mapping entry.
    Returns:
        Promise<*>: promise of the property value.
    """
    return _perform(target,
                    lambda promise: promise.get(name),
                    lambda value: get_property(value, name))


def call(target, method_name, *args, **kwargs):
    """Invoke a method of a promise or a value, in a future turn.

    Returns:
        Promise<*>: promise of the value returned by the method.
    """
    return _perform(
        target,
        lambda promise: promise.call(method_name, *args, **kwargs),
        lambda value: get_method(value, method_name)(*args, **kwargs))


def put(target, name, value):
    """Set a property of a promise or a value, in a future turn.

    Returns:
        Promise<*>: promise of the value set.
    """
    return _perform(target,
                    lambda promise: promise.put(name, value),
                    lambda obj: set_property(obj, name, value))


def _as_list(values):
    """A single iterable argument (other than a string, a mapping or a
    promise) holds the values."""
    if len(values) == 1:
        value = values[0]
        if isinstance(value, Iterable) and \
                not isinstance(value, (str, bytes, Mapping)) and \
                to_thenable(value) is None:
            return list(value)
    return list(values)


def _cancel_all(promises, reason):
    for promise in promises:
        if is_cancellable(promise):
            promise.cancel(reason)


def all(*values):
    """Create a Promise who waits a list of promises to be all fulfilled.

    The resulting Promise resolves when all of the promises are fulfilled,
    with the list of all the resulting values, keeping the order of the
    promise list.
    If a promise is rejected, the resulting promise is rejected with the
    same reason, all results from other promises are ignored, and the
    promises still pending are cancelled.

    Cancelling the resulting promise cancels the promises still pending.

    Args:
        *values: the promises (or plain values), or a single iterable of
            them.
    Returns:
        Promise<list>: fulfilled when all promises are fulfilled, or rejected
            as soon as one of the promises is rejected.
    """
    values = _as_list(values)
    results = [None] * len(values)
    remaining = len(values)
    finished = False
    lock = Lock()
    promises = []

    deferred = Deferred(lambda reason: _cancel_all(promises, reason),
                        _name='ALL')
    if not values:
        deferred.resolve(results)
        return deferred.promise

    def resolve_one(index, value):
        nonlocal remaining, finished
        with lock:
            if finished:
                return
            results[index] = value
            remaining -= 1
            if remaining:
                return
            finished = True
        deferred.resolve(results)

    def reject_one(error):
        nonlocal finished
        with lock:
            if finished:
                return
            finished = True
        deferred.reject(error)
        _cancel_all(promises, None)

    for index, value in enumerate(values):
        promises.append(when(value, partial(resolve_one, index), reject_one))

    # A rejection during the loop has missed the members added after it.
    if deferred.state == Deferred.REJECTED:
        _cancel_all(promises, None)
    return deferred.promise


def all_keys(mapping):
    """Like ``all()``, for the values of a mapping.

    Returns:
        Promise<dict>: fulfilled with a dict of the results, with the same
            keys as `mapping`.
    """
    keys = list(mapping.keys())

    def rebuild(values):
        return dict(zip(keys, values))

    return all([mapping[key] for key in keys]).then(rebuild)


def first(*values):
    """Settle with the first promise to be settled.

    The resulting Promise is fulfilled or rejected as soon as one of the
    promises is. All other outcomes are ignored. Without any promise, the
    resulting promise stays pending until cancelled.

    Cancelling the resulting promise cancels all promises.

    Args:
        *values: the promises (or plain values), or a single iterable of
            them.
    Returns:
        Promise<*>: the outcome of the fastest promise.
    """
    values = _as_list(values)
    finished = False
    lock = Lock()
    promises = []

    deferred = Deferred(lambda reason: _cancel_all(promises, reason),
                        _name='FIRST')

    def settle_once(settle, outcome):
        nonlocal finished
        with lock:
            if finished:
                return
            finished = True
        settle(outcome)

    for value in values:
        promises.append(when(value, partial(settle_once, deferred.resolve),
                             partial(settle_once, deferred.reject)))

    return deferred.promise


race = first


def seq(actions, initial_value=None):
    """Execute functions one after the other, each one receiving the result
    of the previous one.

    A function can return a plain value or a promise; a promise is awaited
    before calling the next function. If a function raises an exception, or
    returns a rejected promise, the next functions are not called.

    Cancelling the resulting promise stops the sequence: no function is
    called after the one currently running.

    Args:
        actions (list of callable): functions taking one argument.
        initial_value: argument of the first function.
    Returns:
        Promise<*>: the value returned by the last function.
    """
    actions = list(actions)
    cancelled = False

    def canceller(reason):
        nonlocal cancelled
        cancelled = True
        del actions[:]

    deferred = Deferred(canceller, _name='SEQ')

    def run(value):
        while not cancelled:
            if not actions:
                deferred.resolve(value)
                return
            action = actions.pop(0)
            try:
                value = action(value)
            except ProgrammingError:
                raise
            except Exception as error:
                deferred.reject(error)
                return
            thenable = to_thenable(value)
            if thenable is not None:
                thenable.then(run, on_error)
                return

    def on_error(error):
        if not cancelled:
            deferred.reject(error)

    run(initial_value)
    return deferred.promise


def delay(seconds):
    """Create a Promise fulfilled with None after a delay.

    Cancelling the promise stops the timer.

    Args:
        seconds (float): the delay.
    """
    def canceller(reason):
        timer.cancel()

    deferred = Deferred(canceller, _name='DELAY')
    timer = call_later(seconds, deferred.resolve, None)
    return deferred.promise


def _completion_callback(deferred):
    """Callback following the convention ``callback(error, *results)``."""
    def callback(error=None, *results):
        if error is not None:
            deferred.reject(error)
        elif len(results) > 1:
            deferred.resolve(list(results))
        else:
            deferred.resolve(results[0] if results else None)

    return callback


def _invoke(deferred, func, args, kwargs):
    try:
        func(*args, **kwargs)
    except ProgrammingError:
        raise
    except Exception as error:
        if deferred.state == Deferred.PENDING:
            deferred.reject(error)
        else:
            _logger.warning('%s raised an error after calling its callback',
                            getattr(func, '__name__', func), exc_info=True)
    return deferred.promise


def execute(func, *args, **kwargs):
    """Call a function who takes a completion callback as last argument, and
    returns a Promise instead.

    The callback follows the convention ``callback(error, *results)``: the
    promise is rejected if `error` is not None; otherwise it's fulfilled with
    the result, or the list of results if there are several.

    Args:
        func (callable): function to call.
        *args: arguments passed to func, before the callback.
        **kwargs: keywords arguments passed to func.
    Returns:
        Promise<*>: not cancellable.
    """
    deferred = Deferred(_name='EXECUTE %s' % getattr(func, '__name__', '???'))
    args = args + (_completion_callback(deferred),)
    return _invoke(deferred, func, args, kwargs)


def _declared_arity(func):
    """Number of positional parameters of func; None if it accepts *args."""
    arity = 0
    for param in inspect.signature(func).parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return None
        if param.kind in (param.POSITIONAL_ONLY,
                          param.POSITIONAL_OR_KEYWORD):
            arity += 1
    return arity


def convert_async(func, callback_not_declared=False):
    """Convert a function taking a completion callback into a function
    returning a Promise.

    The callback is passed as the last positional parameter declared by
    `func`: missing arguments are filled with None, extra arguments are
    dropped. If `callback_not_declared` is set, or if `func` takes variable
    positional arguments, the callback is appended after the arguments
    given by the caller.

    See ``execute()`` for the callback convention.

    Returns:
        callable: the wrapper.
    """
    arity = _declared_arity(func)
    if not callback_not_declared and arity == 0:
        raise ValueError('%s has no parameter for the completion callback'
                         % getattr(func, '__name__', func))

    @wraps(func)
    def wrapper(*args, **kwargs):
        deferred = Deferred(_name='ASYNC %s'
                            % getattr(func, '__name__', '???'))
        callback = _completion_callback(deferred)
        if callback_not_declared or arity is None:
            args = args + (callback,)
        else:
            args = args[:arity - 1] + (None,) * (arity - 1 - len(args))
            args = args + (callback,)
        return _invoke(deferred, func, args, kwargs)

    return wrapper
