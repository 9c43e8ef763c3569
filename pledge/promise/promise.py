# -*- coding: utf-8 -*-

import abc
from collections.abc import Mapping
import logging

from .errors import ProgrammingError, TimeoutError

_logger = logging.getLogger(__name__)


def get_property(target, name):
    """Read an entry of a mapping, or an attribute of any other object."""
    if isinstance(target, Mapping):
        return target[name]
    return getattr(target, name)


def get_method(target, name):
    """Find the method `name` of an object.

    A mapping entry of that name is preferred; otherwise it's an attribute,
    so the methods of a mapping (`keys`, `get`, ...) can be called.
    """
    if isinstance(target, Mapping) and name in target:
        return target[name]
    return getattr(target, name)


def set_property(target, name, value):
    """Set an entry of a mapping, or an attribute of any other object.

    Returns:
        the value set.
    """
    if isinstance(target, Mapping):
        target[name] = value
    else:
        setattr(target, name, value)
    return value


class Promise(metaclass=abc.ABCMeta):
    """It represents an operation expected to be completed in the future.

    A Promise is a read-only handle on a value not yet known when the Promise
    is created. The value is observed by registering callbacks with
    ``then()``; they are called as soon as the outcome is known.

    This class defines the contract every future value must fulfill, and
    supplies the convenience operations, all expressed with ``then()``.
    Implementations must override ``then()``. Foreign implementations can be
    declared with ``Promise.register(cls)``.
    """

    __slots__ = ()

    def then(self, on_fulfilled=None, on_rejected=None, on_progress=None):
        """Create a new promise from callbacks called when this one settles.

        If the promise is fulfilled, the `on_fulfilled` callback will be
        called. Otherwise (the promise has been rejected), the `on_rejected`
        callback is called.
        In any case, the callback will define the state of the returned
        Promise. If the callback raises an exception, the new Promise is
        rejected. The callback can returns:
        - A value: the new promise will be fulfilled with this value.
        - Another Promise: when settled, it will transfer its state and
            result (or error) to the Promise returned by this method.

        If the matching callback is not defined, the outcome of this promise
        is transferred as is to the new promise.

        Args:
            on_fulfilled (callable, optional): receives the result of the
                promise as argument.
            on_rejected (callable, optional): receives the rejection reason of
                the promise as argument.
            on_progress (callable, optional): receives each progress update
                sent before the promise settles.
        Returns:
            Promise<*>: new promise depending of self.
        """
        raise ProgrammingError('Promise base class is abstract, then() must '
                               'be implemented by the Promise '
                               'implementation.')

    def get(self, name):
        """Fetch a property (attribute or mapping entry) of the result."""
        return self.then(lambda value: get_property(value, name))

    def put(self, name, value):
        """Set a property of the result; the new promise fulfills with value.
        """
        return self.then(lambda target: set_property(target, name, value))

    def call(self, name, *args, **kwargs):
        """Invoke the method `name` of the result.

        Returns:
            Promise<*>: promise of the value returned by the method.
        """
        return self.then(
            lambda target: get_method(target, name)(*args, **kwargs))

    def done(self, on_fulfilled):
        return self.then(on_fulfilled)

    success = done

    def fail(self, on_rejected):
        """Create a new promise with a callback called when an error occurs.

        Alias of `self.then(None, on_rejected)`

        Args:
            on_rejected (callable): Will be called with the rejection reason if
                `self` is rejected.
        returns:
            Promise<*>: new Promise chained to `self`. If `self` is fulfilled,
                the promised value will be the same as `self`. Otherwise, the
                value returned by the `on_rejected()` callback.
        """
        return self.then(None, on_rejected)

    error = fail
    catch = fail

    def progress(self, on_progress):
        return self.then(None, None, on_progress)

    def safeguard(self):
        """Catch all errors and log them with the most details possible.

        This method is aimed to protect the program from uncaught rejected
        Promise. Calling `safeguard()` after all chains are set marks the
        rejection as handled, and logs it as ERROR with the maximum of details
        possible.
        """
        def guard(error):
            if isinstance(error, BaseException):
                _logger.error('[SAFEGUARD] %r', self, exc_info=error)
            else:
                _logger.error('[SAFEGUARD] %r rejected with %r', self, error)

        self.then(None, guard)


class Cancellable(metaclass=abc.ABCMeta):
    """Capability of a future value whose operation can be aborted."""

    __slots__ = ()

    @abc.abstractmethod
    def cancel(self, reason=None):
        """Abort the operation, if it's not settled yet.

        Args:
            reason (optional): passed to the canceller of the operation.
        """


class FutureValue(Promise):
    """Consumer side of a Deferred.

    Instances are created by a Deferred, and are bound to it. They don't hold
    any state by themselves: all the methods delegate to the Deferred.

    All calls to the methods are thread-safe.
    """

    __slots__ = ('_deferred',)

    def __init__(self, deferred):
        self._deferred = deferred

    def then(self, on_fulfilled=None, on_rejected=None, on_progress=None):
        return self._deferred.then(on_fulfilled, on_rejected, on_progress)

    def result(self, timeout=None):
        """Wait for the result and returns it as soon as it's available.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be settled, in seconds. By default, it can wait
                indefinitely.
        Returns:
            *: value encapsulated, defined by the operation.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
            *: If the promise is rejected, the rejection cause is raised.
        """
        is_rejected, value = self._wait(timeout)
        if not is_rejected:
            return value
        if isinstance(value, BaseException):
            raise value
        raise TypeError('Promise rejected with non-exception value: %r'
                        % (value,))

    def exception(self, timeout=None):
        """Wait for the promise rejection and returns its error.

        Args:
            timeout (float, optional): if set, maximum time to wait the
                promise to be settled, in seconds.
        Returns:
            *: the reason of the rejection of the Promise.
            None: if the promise is fulfilled.
        Raises:
            TimeoutError: if the promise is not settled within the delay.
        """
        is_rejected, value = self._wait(timeout)
        return value if is_rejected else None

    def _wait(self, timeout):
        outcome = self._deferred.outcome(timeout)
        if outcome is None:
            raise TimeoutError('%r is still pending after %s seconds'
                               % (self, timeout))
        return outcome

    def __repr__(self):
        return 'Promise(%s)' % self._deferred.label()


class CancellableFutureValue(FutureValue, Cancellable):
    """Consumer side of a Deferred created with a canceller."""

    __slots__ = ()

    def cancel(self, reason=None):
        return self._deferred.cancel(reason)
