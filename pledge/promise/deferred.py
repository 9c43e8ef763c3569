# -*- coding: utf-8 -*-

import logging
from threading import Condition

from .errors import (AlreadySettledError, CancelError, ProgrammingError,
                     TimeoutError)
from .promise import CancellableFutureValue, FutureValue
from .timer import call_later
from .unhandled import unhandled_rejections
from .util import is_thenable

_logger = logging.getLogger(__name__)


class _Listener(object):
    """Callbacks registered by one call to then(), and the Deferred of the
    promise returned by that call."""

    __slots__ = ('on_fulfilled', 'on_rejected', 'on_progress', 'deferred')

    def __init__(self, on_fulfilled, on_rejected, on_progress, deferred):
        self.on_fulfilled = on_fulfilled
        self.on_rejected = on_rejected
        self.on_progress = on_progress
        self.deferred = deferred


def _callback_name(on_fulfilled, on_rejected):
    if not on_rejected:
        return getattr(on_fulfilled, '__name__', '???')
    elif not on_fulfilled:
        return '<None, %s>' % getattr(on_rejected, '__name__', '???')
    return '<%s, %s>' % (getattr(on_fulfilled, '__name__', '???'),
                         getattr(on_rejected, '__name__', '???'))


class Deferred(object):
    """Producer side of a future value.

    A Deferred is the "creator" side of an async task, whereas its Promise
    represents the asynchronous value from the "consumer" side. Only the
    Deferred can settle the promise, exactly once, by calling ``resolve()``
    or ``reject()``. Before that, it can send any number of progress updates.

    If a canceller is given, the Deferred and its promise gain a ``cancel()``
    method. Without canceller, they have no such attribute.

    Listeners are notified in the order they have been registered. Listeners
    registered while the listeners are being notified are queued, and
    notified in turn; once the queue is flushed, the new listeners are
    notified immediately.

    All calls to the methods are thread-safe.

    Attributes:
        promise (Promise): the Promise associated to the Deferred.
    """

    PENDING = 'pending'
    FULFILLED = 'fulfilled'
    REJECTED = 'rejected'

    def __init__(self, canceller=None, _name=None):
        """
        Args:
            canceller (callable, optional): called with the reason when the
                Deferred is cancelled while pending. It may return the error
                to reject with; if it returns None, a CancelError is used.
            _name (str): if set, name used when converted to text.
        """
        self._state = self.PENDING
        self._result = None
        self._waiting = []  # None once all listeners have been notified.
        self._handled = False
        self._origin = None  # Deferred whose rejection was passed through.
        self._preempted = False
        self._timeout = None
        self._canceller = canceller
        self._condition = Condition()
        self._name = _name or getattr(canceller, '__name__', '???')

        if canceller is None:
            self.promise = FutureValue(self)
        else:
            self.promise = CancellableFutureValue(self)
            self.cancel = self._cancel

    @property
    def state(self):
        return self._state

    @property
    def handled(self):
        """True if a reject-callback has observed the rejection."""
        return self._handled

    @property
    def cancellable(self):
        return self._canceller is not None

    def resolve(self, value):
        """Fulfill the promise with the value.

        Raises:
            AlreadySettledError: if the Deferred is already settled. If it has
                been settled by a cancellation or a timeout, the value is
                ignored instead.
        """
        self._settle(self.FULFILLED, value)

    def reject(self, error, ignore_unhandled=False):
        """Reject the promise.

        Unless `ignore_unhandled` is set, if no listener handles the rejection
        within the grace period, it's reported as an unhandled rejection.

        Args:
            error: reason of the rejection, usually an exception.
            ignore_unhandled (bool): if True, never report the rejection.
        Returns:
            bool: True if the rejection has already been handled.
        Raises:
            AlreadySettledError: if the Deferred is already settled. If it has
                been settled by a cancellation or a timeout, the error is
                ignored instead.
        """
        if not isinstance(error, BaseException):
            _logger.warning('%r rejected with non-exception value: %r',
                            self, error)
        return self._reject(error, ignore_unhandled)

    def progress(self, update):
        """Send a progress update to the listeners, while pending.

        If a progress callback raises an exception, the promise returned by
        the matching ``then()`` is rejected with it. That promise then ignores
        the settlement of this Deferred.
        """
        # `_waiting` can be appended to whilst executing callbacks.
        index = 0
        while True:
            with self._condition:
                if self._state != self.PENDING or \
                        index >= len(self._waiting):
                    return
                listener = self._waiting[index]
            index += 1
            if listener.on_progress is None or \
                    listener.deferred.state != self.PENDING:
                continue
            try:
                listener.on_progress(update)
            except ProgrammingError:
                raise
            except Exception as error:
                _logger.debug('Progress callback of %r has raised an '
                              'exception', self, exc_info=True)
                listener.deferred._reject(error, _preempted=True)

    def then(self, on_fulfilled=None, on_rejected=None, on_progress=None):
        """Register callbacks; see ``Promise.then()``.

        Cancelling the returned promise cancels this Deferred.
        """
        child = Deferred(self.cancel if self.cancellable else None,
                         _name=_callback_name(on_fulfilled, on_rejected))
        listener = _Listener(on_fulfilled, on_rejected, on_progress, child)

        with self._condition:
            if self._waiting is not None:
                self._waiting.append(listener)
                return child.promise

        self._notify(listener)
        return child.promise

    def timeout(self, seconds=None):
        """Reject the promise if it's still pending after a delay.

        When the delay expires, the Deferred is cancelled with a TimeoutError
        as reason if it's cancellable; otherwise it's rejected with a
        TimeoutError. Only the first call arms the timer.

        Args:
            seconds (float, optional): delay before the timeout.
        Returns:
            Promise: the promise, if the timer has been armed by this call.
            float: the delay already armed, or None if there is none.
        """
        with self._condition:
            if seconds is None or self._timeout is not None:
                return self._timeout
            self._timeout = seconds

        call_later(seconds, self._on_timeout)
        return self.promise

    def resolver_callback(self, callback):
        """Wrap a function so its result settles this Deferred.

        Example:

            >>> df = Deferred()
            >>> call_later(0.1, df.resolver_callback(do_something))

        Returns:
            callable: calls `callback` with its own arguments, then resolves
                with the returned value, or rejects with the exception raised.
        """
        def resolver(*args, **kwargs):
            try:
                value = callback(*args, **kwargs)
            except ProgrammingError:
                raise
            except Exception as error:
                self.reject(error)
            else:
                self.resolve(value)

        return resolver

    def outcome(self, timeout=None):
        """Wait for the settlement.

        A rejection collected this way counts as handled.

        Args:
            timeout (float, optional): maximum time to wait, in seconds.
        Returns:
            tuple: (is_rejected, result or error); None if still pending
                after the timeout.
        """
        with self._condition:
            if self._state == self.PENDING:
                self._condition.wait(timeout)
            if self._state == self.PENDING:
                return None
            if self._state == self.REJECTED:
                self._mark_handled()
                return True, self._result
            return False, self._result

    def label(self):
        if self._state == self.REJECTED:
            state = 'R'
        elif self._state == self.FULFILLED:
            state = 'F'
        else:
            state = 'P'
        return '%s %s' % (self._name, state)

    def __repr__(self):
        return 'Deferred(%s)' % self.label()

    def _cancel(self, reason=None):
        if self._state != self.PENDING:
            return
        error = self._canceller(reason)
        if error is None:
            error = CancelError() if reason is None else CancelError(reason)
        _logger.debug('%r cancelled: %r', self, error)
        self._reject(error, _preempted=True)

    def _on_timeout(self):
        if self._state != self.PENDING:
            return
        error = TimeoutError('%r not settled after %s seconds'
                             % (self, self._timeout))
        if self.cancellable:
            self.cancel(error)
        else:
            self._reject(error, _preempted=True)

    def _reject(self, error, ignore_unhandled=False, _preempted=False):
        if not self._settle(self.REJECTED, error, _preempted):
            return self._handled
        if not ignore_unhandled and not self._handled:
            unhandled_rejections.watch(self, error)
        return self._handled

    def _pass_rejection(self, error, origin):
        """Reject with an error coming from another Deferred.

        Only the origin is watched for unhandled rejection. Handling the error
        from this Deferred marks the origin as handled.
        """
        with self._condition:
            if self._state == self.PENDING:
                self._origin = origin
        return self._reject(error, ignore_unhandled=True)

    def _settle(self, state, value, preempted=False):
        """Set the outcome, then notify the listeners outside of the lock.

        A Deferred settled by a cancellation, a timeout or a failing progress
        callback is "preempted": the later settlements are ignored.
        """
        with self._condition:
            if self._state != self.PENDING:
                if self._preempted or preempted:
                    _logger.debug('%r already settled; %s ignored: %r',
                                  self, state, value)
                    return False
                raise AlreadySettledError('%r has already been settled'
                                          % self)
            self._state = state
            self._result = value
            self._preempted = preempted
            self._condition.notify_all()

        # `_waiting` can be appended to whilst notifying listeners.
        index = 0
        while True:
            with self._condition:
                if index >= len(self._waiting):
                    # Free the references
                    self._waiting = None
                    break
                listener = self._waiting[index]
            index += 1
            self._notify(listener)
        return True

    def _mark_handled(self):
        deferred = self
        while deferred is not None and not deferred._handled:
            deferred._handled = True
            deferred = deferred._origin

    def _notify(self, listener):
        is_rejected = self._state == self.REJECTED
        if is_rejected:
            callback = listener.on_rejected
        else:
            callback = listener.on_fulfilled
        downstream = listener.deferred

        if downstream._preempted:
            # The consumer has given up on this outcome.
            if is_rejected and callback is not None:
                self._mark_handled()
            return

        if callback is None:
            if is_rejected:
                downstream._pass_rejection(self._result, self)
            else:
                downstream.resolve(self._result)
            return

        if is_rejected:
            self._mark_handled()
        try:
            new_result = callback(self._result)
        except ProgrammingError:
            raise
        except Exception as error:
            downstream.reject(error)
            return

        thenable = to_thenable(new_result)
        if thenable is None:
            downstream.resolve(new_result)
        else:
            thenable.then(downstream.resolve, downstream.reject)


def to_thenable(value):
    """Returns the promise of a value, or None if it's a plain value.

    A Deferred is considered through its promise.
    """
    if isinstance(value, Deferred):
        return value.promise
    if is_thenable(value):
        return value
    return None


def as_promise(value):
    """Returns the value if it's a promise; else an already fulfilled one."""
    thenable = to_thenable(value)
    if thenable is None:
        return resolved(value)
    return thenable


def defer(canceller=None):
    """Create a new Deferred.

    Args:
        canceller (callable, optional): if set, the Deferred is cancellable.
    """
    return Deferred(canceller)


def resolved(value):
    """Create a promise already fulfilled with the value."""
    deferred = Deferred(_name='RESOLVED')
    deferred.resolve(value)
    return deferred.promise


def rejected(error):
    """Create a promise already rejected for the reason specified."""
    deferred = Deferred(_name='REJECTED')
    deferred.reject(error)
    return deferred.promise
