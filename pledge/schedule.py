# -*- coding: utf-8 -*-

"""Timeouts and intervals that execute callbacks via promises."""

import logging
from threading import Lock

from .common.periodic_task import PeriodicTask
from .lazy_array import LazyArray
from .promise import Deferred, delay

_logger = logging.getLogger(__name__)

__all__ = ['delay', 'schedule', 'Schedule']


class _IntervalSource(object):
    """Source of a lazy array yielding the tick count at each interval.

    Each callback registered by `some()` is called at every tick, until it
    returns a true value.
    """

    def __init__(self, interval):
        self._lock = Lock()
        self._subscribers = []
        self._ticks = 0
        self._task = PeriodicTask('Schedule %ss' % interval, interval,
                                  self._tick)

    def some(self, callback):
        """Returns: Promise<bool>: fulfilled with True once callback returns
            a true value; rejected if callback raises an exception."""
        deferred = Deferred(_name='SCHEDULE %s'
                            % getattr(callback, '__name__', '???'))
        with self._lock:
            self._subscribers.append((callback, deferred))
        return deferred.promise

    def _tick(self, _task):
        with self._lock:
            self._ticks += 1
            ticks = self._ticks
            subscribers = list(self._subscribers)

        for callback, deferred in subscribers:
            try:
                done = callback(ticks)
            except Exception as error:
                self._remove(callback, deferred)
                deferred.reject(error)
                continue
            if done:
                self._remove(callback, deferred)
                deferred.resolve(True)

    def _remove(self, callback, deferred):
        with self._lock:
            self._subscribers.remove((callback, deferred))


class Schedule(LazyArray):
    """Infinite lazy array of ticks, produced at regular interval."""

    def __init__(self, interval):
        LazyArray.__init__(self, _IntervalSource(interval))
        self.source._task.start(immediate=False)

    def stop(self, join=False):
        """Stop the ticks. Pending iterations will never be settled."""
        self.source._task.stop(join)


def schedule(interval):
    """Returns a lazy array that iterates on every interval.

    Example:

        >>> ticks = schedule(0.5)
        >>> ticks.some(lambda count: count >= 3).result()  # ~1.5 seconds
        True
        >>> ticks.stop()

    Args:
        interval (float): length of each interval, in seconds.
    Returns:
        Schedule: lazy array of the tick counts.
    """
    return Schedule(interval)
