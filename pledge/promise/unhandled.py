# -*- coding: utf-8 -*-

"""Reporting of rejections nobody has observed.

When a Deferred is rejected, it asks the registry to watch it. After a grace
period, if no reject-callback has been attached anywhere along the chain, the
rejection is reported: it's logged as ERROR and sent to every subscriber.

    >>> from pledge.promise import unhandled_rejections
    >>> unhandled_rejections.grace_period = 0.5
    >>> unhandled_rejections.subscribe(lambda error: print(repr(error)))
"""

import logging

from ..common import config
from ..common.signal import Signal
from .timer import call_later

_logger = logging.getLogger(__name__)


class UnhandledRejectionRegistry(object):
    """Event channel of the unhandled rejections.

    Attributes:
        grace_period (float): delay, in seconds, given to the consumers to
            attach a reject-callback. Until explicitly set, the value comes
            from the config entry ``unhandled_grace_period``.
    """

    def __init__(self, grace_period=None):
        self._grace_period = grace_period
        self._signal = Signal()

    @property
    def grace_period(self):
        if self._grace_period is None:
            return config.get('unhandled_grace_period')
        return self._grace_period

    @grace_period.setter
    def grace_period(self, value):
        self._grace_period = value

    def subscribe(self, handler):
        """Register a handler, called with the reason of each report."""
        self._signal.connect(handler)

    def unsubscribe(self, handler):
        """Returns: bool: True if the handler was subscribed."""
        return self._signal.disconnect(handler)

    def once(self, handler):
        """Register a handler called only for the next report.

        Returns:
            callable: the registered wrapper, usable with ``unsubscribe()``.
        """
        def wrapper(error):
            if self.unsubscribe(wrapper):
                handler(error)

        self.subscribe(wrapper)
        return wrapper

    def watch(self, deferred, error):
        """Report the error if the deferred is still unhandled after the
        grace period.

        Returns:
            Timer: the timer of the delayed check.
        """
        def check_handled():
            if not deferred.handled:
                self.report(error)

        return call_later(self.grace_period, check_handled)

    def report(self, error):
        if config.get('log_unhandled'):
            if isinstance(error, BaseException):
                _logger.error('Unhandled rejection: %r', error,
                              exc_info=error)
            else:
                _logger.error('Unhandled rejection: %r', error)
        self._signal.fire(error)


unhandled_rejections = UnhandledRejectionRegistry()
