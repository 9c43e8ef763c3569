# -*- coding: utf-8 -*-

import logging
from threading import Lock

_logger = logging.getLogger(__name__)


class Signal(object):
    """Utility class to register and call callbacks.

    It's a variation of the Observer pattern: the object handling the
    callbacks is an attribute of the class which own the signal, not the class
    itself. Such class can have several signals, each one representing a
    distinct event (eg: rejection_unhandled).

    Handlers are called in the order they have been connected. A handler
    connected or disconnected while the signal is fired takes effect at the
    next fire. An exception raised by a handler is logged, and doesn't prevent
    the other handlers from being called.

    Example:

        >>> class Observable(object):
        ...     def __init__(self):
        ...         self.status_changed = Signal()
        >>>
        >>> def callback(new_status):
        ...     print('Status has changed: %s' % new_status)
        >>>
        >>> elm = Observable()
        >>> elm.status_changed.connect(callback)
        >>> elm.status_changed.fire('STATUS OK')
        Status has changed: STATUS OK
    """

    def __init__(self):
        self._handlers = []
        self._lock = Lock()

    def connect(self, handler):
        """Register a handler/callback to the signal.

        Args:
            handler (callable): handler which will be called each time the
                signal is fired.
        """
        with self._lock:
            self._handlers.append(handler)

    def fire(self, *args, **kwargs):
        with self._lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception('Signal handler %r has raised an exception',
                                  handler)

    def disconnect(self, handler):
        """Remove/disconnect a callback.

        Args:
            handler (callable): callback to disconnect
        Returns:
            bool: True if the handler was connected; False otherwise.
        """
        with self._lock:
            try:
                self._handlers.remove(handler)
                return True
            except ValueError:
                return False

    def disconnect_all(self):
        """Remove all handler/callback registered."""
        with self._lock:
            self._handlers = []

    def __len__(self):
        with self._lock:
            return len(self._handlers)
