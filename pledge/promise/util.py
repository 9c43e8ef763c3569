# -*- coding: utf-8 -*-

from .promise import Cancellable, Promise


def is_thenable(value):
    """Check if an object is a future value, or is a plain "result".

    The promise module uses this function to differentiate chainable objects
    and direct return values, when using a callback who can returns both.

    Third-party implementations are recognized once declared with
    ``Promise.register()``.

    Returns:
        boolean: True if the value implements the Promise interface.
    """
    return isinstance(value, Promise)


def is_cancellable(value):
    """Check if an object (thenable) can be cancelled.

    Args:
        value: object to test, usually a Promise.
    Returns:
        boolean: True if it has the cancel capability, False if not.
    """
    return isinstance(value, Cancellable)
