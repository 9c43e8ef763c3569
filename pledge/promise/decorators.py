# -*- coding: utf-8 -*-

from functools import partial, wraps

from .combinators import when_call


def wrap_promise(f):
    """Decorator who converts the result in a Promise object.

    If the function decorated returns a promise, it's transmitted as is.
    Else, a new Promise is created with the returned value as result. If the
    function raises an exception, the Promise is rejected.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        return when_call(partial(f, *args, **kwargs))

    return wrapper
