# -*- coding: utf-8 -*-

from threading import Timer


def call_later(delay, callback, *args, **kwargs):
    """Execute a callback once, after a delay, in a new daemon thread.

    Args:
        delay (float): delay before the call, in seconds.
        callback (callable): function to execute.
        *args: arguments passed to callback.
        **kwargs: keywords arguments passed to callback.
    Returns:
        Timer: the started timer. ``cancel()`` prevents the call if it has
            not started yet.
    """
    timer = Timer(delay, callback, args=args, kwargs=kwargs)
    timer.name = 'Timer %s' % getattr(callback, '__name__', '???')
    timer.daemon = True
    timer.start()
    return timer
