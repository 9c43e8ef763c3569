# -*- coding: utf-8 -*-


class TimeoutError(Exception):
    """An operation could not be completed within the time allowed."""
    pass


class CancelError(Exception):
    """The operation has been cancelled before being settled."""
    pass


class ProgrammingError(Exception):
    """The promise API has been misused.

    These errors are never converted into rejections: they always propagate up
    to the faulty caller.
    """
    pass


class AlreadySettledError(ProgrammingError):
    """A Deferred has been resolved or rejected more than once."""
    pass
