# -*- coding: utf-8 -*-

from functools import wraps

from .deferred import Deferred, to_thenable
from .errors import ProgrammingError


def reduce_coroutine(safeguard=False):
    """Decorator who converts a coroutine of promises into a single promise.

    The greatest interest is the ability to write a function in an
    synchronous-like style, using many asynchronous Promises.
    Whatever is the number of Promises or async calls used, the result will
    always be an unique Promise wrapping the whole process.

    Each promise yielded is awaited: its result is sent back to the
    generator, or its rejection reason is raised inside the generator.
    The first non-promise value yielded, or the value returned by the
    generator, is the result. If the generator returns nothing, the result is
    the value of the last promise yielded.

    Example:

        >>> @reduce_coroutine()
        ... def fetch_user_name(user_id):
        ...     user = yield load_user(user_id)
        ...     return user['name']

    Args:
        safeguard (boolean): if true, use `Promise.safeguard()` on the
            resulting promise.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            """
            Args:
                *args
                **kwargs
            Returns:
                Promise<*>
            """
            df = Deferred(_name='COROUTINE %s' % func.__name__)
            if safeguard:
                df.promise.safeguard()

            try:
                # Create generator; Initialization phase
                gen = func(*args, **kwargs)
            except ProgrammingError:
                raise
            except Exception as error:
                df.reject(error)
                return df.promise

            def _call_next_or_set_result(value):
                promise = to_thenable(value)
                if promise is None:
                    gen.close()
                    df.resolve(value)
                else:
                    promise.then(iter_next, iter_error)

            def iter_next(value):
                try:
                    next_value = gen.send(value)
                except StopIteration as stop:
                    return df.resolve(value if stop.value is None
                                      else stop.value)
                except ProgrammingError:
                    raise
                except Exception as error:
                    return df.reject(error)
                _call_next_or_set_result(next_value)

            def iter_error(error):
                if not isinstance(error, BaseException):
                    return df.reject(error)
                try:
                    next_value = gen.throw(error)
                except StopIteration as stop:
                    return df.resolve(stop.value)
                except ProgrammingError:
                    raise
                except Exception as err:
                    return df.reject(err)
                _call_next_or_set_result(next_value)

            # Start and resolve loop.
            try:
                first_value = next(gen)
            except StopIteration as stop:
                df.resolve(stop.value)
                return df.promise
            except ProgrammingError:
                raise
            except Exception as error:
                df.reject(error)
                return df.promise
            _call_next_or_set_result(first_value)

            return df.promise

        return wrapper
    return decorator
