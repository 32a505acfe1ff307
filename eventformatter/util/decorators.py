"""Decorators to use with eventformatter"""

import errno
import os
import signal
from functools import wraps


def timeout(seconds=100, error_message=os.strerror(errno.ETIME)):
    """Calls a function with a defined timeout.

    The timeout is implemented with :code:`SIGALRM` and therefore only works in the main thread.
    A value of :code:`0` for :code:`seconds` disables the timeout.
    """

    def decorator(func):
        if not seconds:
            return func

        def _handle_timeout(signum, frame):  # nosemgrep
            raise TimeoutError(error_message)

        @wraps(func)  # nosemgrep
        def wrapper(*args, **kwargs):
            previous_handler = signal.signal(signal.SIGALRM, _handle_timeout)
            signal.alarm(seconds)
            try:
                result = func(*args, **kwargs)
            finally:
                signal.alarm(0)
                signal.signal(signal.SIGALRM, previous_handler)
            return result

        return wrapper

    return decorator
