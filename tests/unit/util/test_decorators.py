# pylint: disable=missing-docstring
import signal
import time

import pytest

from eventformatter.util.decorators import timeout


class TestTimeout:
    def test_returns_result_in_time(self):
        @timeout(seconds=1)
        def add(a, b):
            return a + b

        assert add(1, 2) == 3

    def test_raises_timeout_error(self):
        @timeout(seconds=1)
        def sleep():
            time.sleep(3)

        with pytest.raises(TimeoutError):
            sleep()

    def test_zero_seconds_disables_timeout(self):
        def function():
            return "result"

        assert timeout(seconds=0)(function) is function

    def test_restores_previous_handler(self):
        previous = signal.getsignal(signal.SIGALRM)

        @timeout(seconds=1)
        def function():
            return "result"

        function()
        assert signal.getsignal(signal.SIGALRM) == previous
        assert signal.alarm(0) == 0

    def test_keeps_function_name(self):
        @timeout(seconds=1)
        def named_function():
            pass

        assert named_function.__name__ == "named_function"
