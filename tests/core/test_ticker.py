"""
Ticker Tests

To run:
    pytest tests/core/test_ticker.py -v
"""

import threading

import pytest

from core.ticker import Ticker


@pytest.mark.unit
def test_invalid_interval():
    with pytest.raises(ValueError):
        Ticker(0, lambda: None)


@pytest.mark.unit
def test_calls_callback_repeatedly():
    calls = []
    done = threading.Event()

    def callback():
        calls.append(1)
        if len(calls) >= 3:
            done.set()

    ticker = Ticker(0.01, callback, name="TestTicker")
    ticker.start()

    assert done.wait(2.0)
    ticker.stop()
    assert ticker.is_running() is False


@pytest.mark.unit
def test_stop_is_idempotent():
    ticker = Ticker(0.01, lambda: None)
    ticker.stop()  # never started

    ticker.start()
    ticker.stop()
    ticker.stop()

    assert ticker.is_running() is False


@pytest.mark.unit
def test_callback_errors_keep_ticking():
    calls = []
    done = threading.Event()

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("first tick fails")
        done.set()

    ticker = Ticker(0.01, flaky)
    ticker.start()

    assert done.wait(2.0)
    ticker.stop()


@pytest.mark.unit
def test_stop_from_inside_callback():
    stopped = threading.Event()
    ticker = None

    def stop_self():
        ticker.stop()
        stopped.set()

    ticker = Ticker(0.01, stop_self)
    ticker.start()

    assert stopped.wait(2.0)
    assert ticker.is_running() is False
