# tests/conftest.py
import pytest

from pystorelite import ErrorHandler, create_reducer, on
from counter import decrement, increment, sync


@pytest.fixture
def counter_reducer():
    """The counter transition built with create_reducer/on."""
    return create_reducer(
        0,
        on(increment, lambda n, _: n + 1),
        on(decrement, lambda n, _: n - 1),
        on(sync, lambda _, a: a.payload),
    )


@pytest.fixture
def reported_errors():
    return []


@pytest.fixture
def error_handler(reported_errors):
    """An ErrorHandler that records every error it handles instead of logging it."""
    handler = ErrorHandler(log_to_console=False)
    handler.register_handler(reported_errors.append)
    return handler
