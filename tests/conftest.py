"""Shared fixtures: a minimal interception layer over plain attributes."""

import pytest

from depfx import notify_read, notify_write, set_dispatcher


class State:
    """Attribute reads call notify_read; attribute writes call notify_write."""

    def __init__(self, **values):
        object.__setattr__(self, "_values", dict(values))

    def __getattr__(self, name):
        values = object.__getattribute__(self, "_values")
        if name not in values:
            raise AttributeError(name)
        notify_read(self, name)
        return values[name]

    def __setattr__(self, name, value):
        old = self._values.get(name)
        self._values[name] = value
        notify_write(self, name, value, old)


@pytest.fixture
def make_state():
    return State


@pytest.fixture(autouse=True)
def _no_dispatcher():
    yield
    set_dispatcher(None)
